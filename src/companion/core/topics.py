"""
Topic clustering over conversation turns.

Each observed utterance is reduced to content keywords and assigned to a
named cluster:

    - a known label from TOPIC_CATALOGUE when any of its keywords appear,
    - otherwise an existing cluster whose keywords overlap enough,
    - otherwise a new cluster named after the most salient keyword.

Utterances with no content keywords go to the "general" cluster.
"""

from __future__ import annotations

import logging
import time
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, Tuple

from ..content.lexicon import GENERAL_TOPIC, STOPWORDS, TOPIC_CATALOGUE
from .config import DEFAULT_CONFIG, CompanionConfig
from .utils import overlap_coefficient, tokenize

logger = logging.getLogger(__name__)

MIN_KEYWORD_LENGTH = 3
MIN_STEM_LENGTH = 4

NEUTRAL_SIMILARITY = 0.5
DISJOINT_SIMILARITY = 0.2
TRANSITION_WEIGHT = 0.1


@dataclass
class TopicCluster:
    cluster_name: str
    visit_count: int = 1
    last_visited: float = 0.0
    keywords: Set[str] = field(default_factory=set)
    sequence: int = 0

    def to_dict(self) -> Dict:
        return {
            "cluster_name": self.cluster_name,
            "visit_count": self.visit_count,
            "last_visited": self.last_visited,
            "keywords": sorted(self.keywords),
        }


@dataclass(frozen=True)
class TopicTransition:
    """A suggested move from one cluster to a related one."""
    from_topic: str
    to_topic: str
    shared_keywords: Tuple[str, ...]
    relevance: float

    def to_dict(self) -> Dict:
        return {
            "from_topic": self.from_topic,
            "to_topic": self.to_topic,
            "shared_keywords": list(self.shared_keywords),
            "relevance": round(self.relevance, 3),
        }


def content_keywords(text: Optional[str]) -> List[str]:
    """Tokens left after dropping stopwords and very short words, in order."""
    return [
        t for t in tokenize(text)
        if t not in STOPWORDS and len(t) >= MIN_KEYWORD_LENGTH
    ]


def catalogue_label(tokens: List[str]) -> Optional[str]:
    """Best matching known topic label, or None."""
    best_label, best_hits = None, 0
    for label, words in TOPIC_CATALOGUE.items():
        hits = sum(1 for t in tokens if t in words)
        if hits > best_hits:
            best_label, best_hits = label, hits
    return best_label


def salient_keyword(keywords: List[str]) -> str:
    """Most frequent keyword; ties go to the longer, then the earlier one."""
    counts = Counter(keywords)
    first_seen = {}
    for i, k in enumerate(keywords):
        first_seen.setdefault(k, i)
    return min(counts, key=lambda k: (-counts[k], -len(k), first_seen[k]))


def shares_stem(keyword: str, name: str) -> bool:
    """True for "guitar" / "guitars", but not for "car" / "cartoons"."""
    if min(len(keyword), len(name)) < MIN_STEM_LENGTH:
        return False
    return keyword.startswith(name) or name.startswith(keyword)


class TopicClusteringSystem:
    """Per-session set of topic clusters with visit counts."""

    def __init__(
        self,
        config: Optional[CompanionConfig] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config or DEFAULT_CONFIG
        self.clock = clock
        self._clusters: Dict[str, TopicCluster] = {}
        self._sequence = 0

    def observe(self, turn_text: Optional[str]) -> str:
        """Assign the utterance to a cluster and return the cluster name."""
        keywords = content_keywords(turn_text)
        if not keywords:
            return self._visit(GENERAL_TOPIC, set())

        kw_set = set(keywords)
        label = catalogue_label(tokenize(turn_text))
        if label is not None:
            return self._visit(label, kw_set)

        match = self._best_overlap(kw_set)
        if match is not None:
            return self._visit(match, kw_set)
        return self._visit(salient_keyword(keywords), kw_set)

    def _best_overlap(self, kw_set: Set[str]) -> Optional[str]:
        best_name, best_score = None, 0.0
        for name, cluster in self._clusters.items():
            if name == GENERAL_TOPIC:
                continue
            name_terms = set(name.split())
            score = overlap_coefficient(kw_set, cluster.keywords | name_terms)
            # shared stem with the cluster name ("guitar" / "guitars")
            if any(shares_stem(k, name) for k in kw_set):
                score = max(score, 1.0)
            if score > best_score:
                best_name, best_score = name, score
        if best_score >= self.config.topic_overlap_threshold:
            return best_name
        return None

    def _visit(self, name: str, keywords: Set[str]) -> str:
        self._sequence += 1
        cluster = self._clusters.get(name)
        if cluster is None:
            cluster = TopicCluster(
                cluster_name=name,
                last_visited=self.clock(),
                keywords=set(keywords),
                sequence=self._sequence,
            )
            self._clusters[name] = cluster
            logger.info(f"New topic cluster: {name!r}")
        else:
            cluster.visit_count += 1
            cluster.last_visited = self.clock()
            cluster.keywords |= keywords
            cluster.sequence = self._sequence
        return name

    def get_active_clusters(self) -> List[TopicCluster]:
        """Most recently visited first; ties go to the higher visit count."""
        return sorted(
            self._clusters.values(),
            key=lambda c: (-c.last_visited, -c.visit_count, -c.sequence),
        )

    def get_dominant_cluster(self) -> Optional[TopicCluster]:
        if not self._clusters:
            return None
        return max(self._clusters.values(), key=lambda c: (c.visit_count, c.sequence))

    def get_cluster(self, name: str) -> Optional[TopicCluster]:
        return self._clusters.get(name)

    def get_statistics(self) -> Dict[str, int]:
        return {c.cluster_name: c.visit_count for c in self.get_active_clusters()}

    # -------------------------------------------------------------------------
    # Read-only queries
    # -------------------------------------------------------------------------

    def identify_topics(self, text: Optional[str]) -> List[str]:
        """
        Topics mentioned in ``text``, without recording a visit.

        Catalogue labels come first, in catalogue order, followed by any
        existing cluster whose stored keywords appear in the text.
        """
        tokens = set(tokenize(text))
        if not tokens:
            return []
        found = [label for label, words in TOPIC_CATALOGUE.items() if tokens & set(words)]
        for cluster in self.get_active_clusters():
            if cluster.cluster_name not in found and tokens & cluster.keywords:
                found.append(cluster.cluster_name)
        return found

    def topic_similarity(self, text_a: Optional[str], text_b: Optional[str]) -> float:
        """Jaccard similarity of the topics of two utterances, in [0, 1]."""
        topics_a = set(self.identify_topics(text_a))
        topics_b = set(self.identify_topics(text_b))
        if not topics_a and not topics_b:
            return NEUTRAL_SIMILARITY
        if not topics_a or not topics_b:
            return DISJOINT_SIMILARITY
        return len(topics_a & topics_b) / len(topics_a | topics_b)

    def suggest_transitions(self, name: str) -> List[TopicTransition]:
        """
        Clusters related to ``name`` through shared keywords, most related
        first. An unknown name yields an empty list.
        """
        current = self._clusters.get(name)
        if current is None:
            return []
        transitions = []
        for cluster in self.get_active_clusters():
            if cluster.cluster_name == name:
                continue
            shared = tuple(sorted(current.keywords & cluster.keywords))
            if shared:
                transitions.append(TopicTransition(
                    from_topic=name,
                    to_topic=cluster.cluster_name,
                    shared_keywords=shared,
                    relevance=TRANSITION_WEIGHT * len(shared),
                ))
        # stable sort keeps recency order among equal relevance
        transitions.sort(key=lambda t: -len(t.shared_keywords))
        return transitions

    def reset_clusters(self) -> None:
        self._clusters.clear()
        self._sequence = 0

    def __len__(self) -> int:
        return len(self._clusters)
