"""Tests for pipeline configuration and shared helpers."""

import dataclasses
import logging

import pytest

from companion.core import config as cfg
from companion.core.config import DEFAULT_CONFIG, CompanionConfig
from companion.core.utils import clamp, normalize_text, overlap_coefficient, pick, tokenize


class TestCompanionConfig:
    def test_defaults_match_constants(self):
        assert DEFAULT_CONFIG.high_empathy_threshold == cfg.HIGH_EMPATHY_THRESHOLD == 0.7
        assert DEFAULT_CONFIG.high_intensity_threshold == cfg.HIGH_INTENSITY_THRESHOLD == 0.85
        assert DEFAULT_CONFIG.reinforcement_turn_threshold == cfg.REINFORCEMENT_TURN_THRESHOLD == 4
        assert DEFAULT_CONFIG.topic_overlap_threshold == 0.5

    def test_from_env_overrides(self):
        config = CompanionConfig.from_env({
            "COMPANION_HIGH_EMPATHY_THRESHOLD": "0.6",
            "COMPANION_REINFORCEMENT_TURN_THRESHOLD": "2",
        })
        assert config.high_empathy_threshold == pytest.approx(0.6)
        assert config.reinforcement_turn_threshold == 2
        assert isinstance(config.reinforcement_turn_threshold, int)
        assert config.high_intensity_threshold == 0.85

    def test_from_env_ignores_invalid(self, caplog):
        with caplog.at_level(logging.WARNING, logger="companion.core.config"):
            config = CompanionConfig.from_env({"COMPANION_HIGH_EMPATHY_THRESHOLD": "lots"})
        assert config.high_empathy_threshold == 0.7
        assert "COMPANION_HIGH_EMPATHY_THRESHOLD" in caplog.text

    def test_from_env_ignores_blank(self):
        assert CompanionConfig.from_env({"COMPANION_TOPIC_OVERLAP_THRESHOLD": "  "}) == DEFAULT_CONFIG

    @pytest.mark.parametrize("raw,expected", [
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("", logging.INFO),
    ])
    def test_log_level_from_env(self, raw, expected):
        assert cfg.log_level_from_env({"COMPANION_LOG_LEVEL": raw}) == expected

    def test_log_level_invalid_keeps_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger="companion.core.config"):
            level = cfg.log_level_from_env({"COMPANION_LOG_LEVEL": "verbose"})
        assert level == logging.INFO
        assert "COMPANION_LOG_LEVEL" in caplog.text
        assert cfg.log_level_from_env({}) == logging.INFO

    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_CONFIG.high_empathy_threshold = 0.1


class TestUtils:
    def test_normalize_text(self):
        assert normalize_text("  Hello   WORLD ") == "hello world"
        assert normalize_text(None) == ""

    def test_tokenize_keeps_apostrophes(self):
        assert tokenize("I'm NOT okay!") == ["i'm", "not", "okay"]

    def test_clamp(self):
        assert clamp(1.5) == 1.0
        assert clamp(-0.2) == 0.0
        assert clamp(0.4) == 0.4

    def test_overlap_coefficient(self):
        assert overlap_coefficient({"a", "b"}, {"b", "c", "d"}) == 0.5
        assert overlap_coefficient(set(), {"a"}) == 0.0

    def test_pick_wraps(self):
        assert pick(("a", "b"), 3) == "b"
