"""
Quick demo script: run the companion locally.

Usage:
    python scripts/run_demo.py           # start the API server
    python scripts/run_demo.py --chat    # chat in the terminal
"""

import sys

import uvicorn


def chat():
    from companion.core.agent import CompanionAgent
    from companion.core.emotion import EmotionDetector

    agent = CompanionAgent()
    print(agent.start_session()["message"])
    print("(type 'exit' to leave)")
    while True:
        try:
            text = input("\nYou: ")
        except (EOFError, KeyboardInterrupt):
            break
        result = agent.step(text)
        print(f"Companion: {result.reply}")
        print(f"  [{result.emotion.primary_emotion.value}, "
              f"{EmotionDetector.describe_intensity(result.intensity)} | "
              f"{result.state.value} | {result.topic}]")
        if result.state.value == "closing":
            break


def main():
    if "--chat" in sys.argv[1:]:
        chat()
        return

    print("=" * 60)
    print("  Companion Dialogue: rule-based supportive chat")
    print("=" * 60)
    print()
    print("Starting server at http://localhost:8000")
    print("API docs: http://localhost:8000/docs")
    print("Press Ctrl+C to stop.")
    print()

    uvicorn.run(
        "companion.api.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )


if __name__ == "__main__":
    main()
