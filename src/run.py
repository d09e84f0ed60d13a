"""
Adaptive Quiz: terminal front end.

Usage:
    python -m src.run quiz --tag algebra --difficulty 2
    python -m src.run dashboard
    python -m src.run analytics
"""

import argparse
import sys
from typing import Callable, Optional

from .config import config, configure_logging
from .exceptions import (
    AccessDeniedError,
    AnswerValidationError,
    BackendError,
    NoItemsFoundError,
    NotAuthenticatedError,
)
from .orchestrator import QuizOrchestrator
from .services import AnalyticsService, DashboardService
from .utils.persistence import get_gateway

HINT_COMMAND = "/hint"
QUIT_COMMAND = "/quit"


# ==================== Quiz ====================

def _format_question(orchestrator: QuizOrchestrator) -> str:
    session = orchestrator.session
    item = session.current_item
    lines = [
        f"Question {session.current_index + 1} of {session.total_items}"
        f"  |  score {session.score}  |  difficulty {item.difficulty}/5",
        f"[{', '.join(item.tags)}]",
        item.prompt,
    ]
    if item.type == "mcq" and item.options:
        lines.extend(f"  {i}. {option}" for i, option in enumerate(item.options, start=1))
    return "\n".join(lines)


def _resolve_option(orchestrator: QuizOrchestrator, text: str) -> str:
    """Allow answering multiple-choice items by option number."""
    item = orchestrator.session.current_item
    if item.type == "mcq" and item.options and text.strip().isdigit():
        index = int(text.strip()) - 1
        if 0 <= index < len(item.options):
            return item.options[index]
    return text


def run_quiz(
    orchestrator: QuizOrchestrator,
    tag: Optional[str] = None,
    difficulty: Optional[int] = None,
    ask: Callable[[str], str] = input,
    say: Callable[[str], None] = print,
) -> Optional[dict]:
    """
    Play a quiz interactively.

    Returns:
        The session summary, or None if the learner quit early
    """
    session = orchestrator.start_quiz(tag=tag, difficulty=difficulty)

    while True:
        while not session.completed:
            say(_format_question(orchestrator))
            while not session.result_shown:
                text = ask("> ")
                if text.strip() == QUIT_COMMAND:
                    return None
                if text.strip() == HINT_COMMAND:
                    hint = session.toggle_hint()
                    say(f"Hint: {hint}" if hint else "(hint hidden)")
                    continue
                try:
                    result = orchestrator.submit_answer(_resolve_option(orchestrator, text))
                except AnswerValidationError as e:
                    say(str(e))
                    continue
                if result.correct:
                    say("Correct! Great job!")
                else:
                    say(f"Incorrect. Correct answer: {result.correct_answer}")
                say(f"Explanation: {result.explanation}")
            orchestrator.advance()

        summary = session.summary()
        say(
            f"Quiz completed! Score {summary['score']}/{summary['attempts']} "
            f"({summary['accuracy_percent']}%)"
        )
        if ask("Retry quiz? [y/N] ").strip().lower() != "y":
            return summary
        orchestrator.retry()


# ==================== Reports ====================

def show_dashboard(service: DashboardService, say: Callable[[str], None] = print) -> None:
    data = service.load()
    profile = data["profile"]
    if profile is None:
        say("No learning profile yet.")
    else:
        say(f"Attempts: {profile.total_attempts}  Accuracy: {data['accuracy_percent']}%")
        say(f"Streak: {profile.current_streak} (best {profile.longest_streak})")
        for tag, value in sorted(profile.mastery_by_tag.items()):
            say(f"  {tag:<20} {value:.0%}")
    for quiz in data["quizzes"]:
        say(f"Quiz: {quiz.get('title')}")
    if data["is_instructor"]:
        say("Instructor tools available: analytics")


def show_analytics(service: AnalyticsService, say: Callable[[str], None] = print) -> None:
    report = service.report()
    say(
        f"Attempts: {report['total_attempts']}  Students: {report['total_students']}  "
        f"Average accuracy: {report['average_accuracy']}%"
    )
    say("Performance by tag:")
    for row in report["performance_by_tag"]:
        say(f"  {row['tag']:<20} {row['accuracy']:>3}%  ({row['attempts']} attempts)")
    say("Last 7 days:")
    for row in report["recent_activity"]:
        say(f"  {row['date']:<8} {row['attempts']:>4} attempts  {row['accuracy']:>3}%")
    say("Top performers:")
    for row in report["top_performers"]:
        say(f"  {row['name']:<20} {row['accuracy']:>3}%  ({row['attempts']} attempts)")


# ==================== Entry Point ====================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Adaptive quiz client")
    parser.add_argument("--log-level", default=config.logging.log_level)
    sub = parser.add_subparsers(dest="command", required=True)

    quiz = sub.add_parser("quiz", help="Take a quiz")
    quiz.add_argument("--tag", help="Only questions with this tag")
    quiz.add_argument("--difficulty", type=int, choices=range(1, 6), help="Difficulty 1-5")

    sub.add_parser("dashboard", help="Show your learning profile")
    sub.add_parser("analytics", help="Instructor analytics")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    try:
        gateway = get_gateway()
        gateway.sign_in()
        if args.command == "quiz":
            run_quiz(QuizOrchestrator(gateway), tag=args.tag, difficulty=args.difficulty)
        elif args.command == "dashboard":
            show_dashboard(DashboardService(gateway))
        elif args.command == "analytics":
            show_analytics(AnalyticsService(gateway))
    except (NotAuthenticatedError, AccessDeniedError, NoItemsFoundError) as e:
        print(str(e), file=sys.stderr)
        return 1
    except BackendError as e:
        print(f"Backend error: {e}", file=sys.stderr)
        return 2
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    sys.exit(main())
