#!/usr/bin/env python3
"""
Entry point for running a ready-made conversation.

Usage:
    python -m duologue.run comedy                    # Two-agent chat
    python -m duologue.run onboarding                # Sequential chats (asks for your input)
    python -m duologue.run reflection --max-turns 2  # Nested review chats
"""
import argparse
import sys

from duologue.config import get_settings
from duologue.llm import gather_usage_summary
from duologue.logging import log_error, log_header, log_usage_summary
from duologue.scenarios import SCENARIOS


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run a multi-agent conversation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m duologue.run comedy --max-turns 3
    python -m duologue.run onboarding
    python -m duologue.run reflection --model claude-sonnet-4-20250514
        """
    )

    parser.add_argument(
        "scenario",
        choices=sorted(SCENARIOS),
        help="Conversation to run"
    )

    parser.add_argument(
        "--max-turns",
        type=int,
        default=None,
        help="Cap the number of exchanges per chat"
    )

    parser.add_argument(
        "--model",
        default=None,
        help=f"Model name (default: {get_settings().DEFAULT_MODEL})"
    )

    parser.add_argument(
        "--silent",
        action="store_true",
        help="Do not print messages while the chats run"
    )

    args = parser.parse_args(argv)

    missing = get_settings().validate()
    if missing:
        log_error(f"Missing environment variables: {missing}")
        return 1

    kwargs = {"model": args.model, "silent": args.silent}
    if args.max_turns is not None:
        kwargs["max_turns"] = args.max_turns

    log_header(f"Scenario: {args.scenario}")
    results = SCENARIOS[args.scenario](**kwargs)

    for result in results:
        print(f"\nChat {result.chat_id if result.chat_id is not None else '-'} summary:")
        print(f"  {result.summary}")

    cost = results[-1].cost if results else gather_usage_summary([])
    log_usage_summary(
        "agents in the last chat",
        cost["usage_excluding_cached_inference"],
        cost["usage_including_cached_inference"],
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
