"""CLI entrypoint for migrating talks off the legacy speaking platform."""

from __future__ import annotations

import argparse
import logging
import sys

from dotenv import load_dotenv

from batch import SpeakerMigrator, format_summary
from migrate import TalkMigrator


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line flags."""
    parser = argparse.ArgumentParser(
        description="Migrate a talk page (or every talk of a speaker) into a Markdown talk file",
        epilog=(
            "Examples:\n"
            "  python main.py https://speaking.jbaru.ch/PjlHKD/robocoders-judgment-day-ai-ides-face-off\n"
            "  python main.py --speaker https://speaking.jbaru.ch"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("url", help="Talk URL, or the speaker profile URL with --speaker")
    parser.add_argument(
        "--speaker",
        action="store_true",
        help="Discover and migrate all talks listed on the speaker profile page",
    )
    parser.add_argument(
        "--skip-tests",
        action="store_true",
        help="Do not run the regression tests after a single-talk migration",
    )
    return parser.parse_args(argv)


def run_single(url: str, skip_tests: bool) -> bool:
    result = TalkMigrator().migrate(url, run_tests=not skip_tests)
    if not result.success:
        print("MIGRATION FAILED")
        print("\nERRORS:")
        for index, error in enumerate(result.errors, start=1):
            print(f"   {index}. {error}")
        print("\nFIX THESE ISSUES AND TRY AGAIN")
        return False

    print("\nMIGRATION SUCCESSFUL" if result.tests_passed is not False else "\nMIGRATION COMPLETED WITH TEST FAILURES")
    print(f"Generated: {result.artifact_path}")
    print(f"Resources: {len(result.resources)} extracted")
    return True


def run_speaker(url: str) -> bool:
    outcome = SpeakerMigrator(url).migrate_all()
    print()
    print(format_summary(outcome))
    return outcome.success


def main(argv: list[str] | None = None) -> int:
    """Initialize config and run the requested migration mode."""
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)

    if not args.url.startswith(("http://", "https://")):
        print("Error: URL must start with http:// or https://")
        return 1

    success = run_speaker(args.url) if args.speaker else run_single(args.url, args.skip_tests)
    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
