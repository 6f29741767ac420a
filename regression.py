"""Post-migration regression gate: runs the project's test command."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path

MIGRATION_TEST_COMMAND = os.getenv("MIGRATION_TEST_COMMAND", "pytest -q")
PROJECT_ROOT = Path(__file__).resolve().parent

LOGGER = logging.getLogger(__name__)


def run_regression_tests(command: str | None = None, cwd: Path | str = PROJECT_ROOT) -> bool:
    """Run the test command from the project root; True iff it exits 0.

    The result is informational only and never touches files already written.
    """
    args = shlex.split(command or MIGRATION_TEST_COMMAND)
    LOGGER.info("Running migration tests from %s: %s", cwd, " ".join(args))

    try:
        completed = subprocess.run(args, cwd=cwd, check=False)
    except OSError as exc:
        LOGGER.error("Could not start migration tests: %s", exc)
        return False

    if completed.returncode == 0:
        LOGGER.info("Migration tests PASSED")
        return True

    LOGGER.error(
        "Migration tests FAILED (exit code %s); the migration may be incomplete",
        completed.returncode,
    )
    return False
