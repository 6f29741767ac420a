"""Speaker batch migration: discover every talk on a profile and migrate each."""

from __future__ import annotations

import logging
import os
import re
import time
from typing import Callable
from urllib.parse import urljoin, urlparse

from errors import MigrationError
from migrate import TalkMigrator
from models import MigrationOutcome
from regression import run_regression_tests
from talk_page import fetch_talk_page

BATCH_PAUSE_SECONDS = float(os.getenv("BATCH_PAUSE_SECONDS", "1"))

# Talk pages look like /<6-char id>/<title-slug>.
_TALK_PATH = re.compile(r"/[a-zA-Z0-9]{6}/[\w-]+$")
_GENERIC_PAGE = re.compile(r"/(about|contact|speaking)$", re.IGNORECASE)
_VIDEO_ONLY = re.compile(r"/videos/")

LOGGER = logging.getLogger(__name__)


def discover_talk_urls(profile_url: str) -> list[str]:
    """Fetch the speaker profile once and return its talk URLs, deduplicated in page order.

    Raises:
        FetchError, ParseError: the profile page could not be loaded.
    """
    page = fetch_talk_page(profile_url)
    host = urlparse(profile_url).hostname

    talk_urls: list[str] = []
    for link in page.soup.find_all("a", href=True):
        href = link["href"].strip()
        if href.startswith("/"):
            href = urljoin(profile_url, href)

        if urlparse(href).hostname != host:
            continue
        if href.rstrip("/") == profile_url.rstrip("/"):
            continue
        if _GENERIC_PAGE.search(href) or _VIDEO_ONLY.search(href):
            continue
        if _TALK_PATH.search(urlparse(href).path):
            talk_urls.append(href)

    talk_urls = list(dict.fromkeys(talk_urls))
    LOGGER.info("Found %s talks on %s", len(talk_urls), profile_url)
    return talk_urls


class SpeakerMigrator:
    """Migrates all of a speaker's talks, isolating per-talk failures.

    Talks run sequentially with regression tests deferred to a single run
    after the last talk. One talk failing never stops the others.
    """

    def __init__(
        self,
        profile_url: str,
        migrator_factory: Callable[[], TalkMigrator] = TalkMigrator,
        test_runner: Callable[[], bool] = run_regression_tests,
        pause_seconds: float = BATCH_PAUSE_SECONDS,
    ) -> None:
        self.profile_url = profile_url
        self.migrator_factory = migrator_factory
        self.test_runner = test_runner
        self.pause_seconds = pause_seconds
        self.tests_passed: bool | None = None

    def migrate_all(self) -> MigrationOutcome:
        outcome = MigrationOutcome()
        LOGGER.info("STARTING SPEAKER MIGRATION for %s", self.profile_url)

        try:
            talk_urls = discover_talk_urls(self.profile_url)
        except MigrationError as exc:
            LOGGER.error("Error discovering talks: %s", exc)
            return outcome

        if not talk_urls:
            LOGGER.error("No talks found for speaker")
            return outcome

        for index, talk_url in enumerate(talk_urls, start=1):
            LOGGER.info("MIGRATING TALK %s/%s: %s", index, len(talk_urls), talk_url)
            if self._migrate_one(talk_url):
                outcome.succeeded.append(talk_url)
                LOGGER.info("SUCCESS: %s", talk_url)
            else:
                outcome.failed.append(talk_url)
                LOGGER.error("FAILED: %s", talk_url)

            if index < len(talk_urls):
                time.sleep(self.pause_seconds)

        self.tests_passed = self.test_runner()
        LOGGER.info(
            "Speaker migration complete: total=%s succeeded=%s failed=%s success_rate=%s%%",
            outcome.total,
            len(outcome.succeeded),
            len(outcome.failed),
            outcome.success_rate,
        )
        return outcome

    def _migrate_one(self, talk_url: str) -> bool:
        try:
            result = self.migrator_factory().migrate(talk_url, run_tests=False)
        except Exception as exc:  # a crash fails this talk only
            LOGGER.exception("Unexpected error migrating %s: %s", talk_url, exc)
            return False
        return result.success


def format_summary(outcome: MigrationOutcome) -> str:
    """Human-readable batch summary: counts, success rate and both URL lists."""
    lines = [
        "MIGRATION SUMMARY",
        "=" * 50,
        f"{'Total talks processed':<28} {outcome.total:>6}",
        f"{'Successfully migrated':<28} {len(outcome.succeeded):>6}",
        f"{'Failed migrations':<28} {len(outcome.failed):>6}",
        f"{'Success rate':<28} {outcome.success_rate:>5}%",
    ]
    if outcome.succeeded:
        lines.append("\nSuccessfully migrated talks:")
        lines.extend(f"   {i}. {url}" for i, url in enumerate(outcome.succeeded, start=1))
    if outcome.failed:
        lines.append("\nFailed to migrate:")
        lines.extend(f"   {i}. {url}" for i, url in enumerate(outcome.failed, start=1))
        lines.append("\nRe-run individual talk migrations to debug specific failures")
    return "\n".join(lines)
