"""Talk metadata extraction built from ordered fallback heuristics.

Date and conference are each resolved by a list of independent strategies,
``(TalkPage) -> str | None``, tried in order; the first non-None value wins.
"""

from __future__ import annotations

import json
import logging
import os
import re
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Iterable
from urllib.parse import urlparse

from errors import ExtractionError
from models import TalkRecord
from slugs import slugify
from talk_page import TalkPage

Strategy = Callable[[TalkPage], str | None]

TALKS_DIR = os.getenv("TALKS_DIR", "_talks")
PDF_DIR = os.getenv("PDF_DIR", "pdfs")

UNKNOWN_SPEAKER = "Unknown Speaker"
MIN_ABSTRACT_LENGTH = 100
MAX_CONFERENCE_WORDS = 6
MAX_CONFERENCE_LENGTH = 100

# Speaking-platform domains: who speaks there and the fallback event name.
SPEAKER_DOMAINS: dict[str, str] = {
    "speaking.jbaru.ch": "Baruch Sadogursky",
}
SPEAKING_PLATFORM_CONFERENCE = "Speaking Event"
STRUCTURED_DATA_CONFERENCE = "Conference Event"

_PRESENTATION_AT = re.compile(r"A presentation at\s+([^.\n]+?)\s+in\s+")
_TRAILING_YEAR_CLAUSE = re.compile(r"\s+(in|on)\s+\d{4}.*$")
_HTML_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")

# Phrases that betray a capture running into slide text.
_SLIDE_PHRASES: tuple[str, ...] = ("Hello!", "Employee")

KNOWN_CONFERENCE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"Devoxx\s+\w+\s+\d{4}"),
    re.compile(r"Voxxed\s+Days\s+\w+\s+\d{4}"),
    re.compile(r"DevOps\s+Days\s+\w+\s+\d{4}"),
    re.compile(r"API:World\s+\d{4}"),
    re.compile(r"DevOps\s+Vision\s+\d{4}"),
)

_ISO_DATE_PREFIX = re.compile(r"^(\d{4}-\d{2}-\d{2})")
_HUMAN_DATE = re.compile(r"([A-Za-z]+\.?\s+\d{1,2},\s+\d{4})")
_ISO_DATE = re.compile(r"(\d{4}-\d{2}-\d{2})")
_HUMAN_DATE_FORMATS = ("%B %d, %Y", "%b %d, %Y", "%b. %d, %Y")

LOGGER = logging.getLogger(__name__)


def extract_metadata(
    page: TalkPage,
    talks_dir: Path | str = TALKS_DIR,
    pdf_dir: Path | str = PDF_DIR,
) -> TalkRecord:
    """Build a TalkRecord from the page.

    Title, conference and date are required. A missing title fails at once;
    conference and date failures are both reported before failing.

    Raises:
        ExtractionError: a required field has no successful heuristic.
    """
    record = TalkRecord(source_url=page.url)

    title = extract_title(page)
    if not title:
        raise ExtractionError("No title found (missing h1 element)")
    record.title = title

    errors: list[str] = []

    conference = first_match(conference_strategies(), page)
    if conference:
        record.conference = conference
    else:
        errors.append("No conference found in page")

    found_date = first_match(date_strategies(conference, talks_dir, pdf_dir), page)
    if found_date:
        record.date = found_date
    else:
        errors.append("No specific date found in page or existing files")

    if errors:
        raise ExtractionError(*errors)

    record.speaker = speaker_for_url(page.url)
    record.abstract = extract_abstract(page)

    LOGGER.info(
        "Metadata extracted: title=%r date=%s conference=%r speaker=%r",
        record.title,
        record.date,
        record.conference,
        record.speaker,
    )
    return record


def first_match(strategies: Iterable[Strategy], page: TalkPage) -> str | None:
    for strategy in strategies:
        value = strategy(page)
        if value:
            LOGGER.info("   %s -> %s", strategy.__name__, value)
            return value
    return None


def extract_title(page: TalkPage) -> str | None:
    heading = page.soup.find("h1")
    if heading is None:
        return None
    return " ".join(heading.get_text().split()) or None


def extract_abstract(page: TalkPage) -> str:
    for paragraph in page.soup.find_all("p"):
        text = paragraph.get_text().strip()
        if len(text) > MIN_ABSTRACT_LENGTH:
            return text
    return ""


def speaker_for_url(url: str) -> str:
    return SPEAKER_DOMAINS.get(_host(url), UNKNOWN_SPEAKER)


# ---------------------------------------------------------------------------
# Conference strategies
# ---------------------------------------------------------------------------

def conference_strategies() -> list[Strategy]:
    return [
        conference_from_presentation_line,
        conference_from_known_patterns,
        conference_from_structured_data,
        conference_from_platform_domain,
    ]


def conference_from_presentation_line(page: TalkPage) -> str | None:
    """Read X from "A presentation at X in <place>"."""
    match = _PRESENTATION_AT.search(page.text)
    if not match:
        return None

    name = _TRAILING_YEAR_CLAUSE.sub("", match.group(1).strip())
    name = " ".join(name.split()[:MAX_CONFERENCE_WORDS])
    name = _WHITESPACE.sub(" ", _HTML_TAG.sub("", name)).strip()

    if len(name) > MAX_CONFERENCE_LENGTH or any(phrase in name for phrase in _SLIDE_PHRASES):
        LOGGER.warning("Conference capture looks like slide content, ignoring: %r", name)
        return None
    return name or None


def conference_from_known_patterns(page: TalkPage) -> str | None:
    text = page.text
    for pattern in KNOWN_CONFERENCE_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(0)
    return None


def conference_from_structured_data(page: TalkPage) -> str | None:
    """Placeholder name when JSON-LD describes a presentation or talk."""
    for script in page.soup.find_all("script", attrs={"type": "application/ld+json"}):
        try:
            data = json.loads(script.string or "")
        except json.JSONDecodeError:
            continue
        if not isinstance(data, dict):
            continue
        description = data.get("description")
        if isinstance(description, str) and ("presentation" in description or "talk" in description):
            return STRUCTURED_DATA_CONFERENCE
    return None


def conference_from_platform_domain(page: TalkPage) -> str | None:
    if _host(page.url) in SPEAKER_DOMAINS:
        return SPEAKING_PLATFORM_CONFERENCE
    return None


# ---------------------------------------------------------------------------
# Date strategies
# ---------------------------------------------------------------------------

def date_strategies(
    conference: str | None,
    talks_dir: Path | str = TALKS_DIR,
    pdf_dir: Path | str = PDF_DIR,
) -> list[Strategy]:
    strategies: list[Strategy] = []
    if conference:
        strategies.append(date_from_existing_files(conference, talks_dir, pdf_dir))
    strategies.extend([date_from_time_element, date_from_page_text])
    return strategies


def date_from_existing_files(conference: str, talks_dir: Path | str, pdf_dir: Path | str) -> Strategy:
    """Reuse the date of an earlier artifact or PDF for the same conference."""
    conference_slug = slugify(conference)

    def date_from_existing_files(page: TalkPage) -> str | None:
        if not conference_slug:
            return None
        candidates = sorted(Path(talks_dir).glob(f"*{conference_slug}*.md"))
        candidates += sorted(Path(pdf_dir).glob(f"*{conference_slug}*.pdf"))
        for path in candidates:
            match = _ISO_DATE_PREFIX.match(path.name)
            if match and normalize_date(match.group(1)):
                return match.group(1)
        return None

    return date_from_existing_files


def date_from_time_element(page: TalkPage) -> str | None:
    element = page.soup.find("time", attrs={"datetime": True})
    if element is None:
        return None
    return normalize_date(element["datetime"])


def date_from_page_text(page: TalkPage) -> str | None:
    text = page.text
    for pattern in (_HUMAN_DATE, _ISO_DATE):
        for match in pattern.finditer(text):
            parsed = normalize_date(match.group(1))
            if parsed:
                return parsed
    return None


def normalize_date(raw: str) -> str | None:
    """Return ``YYYY-MM-DD`` for ISO dates/datetimes or "Month D, YYYY" text.

    ISO datetimes keep the calendar date as written, without converting
    the offset to UTC.
    """
    value = _WHITESPACE.sub(" ", raw.strip())
    if not value:
        return None

    if _ISO_DATE_PREFIX.match(value):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
        except ValueError:
            pass
        try:
            return date.fromisoformat(value[:10]).isoformat()
        except ValueError:
            return None

    for fmt in _HUMAN_DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def _host(url: str) -> str:
    return (urlparse(url).hostname or "").lower()
