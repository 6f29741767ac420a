"""Slug and filename helpers for artifacts and downloaded PDFs."""

from __future__ import annotations

import re

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")

ARTIFACT_TITLE_SLUG_MAX = 50
PDF_TITLE_SLUG_MAX = 31

CONFERENCE_SLUG_FALLBACK = "event"
TITLE_SLUG_FALLBACK = "talk"


def slugify(value: str, max_length: int | None = None, fallback: str = "") -> str:
    """Lowercase ASCII slug with single hyphens and no edge hyphens."""
    normalized = value.encode("ascii", "ignore").decode("ascii").lower()
    slug = SLUG_PATTERN.sub("-", normalized).strip("-")
    if max_length is not None and len(slug) > max_length:
        slug = slug[:max_length].rstrip("-")
    return slug or fallback


def talk_basename(date: str, conference: str, title: str, title_max: int) -> str:
    conference_slug = slugify(conference, fallback=CONFERENCE_SLUG_FALLBACK)
    title_slug = slugify(title, title_max, fallback=TITLE_SLUG_FALLBACK)
    return f"{date}-{conference_slug}-{title_slug}"


def artifact_filename(date: str, conference: str, title: str) -> str:
    return talk_basename(date, conference, title, ARTIFACT_TITLE_SLUG_MAX) + ".md"


def pdf_filename(date: str, conference: str, title: str) -> str:
    return talk_basename(date, conference, title, PDF_TITLE_SLUG_MAX) + ".pdf"
