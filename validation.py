"""Provenance checks on resources and structural checks on written artifacts."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from urllib.parse import urlparse

from artifact import RESOURCES_HEADING
from errors import ValidationError
from models import Resource, ResourceList, ResourceType, TalkRecord
from video import youtube_video_id

DRIVE_HOSTS: tuple[str, ...] = ("drive.google.com", "docs.google.com")
YOUTUBE_HOSTS: tuple[str, ...] = ("youtube.com", "youtu.be")
# The platform talks are being migrated away from.
LEGACY_HOSTS: tuple[str, ...] = ("notist.cloud", "notist.ninja", "noti.st", "speaking.jbaru.ch")

_FRONT_MATTER = re.compile(r"\A---\s*\n")
_H1_LINE = re.compile(r"^#\s+.+", re.MULTILINE)

LOGGER = logging.getLogger(__name__)


def validate_resource_sources(resources: ResourceList | list[Resource]) -> None:
    """Check each resource's host against its type's provenance rule.

    Stops at the first violation.

    Raises:
        ValidationError: slides not on Google Drive, or a video not on YouTube.
    """
    for index, resource in enumerate(resources, start=1):
        url = resource.url
        if resource.type is ResourceType.SLIDES:
            if _mentions(url, DRIVE_HOSTS):
                LOGGER.info("   Slides from Google Drive: %s", url)
            elif _is_local_pdf(url):
                LOGGER.warning("   Local PDF slides (needs Google Drive upload): %s", url)
            elif _mentions(url, LEGACY_HOSTS):
                raise ValidationError(
                    f"SLIDES FROM LEGACY PLATFORM: Resource {index} '{resource.title}' uses legacy "
                    f"slides: {url}. Slides must be uploaded to Google Drive."
                )
            else:
                raise ValidationError(
                    f"INVALID SLIDES SOURCE: Resource {index} '{resource.title}' slides not from Google Drive: {url}"
                )
        elif resource.type is ResourceType.VIDEO:
            if not _mentions(url, YOUTUBE_HOSTS):
                raise ValidationError(
                    f"INVALID VIDEO SOURCE: Resource {index} '{resource.title}' video not from YouTube: {url}"
                )
            if not youtube_video_id(url):
                raise ValidationError(
                    f"INVALID VIDEO SOURCE: Resource {index} '{resource.title}' has no YouTube video id: {url}"
                )
        elif _mentions(url, LEGACY_HOSTS):
            LOGGER.info("   Legacy talk link (will migrate later): %s", url)

    LOGGER.info("Resource sources validated - no legacy dependencies for slides/videos")


def validate_artifact(path: Path, record: TalkRecord, resources: ResourceList) -> None:
    """Re-read the written artifact and check its structure against the record.

    Raises:
        ValidationError: on the first structural problem found.
    """
    if not path.exists():
        raise ValidationError(f"Generated talk file does not exist: {path}")

    content = path.read_text(encoding="utf-8")

    if _FRONT_MATTER.match(content):
        raise ValidationError("File should be markdown-only, no YAML frontmatter allowed")
    if not _H1_LINE.search(content):
        raise ValidationError("Missing title in markdown body (should start with # heading)")
    if record.conference not in content:
        raise ValidationError("Missing conference information in markdown")
    if record.date not in content:
        raise ValidationError("Missing date information in markdown")

    others = resources.others()
    if others and RESOURCES_HEADING not in content:
        raise ValidationError(
            f"Missing Resources section in markdown (expected due to {len(others)} resources)"
        )

    LOGGER.info("Migration validation passed: %s resources, markdown-only format", len(resources))


def _mentions(url: str, hosts: tuple[str, ...]) -> bool:
    return any(host in url for host in hosts)


def _is_local_pdf(url: str) -> bool:
    return not urlparse(url).scheme and url.endswith(".pdf")
