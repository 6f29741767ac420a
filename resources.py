"""Resource classification and extraction from a talk page's Resources section."""

from __future__ import annotations

import logging
import re

from models import Resource, ResourceList, ResourceType
from talk_page import TalkPage

RESOURCE_LINK_SELECTOR = "#resources .resource-list li h3 a"
MIN_TITLE_LENGTH = 3

# Schemes that can never be a resource link, regardless of title.
_REJECTED_SCHEMES: tuple[str, ...] = ("javascript:", "data:", "file:", "mailto:")

# Checked in order; first match wins.
_TYPE_PATTERNS: tuple[tuple[re.Pattern[str], ResourceType], ...] = (
    (re.compile(r"github\.com"), ResourceType.CODE),
    (re.compile(r"docs\.google\.com/presentation"), ResourceType.SLIDES),
    (re.compile(r"drive\.google\.com.*\.pdf"), ResourceType.SLIDES),
    (re.compile(r"youtube\.com|youtu\.be"), ResourceType.VIDEO),
)

LOGGER = logging.getLogger(__name__)


def classify_resource(url: str) -> ResourceType:
    """Return the resource type implied by the URL's shape."""
    for pattern, resource_type in _TYPE_PATTERNS:
        if pattern.search(url):
            return resource_type
    return ResourceType.LINK


def extract_resources(page: TalkPage, resources: ResourceList | None = None) -> ResourceList:
    """Collect resources from the page's Resources section only.

    Links anywhere else on the page (navigation, footers, body text) are
    ignored. Titles are trimmed but hrefs with surrounding whitespace are
    treated as malformed and skipped. Repeated URLs are dropped without
    touching the resource already collected.
    """
    if resources is None:
        resources = ResourceList()

    for link in page.soup.select(RESOURCE_LINK_SELECTOR):
        href = link.get("href")
        title = link.get_text().strip()
        if not _is_candidate(href, title):
            continue

        resource = Resource(type=classify_resource(href), title=title, url=href)
        if not resources.add(resource):
            LOGGER.info("Skipping duplicate resource: %s", href)

    LOGGER.info("Found %s resources in Resources section", len(resources))
    for index, resource in enumerate(resources, start=1):
        LOGGER.info("  %s. %s: %s (%s)", index, resource.type.value, resource.title, resource.url)
    return resources


def _is_candidate(href: str | None, title: str) -> bool:
    if not href:
        return False
    if href.startswith("#") or href.startswith("/"):
        return False
    if len(title) < MIN_TITLE_LENGTH:
        return False
    if href != href.strip():
        return False
    if href.lower().startswith(_REJECTED_SCHEMES):
        return False
    return True
