"""Video resolution: direct YouTube links, embed indirection, embed markers."""

from __future__ import annotations

import logging
import os
import re
from urllib.parse import parse_qs, urlparse

import requests

from models import Resource, ResourceList, ResourceType, TalkRecord, TalkStatus
from talk_page import TalkPage

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

NOTIST_EMBED_URL = "https://notist.ninja/embed/{embed_id}"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v={video_id}"

_YOUTUBE_LINKS: tuple[re.Pattern[str], ...] = (
    re.compile(r"https?://(?:www\.)?youtube\.com/watch\?v=([a-zA-Z0-9_-]+)"),
    re.compile(r"https?://youtu\.be/([a-zA-Z0-9_-]+)"),
)
_NOTIST_EMBED = re.compile(r"notist\.ninja/embed/([a-zA-Z0-9_-]+)")
_YOUTUBE_EMBED = re.compile(r"youtube\.com/embed/([a-zA-Z0-9_-]+)")
_VIDEO_MARKER = 'id="video"'

VIDEO_TITLE = "Full Presentation Video"
VIDEO_DESCRIPTION = "Complete video recording"

LOGGER = logging.getLogger(__name__)


def resolve_video(page: TalkPage, record: TalkRecord, resources: ResourceList) -> Resource | None:
    """Set ``record.status`` and head-insert a video resource when one is usable.

    A missing video is not a failure: the talk becomes ``video-pending``.
    """
    video_url = find_youtube_url(page.html)
    if video_url:
        LOGGER.info("Video found: %s", video_url)
        return _attach_video(video_url, record, resources)

    embed = _NOTIST_EMBED.search(page.html)
    if embed:
        video_url = youtube_url_from_embed(embed.group(1))
        if video_url:
            LOGGER.info("Video found (converted from embed player): %s", video_url)
            return _attach_video(video_url, record, resources)
        # The embed proves a recording exists even though we cannot link it.
        LOGGER.warning("Embed player found but no YouTube id recovered; marking completed without video resource")
        record.status = TalkStatus.COMPLETED
        return None

    if _VIDEO_MARKER in page.html:
        LOGGER.info("Video detected (embedded/other format)")
        record.status = TalkStatus.COMPLETED
        return None

    LOGGER.warning("No video found - setting status to video-pending")
    record.status = TalkStatus.VIDEO_PENDING
    return None


def find_youtube_url(html: str) -> str | None:
    """First direct YouTube watch or short link in the raw HTML, minus extra query params."""
    for pattern in _YOUTUBE_LINKS:
        match = pattern.search(html)
        if match:
            return match.group(0)
    return None


def youtube_url_from_embed(embed_id: str) -> str | None:
    """Fetch the embed player page once and recover the YouTube watch URL."""
    embed_url = NOTIST_EMBED_URL.format(embed_id=embed_id)
    try:
        response = requests.get(embed_url, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        LOGGER.warning("Error fetching embed page %s: %s", embed_url, exc)
        return None

    if response.status_code != 200:
        LOGGER.warning("Failed to fetch embed page %s (%s)", embed_url, response.status_code)
        return None

    match = _YOUTUBE_EMBED.search(response.text)
    if not match:
        return None
    return YOUTUBE_WATCH_URL.format(video_id=match.group(1))


def youtube_video_id(url: str) -> str | None:
    """Bare video id from watch, short-link or embed URLs."""
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    if host == "youtu.be":
        video_id = parsed.path.lstrip("/").split("/")[0]
    elif host.endswith("youtube.com"):
        if parsed.path.startswith("/embed/"):
            video_id = parsed.path[len("/embed/"):].split("/")[0]
        else:
            video_id = parse_qs(parsed.query).get("v", [""])[0]
    else:
        return None
    return video_id or None


def _attach_video(video_url: str, record: TalkRecord, resources: ResourceList) -> Resource:
    record.status = TalkStatus.COMPLETED
    video = Resource(
        type=ResourceType.VIDEO,
        title=VIDEO_TITLE,
        url=video_url,
        description=VIDEO_DESCRIPTION,
    )
    if not resources.prepend_video(video):
        LOGGER.warning("Skipping duplicate video resource: %s", video_url)
    return video
