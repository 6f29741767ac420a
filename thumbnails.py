"""Drive thumbnail resolver with a local read-through cache.

Runnable standalone to warm the cache for every published talk:
    python thumbnails.py
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from urllib.parse import urljoin

import requests
from dotenv import load_dotenv

TALKS_DIR = os.getenv("TALKS_DIR", "_talks")
THUMBNAIL_CACHE_DIR = os.getenv("THUMBNAIL_CACHE_DIR", "assets/images/thumbnails")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

THUMBNAIL_URL = "https://lh3.googleusercontent.com/d/{file_id}=w{width}-h{height}"
THUMBNAIL_WIDTH = 400
THUMBNAIL_HEIGHT = 300
MAX_REDIRECTS = 5
REDIRECT_STATUSES = frozenset({301, 302, 303, 307, 308})

_DRIVE_FILE_ID = re.compile(r"/d/([a-zA-Z0-9_-]+)")
_DRIVE_LINK = re.compile(r"\[[^\]]*\]\((https://drive\.google\.com/file/d/[^)\s]+)\)")

LOGGER = logging.getLogger(__name__)


def extract_drive_file_id(url: str) -> str | None:
    match = _DRIVE_FILE_ID.search(url)
    return match.group(1) if match else None


def thumbnail_url(file_id: str) -> str:
    return THUMBNAIL_URL.format(file_id=file_id, width=THUMBNAIL_WIDTH, height=THUMBNAIL_HEIGHT)


def resolve_thumbnail(file_id: str, cache_dir: Path | str = THUMBNAIL_CACHE_DIR) -> Path | None:
    """Return a local thumbnail for a Drive file, downloading it on a cache miss.

    Redirects are followed by hand, at most MAX_REDIRECTS hops. None means
    "no thumbnail available" and is never an error for callers.
    """
    cached = Path(cache_dir) / f"{file_id}.png"
    if cached.exists():
        return cached

    url = thumbnail_url(file_id)
    hops = 0
    while True:
        try:
            response = requests.get(url, allow_redirects=False, timeout=REQUEST_TIMEOUT_SECONDS)
        except requests.RequestException as exc:
            LOGGER.warning("Thumbnail request failed for file_id=%s: %s", file_id, exc)
            return None

        if response.status_code not in REDIRECT_STATUSES:
            break

        location = response.headers.get("Location")
        if not location:
            LOGGER.warning("Redirect without Location for file_id=%s", file_id)
            return None
        if hops >= MAX_REDIRECTS:
            LOGGER.warning("Too many redirects for file_id=%s", file_id)
            return None
        hops += 1
        url = urljoin(url, location)

    if not 200 <= response.status_code <= 299:
        LOGGER.warning("No thumbnail for file_id=%s (HTTP %s)", file_id, response.status_code)
        return None

    cached.parent.mkdir(parents=True, exist_ok=True)
    cached.write_bytes(response.content)
    LOGGER.info("Cached thumbnail for file_id=%s at %s", file_id, cached)
    return cached


def warm_thumbnail_cache(
    talks_dir: Path | str = TALKS_DIR,
    cache_dir: Path | str = THUMBNAIL_CACHE_DIR,
) -> dict[str, Path | None]:
    """Resolve a thumbnail for the first Drive link of every talk artifact."""
    results: dict[str, Path | None] = {}
    for artifact in sorted(Path(talks_dir).glob("*.md")):
        match = _DRIVE_LINK.search(artifact.read_text(encoding="utf-8"))
        if not match:
            continue
        file_id = extract_drive_file_id(match.group(1))
        if file_id:
            results[artifact.stem] = resolve_thumbnail(file_id, cache_dir)
    return results


def main() -> None:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    results = warm_thumbnail_cache()
    print(f"\n{'TALK':<60} {'THUMBNAIL'}")
    print("-" * 90)
    for talk, path in results.items():
        print(f"{talk[:60]:<60} {path or 'unavailable'}")


if __name__ == "__main__":
    main()
