"""Talk page fetching and HTML parsing."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

import requests
from bs4 import BeautifulSoup

from errors import FetchError, ParseError

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class TalkPage:
    """A fetched page: its URL, raw HTML and parsed document."""

    url: str
    html: str
    soup: BeautifulSoup

    @property
    def text(self) -> str:
        return self.soup.get_text()


def fetch_talk_page(url: str) -> TalkPage:
    """GET a page once and parse it.

    Redirects are not followed here; steps that need indirection (embed
    pages, thumbnails) handle it themselves.

    Raises:
        FetchError: transport failure or a status outside 200-299.
        ParseError: the body is empty or cannot be parsed as HTML.
    """
    LOGGER.info("Fetching talk page: %s", url)
    try:
        response = requests.get(url, timeout=REQUEST_TIMEOUT_SECONDS, allow_redirects=False)
    except requests.RequestException as exc:
        raise FetchError(f"Request failed when fetching {url}: {exc}") from exc

    if not 200 <= response.status_code <= 299:
        raise FetchError(f"HTTP {response.status_code} when fetching {url}")

    return TalkPage(url=url, html=response.text, soup=parse_html(response.text, url))


def parse_html(html: str, url: str = "") -> BeautifulSoup:
    if not html or not html.strip():
        raise ParseError(f"Empty response body from {url}")
    try:
        soup = BeautifulSoup(html, "html.parser")
    except Exception as exc:  # bs4 surfaces parser-specific exception types
        raise ParseError(f"Failed to parse HTML from {url}: {exc}") from exc
    if soup.find() is None:
        raise ParseError(f"No HTML elements found in response from {url}")
    return soup
