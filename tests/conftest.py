from __future__ import annotations

from typing import Callable
from unittest.mock import MagicMock

import pytest

from talk_page import TalkPage, parse_html

TALK_URL = "https://speaking.jbaru.ch/PjlHKD/robocoders-judgment-day-ai-ides-face-off"

ABSTRACT = (
    "AI-powered IDEs promise to write our code for us. We put four of them head to head "
    "on a real-world codebase and measured what actually happened."
)

SAMPLE_TALK_HTML = f"""
<html>
  <head><title>Robocoders: Judgment Day</title></head>
  <body>
    <nav><a href="https://github.com/nav-only">GitHub profile</a></nav>
    <h1>Robocoders: Judgment Day – AI IDEs Face Off</h1>
    <p>A presentation at Devoxx Poland 2025 in June 2025 in Kraków, Poland by Baruch Sadogursky</p>
    <time datetime="2025-06-11T10:00:00+02:00">June 11, 2025</time>
    <p>{ABSTRACT}</p>
    <section id="resources">
      <ul class="resource-list">
        <li><h3><a href="https://github.com/jbaruch/robocoders">Demo repository</a></h3></li>
        <li><h3><a href="https://example.com/blog/ai-ides">AI IDE comparison post</a></h3></li>
        <li><h3><a href="https://github.com/jbaruch/robocoders">Demo repo (again)</a></h3></li>
      </ul>
    </section>
    <a href="https://on.notist.cloud/pdf/deck-abc123.pdf">Download slides</a>
    <iframe src="https://www.youtube.com/embed/ignored"></iframe>
    <a href="https://www.youtube.com/watch?v=dQw4w9WgXcQ&amp;t=42">Watch</a>
    <footer><a href="https://twitter.com/jbaruch">Twitter</a></footer>
  </body>
</html>
"""


def make_page(html: str, url: str = TALK_URL) -> TalkPage:
    return TalkPage(url=url, html=html, soup=parse_html(html, url))


def mock_response(status_code: int = 200, text: str = "", content: bytes = b"", headers: dict | None = None) -> MagicMock:
    """Return a mock requests.Response."""
    mock = MagicMock()
    mock.status_code = status_code
    mock.text = text
    mock.content = content
    mock.headers = headers or {}
    return mock


@pytest.fixture
def page_factory() -> Callable[..., TalkPage]:
    return make_page


@pytest.fixture
def sample_page() -> TalkPage:
    return make_page(SAMPLE_TALK_HTML)
