from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import requests

from conftest import make_page, mock_response
from errors import FetchError, UploadError
from models import Resource, ResourceList, ResourceType, TalkRecord
from pdf_ingest import find_pdf_urls, ingest_pdf

DRIVE_URL = "https://drive.google.com/file/d/FILE123/view"


def _record() -> TalkRecord:
    return TalkRecord(
        source_url="https://speaking.jbaru.ch/PjlHKD/robocoders",
        title="Robocoders: Judgment Day",
        date="2025-06-11",
        conference="Devoxx Poland 2025",
    )


def _store(url: str = DRIVE_URL) -> MagicMock:
    store = MagicMock()
    store.upload.return_value = url
    return store


def test_find_pdf_urls_direct_links_and_cdn_without_duplicates() -> None:
    page = make_page(
        '<html><body><a href="/files/deck.pdf">Deck</a>'
        '<a href="https://on.notist.cloud/pdf/deck-1.pdf">CDN</a>'
        '<img data-src="https://on.notist.cloud/pdf/deck-1.pdf"></body></html>',
        url="https://speaking.jbaru.ch/PjlHKD/robocoders",
    )

    assert find_pdf_urls(page) == [
        "https://speaking.jbaru.ch/files/deck.pdf",
        "https://on.notist.cloud/pdf/deck-1.pdf",
    ]


def test_no_pdf_succeeds_without_resource(tmp_path: Path) -> None:
    page = make_page("<html><body><p>No slides here</p></body></html>")
    resources = ResourceList()
    store = _store()

    assert ingest_pdf(page, _record(), resources, store, pdf_dir=tmp_path) is None

    assert len(resources) == 0
    store.upload.assert_not_called()


def test_pdf_downloaded_uploaded_and_head_inserted(sample_page, tmp_path: Path) -> None:
    resources = ResourceList([Resource(ResourceType.CODE, "Demo repository", "https://github.com/jbaruch/robocoders")])
    store = _store()

    with patch("pdf_ingest.requests.get", return_value=mock_response(200, content=b"%PDF-1.7")) as mock_get:
        slides = ingest_pdf(sample_page, _record(), resources, store, folder_id="FOLDER", pdf_dir=tmp_path)

    mock_get.assert_called_once()
    assert mock_get.call_args.args[0] == "https://on.notist.cloud/pdf/deck-abc123.pdf"

    local_path = tmp_path / "2025-06-11-devoxx-poland-2025-robocoders-judgment-day.pdf"
    assert local_path.read_bytes() == b"%PDF-1.7"
    store.upload.assert_called_once_with(local_path, "FOLDER")

    assert slides is not None
    assert slides.title == "Robocoders: Judgment Day - Slides"
    assert resources.items()[0] == slides
    assert resources.items()[0].url == DRIVE_URL


def test_download_failure_is_fatal(sample_page, tmp_path: Path) -> None:
    store = _store()
    with patch("pdf_ingest.requests.get", return_value=mock_response(404)):
        with pytest.raises(FetchError):
            ingest_pdf(sample_page, _record(), ResourceList(), store, pdf_dir=tmp_path)

    store.upload.assert_not_called()


def test_download_transport_error_is_fatal(sample_page, tmp_path: Path) -> None:
    with patch("pdf_ingest.requests.get", side_effect=requests.ConnectionError("reset")):
        with pytest.raises(FetchError):
            ingest_pdf(sample_page, _record(), ResourceList(), _store(), pdf_dir=tmp_path)


def test_upload_failure_is_fatal_with_no_fallback(sample_page, tmp_path: Path) -> None:
    store = MagicMock()
    store.upload.side_effect = RuntimeError("403 forbidden")
    resources = ResourceList()

    with patch("pdf_ingest.requests.get", return_value=mock_response(200, content=b"%PDF")):
        with pytest.raises(UploadError) as excinfo:
            ingest_pdf(sample_page, _record(), resources, store, pdf_dir=tmp_path)

    assert "required" in excinfo.value.messages[0]
    assert len(resources) == 0


def test_upload_returning_no_url_is_fatal(sample_page, tmp_path: Path) -> None:
    with patch("pdf_ingest.requests.get", return_value=mock_response(200, content=b"%PDF")):
        with pytest.raises(UploadError):
            ingest_pdf(sample_page, _record(), ResourceList(), _store(url=""), pdf_dir=tmp_path)


def test_existing_slides_url_is_not_duplicated(sample_page, tmp_path: Path) -> None:
    resources = ResourceList([Resource(ResourceType.LINK, "Already linked", DRIVE_URL)])

    with patch("pdf_ingest.requests.get", return_value=mock_response(200, content=b"%PDF")):
        ingest_pdf(sample_page, _record(), resources, _store(), pdf_dir=tmp_path)

    assert [r.url for r in resources] == [DRIVE_URL]
    assert resources.items()[0].title == "Already linked"
