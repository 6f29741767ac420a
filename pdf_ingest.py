"""Slide PDF discovery, download and upload to the file store."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from urllib.parse import urljoin

import requests

from drive_client import FileStore
from errors import FetchError, UploadError
from models import Resource, ResourceList, ResourceType, TalkRecord
from slugs import pdf_filename
from talk_page import TalkPage

PDF_DIR = os.getenv("PDF_DIR", "pdfs")
REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))

# PDFs served by the slide-hosting CDN behind the legacy talk pages.
_SLIDE_CDN_PDF = re.compile(r"https?://on\.notist\.cloud/pdf/[^\"'\s]+\.pdf")

SLIDES_DESCRIPTION = "Complete slide deck (PDF)"

LOGGER = logging.getLogger(__name__)


def find_pdf_urls(page: TalkPage) -> list[str]:
    """Direct ``.pdf`` links first, then slide-CDN PDFs, without duplicates."""
    urls: list[str] = []
    for link in page.soup.select('a[href$=".pdf"]'):
        urls.append(urljoin(page.url, link["href"].strip()))
    urls.extend(match.group(0) for match in _SLIDE_CDN_PDF.finditer(page.html))
    return list(dict.fromkeys(urls))


def ingest_pdf(
    page: TalkPage,
    record: TalkRecord,
    resources: ResourceList,
    file_store: FileStore,
    folder_id: str | None = None,
    pdf_dir: Path | str = PDF_DIR,
) -> Resource | None:
    """Download the talk's slide PDF, upload it and head-insert a slides resource.

    A page without a PDF is fine and returns None. Once a PDF is found, both
    the download and the upload are required.

    Raises:
        FetchError: the PDF could not be downloaded.
        UploadError: the file store rejected the upload.
    """
    pdf_urls = find_pdf_urls(page)
    if not pdf_urls:
        LOGGER.warning("No PDF found")
        return None

    pdf_url = pdf_urls[0]
    LOGGER.info("Found PDF: %s", pdf_url)

    local_path = Path(pdf_dir) / pdf_filename(record.date, record.conference, record.title)
    download_file(pdf_url, local_path)

    try:
        public_url = file_store.upload(local_path, folder_id)
    except Exception as exc:  # any store failure is fatal; there is no local fallback
        raise UploadError(
            f"Failed to upload PDF to Google Drive - this is required for slides: {exc}"
        ) from exc
    if not public_url:
        raise UploadError("Google Drive upload returned no URL - this is required for slides")

    slides = Resource(
        type=ResourceType.SLIDES,
        title=f"{record.title} - Slides",
        url=public_url,
        description=SLIDES_DESCRIPTION,
    )
    if not resources.prepend_slides(slides):
        LOGGER.warning("Skipping duplicate slides resource: %s", public_url)

    LOGGER.info("PDF uploaded to Google Drive: %s", public_url)
    return slides


def download_file(url: str, local_path: Path) -> Path:
    """Single-attempt GET of ``url`` into ``local_path``."""
    try:
        response = requests.get(url, timeout=REQUEST_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise FetchError(f"Failed to download PDF from {url}: {exc}") from exc

    if not 200 <= response.status_code <= 299:
        raise FetchError(f"Failed to download PDF from {url}: HTTP {response.status_code}")

    local_path.parent.mkdir(parents=True, exist_ok=True)
    local_path.write_bytes(response.content)
    LOGGER.info("Downloaded %s bytes to %s", len(response.content), local_path)
    return local_path
