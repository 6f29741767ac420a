"""Single-talk migration: the fail-fast pipeline from talk page to artifact."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Callable

from artifact import write_artifact
from drive_client import DRIVE_FOLDER_ID, DriveClient, FileStore
from errors import MigrationError
from metadata import extract_metadata
from models import MigrationResult, ResourceList
from pdf_ingest import ingest_pdf
from regression import run_regression_tests
from resources import extract_resources
from talk_page import fetch_talk_page
from validation import validate_artifact, validate_resource_sources
from video import resolve_video

TALKS_DIR = os.getenv("TALKS_DIR", "_talks")
PDF_DIR = os.getenv("PDF_DIR", "pdfs")

LOGGER = logging.getLogger(__name__)


class TalkMigrator:
    """Runs the migration steps for one talk URL, stopping at the first failure.

    Steps, in order: fetch page, extract metadata, extract resources, ingest
    slide PDF, resolve video, validate resource sources, write the artifact,
    validate the artifact, and (unless skipped) run the regression tests.
    Each call to ``migrate`` starts from a fresh record, resource list and
    error log.
    """

    def __init__(
        self,
        file_store: FileStore | None = None,
        *,
        talks_dir: Path | str = TALKS_DIR,
        pdf_dir: Path | str = PDF_DIR,
        folder_id: str | None = DRIVE_FOLDER_ID,
        test_runner: Callable[[], bool] = run_regression_tests,
    ) -> None:
        self.file_store = file_store if file_store is not None else DriveClient()
        self.talks_dir = Path(talks_dir)
        self.pdf_dir = Path(pdf_dir)
        self.folder_id = folder_id
        self.test_runner = test_runner

    def migrate(self, talk_url: str, run_tests: bool = True) -> MigrationResult:
        LOGGER.info("Starting migration for: %s", talk_url)
        result = MigrationResult(url=talk_url, success=False)
        resources = ResourceList()
        step = "fetch talk page"

        try:
            page = fetch_talk_page(talk_url)

            step = "extract metadata"
            record = extract_metadata(page, talks_dir=self.talks_dir, pdf_dir=self.pdf_dir)
            result.record = record

            step = "extract resources"
            extract_resources(page, resources)

            step = "handle PDF"
            ingest_pdf(page, record, resources, self.file_store, folder_id=self.folder_id, pdf_dir=self.pdf_dir)

            step = "find video"
            resolve_video(page, record, resources)

            step = "validate resource sources"
            validate_resource_sources(resources)

            step = "generate talk file"
            result.artifact_path = write_artifact(record, resources, talks_dir=self.talks_dir)

            step = "validate migration"
            validate_artifact(result.artifact_path, record, resources)
        except MigrationError as exc:
            result.errors.extend(exc.messages)
            result.resources = resources.items()
            LOGGER.error("MIGRATION FAILED at step '%s' for %s", step, talk_url)
            for index, message in enumerate(result.errors, start=1):
                LOGGER.error("   %s. %s", index, message)
            return result

        result.success = True
        result.resources = resources.items()
        LOGGER.info(
            "Migration completed: file=%s resources=%s status=%s",
            result.artifact_path,
            len(result.resources),
            record.status.value,
        )

        if run_tests:
            result.tests_passed = self.test_runner()
            if not result.tests_passed:
                LOGGER.warning("Migration tests failed, but file was created; review %s", result.artifact_path)
        else:
            LOGGER.info("Skipping tests (batch mode)")

        return result
