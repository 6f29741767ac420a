"""CLI: list uploaded slide PDFs in Google Drive and optionally remove them.

Usage examples
--------------
# List PDFs in the configured folder (GOOGLE_DRIVE_FOLDER_ID):
python drive_cleanup.py

# Move every listed PDF to the trash:
python drive_cleanup.py --delete

# Delete permanently from a specific folder:
python drive_cleanup.py --folder 1AbCdEf --delete --permanent
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from dotenv import load_dotenv

from drive_client import DriveClient, FileStore

PDF_MIME_TYPE = "application/pdf"

LOGGER = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List or remove uploaded slide PDFs in Google Drive")
    parser.add_argument(
        "--folder",
        default=os.getenv("GOOGLE_DRIVE_FOLDER_ID"),
        help="Drive folder id to inspect (default: GOOGLE_DRIVE_FOLDER_ID, or all accessible files)",
    )
    parser.add_argument("--delete", action="store_true", help="Remove every listed file")
    parser.add_argument(
        "--permanent",
        action="store_true",
        help="With --delete, delete outright instead of moving to the trash",
    )
    return parser.parse_args(argv)


def cleanup(
    store: FileStore,
    folder_id: str | None,
    delete: bool = False,
    permanent: bool = False,
) -> tuple[list[dict], list[dict]]:
    """List PDFs and, when asked, remove them one by one.

    Returns (listed, failed). A file that cannot be removed is logged and
    skipped so the rest still get processed.
    """
    files = store.list_files(folder_id=folder_id, mime_type=PDF_MIME_TYPE)
    print(f"Found {len(files)} PDFs:")
    for item in files:
        print(f"  - {item.get('name')} (ID: {item.get('id')})")

    failed: list[dict] = []
    if not delete:
        return files, failed

    for item in files:
        try:
            store.delete_file(item["id"], permanent=permanent)
        except RuntimeError as exc:
            failed.append(item)
            LOGGER.error("Error removing %s (%s): %s", item.get("name"), item.get("id"), exc)

    print(f"\nCleanup complete! {len(files) - len(failed)} removed, {len(failed)} failed.")
    return files, failed


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
    args = parse_args(argv)
    try:
        _, failed = cleanup(DriveClient(), args.folder, delete=args.delete, permanent=args.permanent)
    except RuntimeError as exc:
        LOGGER.error("Google Drive API error: %s", exc)
        return 1
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
