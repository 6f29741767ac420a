"""Google Drive REST client used as the slide PDF file store."""

from __future__ import annotations

import json
import logging
import mimetypes
import os
import uuid
from pathlib import Path
from typing import Any, Protocol

import requests

DRIVE_API_BASE_URL = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
DRIVE_FOLDER_ID = os.getenv("GOOGLE_DRIVE_FOLDER_ID") or None
REQUEST_TIMEOUT_SECONDS = 60
PAGE_SIZE = 100

LOGGER = logging.getLogger(__name__)


class FileStore(Protocol):
    """What the pipeline needs from a cloud file store."""

    def upload(self, local_path: Path | str, folder_id: str | None = None) -> str: ...

    def list_files(self, folder_id: str | None = None, mime_type: str | None = None) -> list[dict[str, Any]]: ...

    def delete_file(self, file_id: str, permanent: bool = False) -> None: ...


class DriveClient:
    """Minimal Drive v3 client: upload + share, list, trash/delete.

    Authentication is out of scope: an OAuth access token is read from
    ``GOOGLE_DRIVE_ACCESS_TOKEN`` (or passed in). Every call is a single
    attempt; failures raise RuntimeError with the API response body.
    """

    def __init__(self, access_token: str | None = None) -> None:
        self._access_token = access_token

    def upload(self, local_path: Path | str, folder_id: str | None = None) -> str:
        """Upload a file, make it world-readable and return its public view URL."""
        path = Path(local_path)
        metadata: dict[str, Any] = {"name": path.name}
        if folder_id:
            metadata["parents"] = [folder_id]

        mime_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        body, content_type = _multipart_related(metadata, path.read_bytes(), mime_type)

        response = self._request(
            "POST",
            DRIVE_UPLOAD_URL,
            params={"uploadType": "multipart", "supportsAllDrives": "true", "fields": "id,name"},
            data=body,
            content_type=content_type,
        )
        file_id = response.json()["id"]

        self._request(
            "POST",
            f"{DRIVE_API_BASE_URL}/files/{file_id}/permissions",
            params={"supportsAllDrives": "true"},
            json_payload={"role": "reader", "type": "anyone"},
        )

        LOGGER.info("Uploaded %s to Google Drive as file_id=%s", path.name, file_id)
        return public_view_url(file_id)

    def list_files(self, folder_id: str | None = None, mime_type: str | None = None) -> list[dict[str, Any]]:
        """List non-trashed files, optionally restricted to a folder and MIME type."""
        clauses = ["trashed=false"]
        if folder_id:
            clauses.append(f"'{folder_id}' in parents")
        if mime_type:
            clauses.append(f"mimeType='{mime_type}'")

        params: dict[str, str] = {
            "q": " and ".join(clauses),
            "fields": "nextPageToken, files(id, name, createdTime)",
            "pageSize": str(PAGE_SIZE),
            "supportsAllDrives": "true",
            "includeItemsFromAllDrives": "true",
        }

        files: list[dict[str, Any]] = []
        while True:
            body = self._request("GET", f"{DRIVE_API_BASE_URL}/files", params=params).json()
            files.extend(body.get("files", []))
            token = body.get("nextPageToken")
            if not token:
                return files
            params["pageToken"] = token

    def delete_file(self, file_id: str, permanent: bool = False) -> None:
        """Move a file to the trash, or delete it outright when ``permanent``."""
        url = f"{DRIVE_API_BASE_URL}/files/{file_id}"
        params = {"supportsAllDrives": "true"}
        if permanent:
            self._request("DELETE", url, params=params)
        else:
            self._request("PATCH", url, params=params, json_payload={"trashed": True})
        LOGGER.info("%s Drive file_id=%s", "Deleted" if permanent else "Trashed", file_id)

    def _request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, str] | None = None,
        json_payload: dict[str, Any] | None = None,
        data: bytes | None = None,
        content_type: str | None = None,
    ) -> requests.Response:
        headers = {"Authorization": f"Bearer {self._token()}"}
        if content_type:
            headers["Content-Type"] = content_type

        try:
            response = requests.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json_payload,
                data=data,
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
            return response
        except requests.RequestException as exc:
            raise RuntimeError(f"Google Drive API request failed: {exc} {_error_body(exc)}") from exc

    def _token(self) -> str:
        token = self._access_token or os.getenv("GOOGLE_DRIVE_ACCESS_TOKEN")
        if not token:
            raise RuntimeError("GOOGLE_DRIVE_ACCESS_TOKEN environment variable is required")
        return token


def public_view_url(file_id: str) -> str:
    return f"https://drive.google.com/file/d/{file_id}/view"


def _multipart_related(metadata: dict[str, Any], content: bytes, mime_type: str) -> tuple[bytes, str]:
    boundary = f"talk-migration-{uuid.uuid4().hex}"
    parts = [
        f"--{boundary}\r\n".encode(),
        b"Content-Type: application/json; charset=UTF-8\r\n\r\n",
        json.dumps(metadata).encode("utf-8"),
        f"\r\n--{boundary}\r\n".encode(),
        f"Content-Type: {mime_type}\r\n\r\n".encode(),
        content,
        f"\r\n--{boundary}--\r\n".encode(),
    ]
    return b"".join(parts), f"multipart/related; boundary={boundary}"


def _error_body(exc: requests.RequestException) -> str:
    if not isinstance(exc, requests.HTTPError) or exc.response is None:
        return ""
    try:
        return json.dumps(exc.response.json())
    except ValueError:
        return exc.response.text
