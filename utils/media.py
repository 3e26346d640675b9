"""
Media upload helpers:
- save_upload(): persist an incoming multipart file under UPLOAD_FOLDER
- MediaUploader: push a local file to the media host with httpx

The media host is expected to answer a multipart POST with JSON containing a
`secure_url` or `url` (Cloudinary's unsigned upload API does).
"""
from __future__ import annotations

import logging
import os
import uuid
from typing import Dict, Optional

import httpx
from werkzeug.utils import secure_filename

logger = logging.getLogger(__name__)


def save_upload(file_storage, folder: str) -> Optional[str]:
    """Save a werkzeug FileStorage to `folder` and return its path (None if no file was sent)."""
    if file_storage is None or not file_storage.filename:
        return None
    os.makedirs(folder, exist_ok=True)
    name = secure_filename(file_storage.filename) or "upload"
    path = os.path.join(folder, f"{uuid.uuid4().hex}-{name}")
    file_storage.save(path)
    return path


def discard_upload(path: str | None) -> None:
    """Delete a temporary upload if it is still on disk."""
    if not path:
        return
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("could not remove temporary upload %s", path)


class MediaUploader:
    def __init__(self, upload_url: str, upload_preset: str | None = None, timeout: float = 10.0,
                 client: httpx.Client | None = None):
        self.upload_url = upload_url
        self.upload_preset = upload_preset
        self.timeout = timeout
        self._client = client

    @classmethod
    def from_config(cls, config) -> "MediaUploader":
        return cls(
            upload_url=config.get("MEDIA_UPLOAD_URL", ""),
            upload_preset=config.get("MEDIA_UPLOAD_PRESET"),
            timeout=float(config.get("MEDIA_UPLOAD_TIMEOUT", 10.0)),
        )

    def _post(self, client: httpx.Client, path: str) -> httpx.Response:
        data = {"upload_preset": self.upload_preset} if self.upload_preset else {}
        with open(path, "rb") as fh:
            files = {"file": (os.path.basename(path), fh)}
            return client.post(self.upload_url, data=data, files=files, timeout=self.timeout)

    def upload(self, local_path: str | None) -> Optional[Dict[str, str]]:
        """
        Upload a local file; returns {"url": ...} or None on any failure.
        The local file is removed afterwards whether or not the upload worked.
        """
        if not local_path:
            return None
        if not os.path.exists(local_path):
            logger.warning("upload skipped, %s does not exist", local_path)
            return None
        if not self.upload_url:
            logger.error("MEDIA_UPLOAD_URL is not configured")
            discard_upload(local_path)
            return None

        try:
            if self._client is not None:
                r = self._post(self._client, local_path)
            else:
                with httpx.Client() as client:
                    r = self._post(client, local_path)
            r.raise_for_status()
            body = r.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("media upload failed for %s: %s", local_path, exc)
            return None
        finally:
            discard_upload(local_path)

        url = body.get("secure_url") or body.get("url")
        if not url:
            logger.error("media host returned no url for %s", local_path)
            return None
        return {"url": url}
