from __future__ import annotations

import io
from typing import Protocol

from googleapiclient.discovery import build
from googleapiclient.http import MediaIoBaseUpload

from formintake.core.config import Settings
from formintake.services.google_auth import service_account_credentials

DRIVE_SCOPES = ["https://www.googleapis.com/auth/drive.file"]


def file_url(file_id: str) -> str:
    return f"https://drive.google.com/file/d/{file_id}/view"


class ObjectStorageGateway(Protocol):
    def create_object(self, name: str, mime_type: str, data: bytes) -> str: ...

    def set_parent(self, object_id: str, folder_id: str) -> None: ...

    def grant_public_read(self, object_id: str) -> None: ...

    def public_url(self, object_id: str) -> str: ...

    def delete_object(self, object_id: str) -> None: ...


class DriveGateway:
    """Google Drive v3 behind the object-storage interface. Every method blocks."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    def _client(self):
        credentials = service_account_credentials(self._settings, DRIVE_SCOPES)
        return build("drive", "v3", credentials=credentials, cache_discovery=False)

    def create_object(self, name: str, mime_type: str, data: bytes) -> str:
        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=mime_type or "application/octet-stream", resumable=False)
        created = (
            self._client()
            .files()
            .create(body={"name": name}, media_body=media, fields="id", supportsAllDrives=True)
            .execute()
        )
        return created["id"]

    def set_parent(self, object_id: str, folder_id: str) -> None:
        if not folder_id:
            return
        service = self._client()
        current = service.files().get(fileId=object_id, fields="parents", supportsAllDrives=True).execute()
        update_kwargs = {
            "fileId": object_id,
            "addParents": folder_id,
            "fields": "id, parents",
            "supportsAllDrives": True,
        }
        remove_parents = [parent for parent in current.get("parents", []) if parent != folder_id]
        if remove_parents:
            update_kwargs["removeParents"] = ",".join(remove_parents)
        service.files().update(**update_kwargs).execute()

    def grant_public_read(self, object_id: str) -> None:
        (
            self._client()
            .permissions()
            .create(fileId=object_id, body={"role": "reader", "type": "anyone"}, supportsAllDrives=True)
            .execute()
        )

    def public_url(self, object_id: str) -> str:
        return file_url(object_id)

    def delete_object(self, object_id: str) -> None:
        self._client().files().delete(fileId=object_id, supportsAllDrives=True).execute()
