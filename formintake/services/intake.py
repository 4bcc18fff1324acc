from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Mapping
from uuid import uuid4

import anyio

from formintake.core.config import Settings
from formintake.core.datetime_utils import now_utc, to_utc_naive
from formintake.core.errors import MissingFields, NotifyFailed, PersistFailed, UploadFailed
from formintake.core.uploads import ATTACHMENT_MIME_TYPES, Attachment, build_object_name, validate_attachment
from formintake.schemas.submission import AttachmentRef, IntakeAck, RequestOrigin, SubmissionKind
from formintake.services.drive import ObjectStorageGateway
from formintake.services.email import Notifier
from formintake.services.kinds import KindSpec, get_kind_spec
from formintake.services.notifications import compose_notification
from formintake.services.records import SubmissionStore

logger = logging.getLogger("formintake.intake")


@dataclass(frozen=True)
class IntakeConfig:
    general_folder_id: str = ""
    complaints_folder_id: str = ""
    notify_to: tuple[str, ...] = ()
    notify_cc: tuple[str, ...] = ()
    max_attachment_bytes: int = 10 * 1024 * 1024
    allowed_mime_types: frozenset[str] = frozenset(ATTACHMENT_MIME_TYPES)
    # When set, a failed notification fails the request instead of only being logged.
    notify_required: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "IntakeConfig":
        return cls(
            general_folder_id=settings.drive_folder_id,
            complaints_folder_id=settings.complaints_folder_id,
            notify_to=tuple(settings.notify_to_list),
            notify_cc=tuple(settings.notify_cc_list),
            max_attachment_bytes=settings.max_attachment_bytes,
            notify_required=settings.notify_required,
        )

    def folder_for(self, kind: SubmissionKind) -> str:
        if kind == SubmissionKind.COMPLAINT:
            return self.complaints_folder_id or self.general_folder_id
        return self.general_folder_id


def normalize_fields(spec: KindSpec, raw: Mapping[str, str | None]) -> dict[str, str]:
    return {name: (raw.get(name) or "").strip() for name in spec.fields}


def find_missing_fields(spec: KindSpec, values: Mapping[str, str]) -> list[str]:
    return [name for name in spec.required_fields if not values.get(name)]


class IntakePipeline:
    """
    Validate -> optional upload -> persist -> notify, strictly in that order.

    Validation errors are raised before any external call. An upload that fails
    halfway is cleaned up, and an uploaded object is deleted again when the row
    cannot be written. Notification is best-effort once the row exists unless
    ``config.notify_required`` is set.
    """

    def __init__(
        self,
        config: IntakeConfig,
        *,
        storage: ObjectStorageGateway,
        store: SubmissionStore,
        notifier: Notifier,
        clock: Callable[[], datetime] = now_utc,
        id_factory: Callable[[], str] = lambda: str(uuid4()),
    ) -> None:
        self.config = config
        self.storage = storage
        self.store = store
        self.notifier = notifier
        self._clock = clock
        self._id_factory = id_factory

    async def submit(
        self,
        kind: SubmissionKind,
        fields: Mapping[str, str | None],
        attachment: Attachment | None = None,
        origin: RequestOrigin | None = None,
    ) -> IntakeAck:
        spec = get_kind_spec(kind)
        values = normalize_fields(spec, fields)
        missing = find_missing_fields(spec, values)
        if missing:
            raise MissingFields(missing)
        if attachment is not None:
            validate_attachment(
                attachment,
                allowed_mime_types=set(self.config.allowed_mime_types),
                max_bytes=self.config.max_attachment_bytes,
            )

        submitted_at = self._clock()
        attachment_ref: AttachmentRef | None = None
        if attachment is not None:
            attachment_ref = await self._upload(spec, values, attachment, submitted_at)

        submission_id = await self._persist(spec, values, attachment_ref, submitted_at, origin or RequestOrigin())
        await self._notify(spec, values, attachment_ref, submitted_at, submission_id)
        return IntakeAck(kind=kind, id=submission_id)

    async def _upload(
        self,
        spec: KindSpec,
        values: dict[str, str],
        attachment: Attachment,
        submitted_at: datetime,
    ) -> AttachmentRef:
        name = build_object_name(spec.object_prefix, values["nombre"], submitted_at)
        folder_id = self.config.folder_for(spec.kind)
        object_id: str | None = None
        try:
            object_id = await anyio.to_thread.run_sync(
                self.storage.create_object, name, attachment.content_type, attachment.data
            )
            if folder_id:
                await anyio.to_thread.run_sync(self.storage.set_parent, object_id, folder_id)
            await anyio.to_thread.run_sync(self.storage.grant_public_read, object_id)
        except Exception as exc:
            logger.exception("upload_failed", extra={"kind": spec.kind.value, "object_name": name})
            if object_id:
                await self._discard_object(object_id)
            raise UploadFailed() from exc

        attachment_ref = AttachmentRef(storage_id=object_id, public_url=self.storage.public_url(object_id))
        logger.info(
            "upload_completed",
            extra={"kind": spec.kind.value, "object_id": object_id, "folder_id": folder_id},
        )
        return attachment_ref

    async def _persist(
        self,
        spec: KindSpec,
        values: dict[str, str],
        attachment_ref: AttachmentRef | None,
        submitted_at: datetime,
        origin: RequestOrigin,
    ) -> str:
        row = {
            **values,
            "id": self._id_factory(),
            "drive_file_id": attachment_ref.storage_id if attachment_ref else "",
            "drive_file_url": attachment_ref.public_url if attachment_ref else "",
            "ip": origin.ip,
            "user_agent": origin.user_agent,
            "created_at": to_utc_naive(submitted_at),
        }
        try:
            submission_id = await self.store.insert(spec.kind, row)
        except Exception as exc:
            logger.exception("persist_failed", extra={"kind": spec.kind.value})
            if attachment_ref:
                await self._discard_object(attachment_ref.storage_id)
            raise PersistFailed() from exc

        logger.info("submission_persisted", extra={"kind": spec.kind.value, "submission_id": submission_id})
        return submission_id

    async def _notify(
        self,
        spec: KindSpec,
        values: dict[str, str],
        attachment_ref: AttachmentRef | None,
        submitted_at: datetime,
        submission_id: str,
    ) -> None:
        if not self.notifier.enabled:
            logger.info("notify_disabled", extra={"kind": spec.kind.value, "submission_id": submission_id})
            return
        if not self.config.notify_to:
            logger.warning("notify_skipped", extra={"kind": spec.kind.value, "reason": "missing_recipient"})
            return
        subject, html_body = compose_notification(spec, values, attachment=attachment_ref, submitted_at=submitted_at)
        try:
            await anyio.to_thread.run_sync(
                self.notifier.send,
                list(self.config.notify_to),
                list(self.config.notify_cc),
                subject,
                html_body,
            )
        except Exception as exc:
            logger.exception("notify_failed", extra={"kind": spec.kind.value, "submission_id": submission_id})
            if self.config.notify_required:
                raise NotifyFailed() from exc
            return
        logger.info("notify_sent", extra={"kind": spec.kind.value, "submission_id": submission_id})

    async def _discard_object(self, object_id: str) -> None:
        try:
            await anyio.to_thread.run_sync(self.storage.delete_object, object_id)
        except Exception:
            logger.warning("orphan_object_left", extra={"object_id": object_id}, exc_info=True)
            return
        logger.info("object_discarded", extra={"object_id": object_id})
