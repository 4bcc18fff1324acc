from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class SubmissionKind(str, Enum):
    JOB_APPLICATION = "job_application"
    COMPLAINT = "complaint"


class AttachmentRef(BaseModel):
    storage_id: str
    public_url: str


class RequestOrigin(BaseModel):
    ip: str | None = None
    user_agent: str | None = None


class IntakeAck(BaseModel):
    ok: bool = True
    kind: SubmissionKind
    id: str


class HealthOut(BaseModel):
    ok: bool = True
