from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from formintake.api import deps
from formintake.schemas.submission import SubmissionKind
from formintake.services.kinds import get_kind_spec
from formintake.services.records import SubmissionStore
from formintake.services.reports import export_csv, report_filename

router = APIRouter(prefix="/api", tags=["reports"])


async def _download(kind: SubmissionKind, store: SubmissionStore) -> Response:
    spec = get_kind_spec(kind)
    rows = await store.select_all(kind)
    payload = export_csv(spec, rows)
    filename = report_filename(spec, datetime.utcnow())
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return Response(content=payload, media_type="text/csv; charset=utf-8", headers=headers)


@router.get("/descargar-postulaciones")
async def download_job_applications(store: SubmissionStore = Depends(deps.get_submission_store)):
    return await _download(SubmissionKind.JOB_APPLICATION, store)


@router.get("/descargar-quejas")
async def download_complaints(store: SubmissionStore = Depends(deps.get_submission_store)):
    return await _download(SubmissionKind.COMPLAINT, store)
