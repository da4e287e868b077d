"""
Result submission routes.

Unauthenticated: the submission token in the path is the only credential.
Responses carry `{success, data, error, errorCode}` so the form can show
the exact reason a submission was refused.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.config import settings
from randonneurs.db.session import get_async_db
from randonneurs.shared.action_result import ActionResult
from randonneurs.shared.constants import ResultFileType
from randonneurs.shared.errors import UploadRejected
from randonneurs.features.results.schemas import SubmitResultRequest
from randonneurs.features.results.submission import ResultSubmissionService, read_upload
from randonneurs.api.v1.dependencies import DOMAIN_ERROR_STATUS

router = APIRouter(prefix="/results/submit", tags=["Results"])


def _respond(action: ActionResult) -> JSONResponse:
    status_code = 200 if action.success else DOMAIN_ERROR_STATUS.get(action.error_code, 400)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder({
            "success": action.success,
            "data": action.data,
            "error": action.error,
            "errorCode": action.error_code,
        }),
    )


@router.get("/{token}")
async def get_submission(token: str, db: AsyncSession = Depends(get_async_db)):
    """Result, event and rider behind a submission link."""
    service = ResultSubmissionService(db)
    return _respond(await service.get_result_by_token(token))


@router.post("/{token}")
async def submit_result(
    token: str,
    request: SubmitResultRequest,
    db: AsyncSession = Depends(get_async_db),
):
    """Record finished / DNF / DNS, replacing any earlier submission."""
    service = ResultSubmissionService(db)
    action = await service.submit_result(
        token,
        status=request.status,
        finish_time=request.finish_time,
        gpx_url=request.gpx_url,
        notes=request.notes,
    )
    return _respond(action)


@router.post("/{token}/files/{file_type}")
async def upload_file(
    token: str,
    file_type: ResultFileType,
    file: UploadFile = File(...),
    db: AsyncSession = Depends(get_async_db),
):
    """Attach a GPX track or a control-card photo."""
    try:
        content = await read_upload(file, settings.max_upload_bytes)
    except UploadRejected as e:
        return _respond(ActionResult.fail(e))
    service = ResultSubmissionService(db)
    action = await service.upload_result_file(
        token, file_type, file.filename, file.content_type, content
    )
    return _respond(action)


@router.delete("/{token}/files/{file_type}")
async def delete_file(
    token: str,
    file_type: ResultFileType,
    db: AsyncSession = Depends(get_async_db),
):
    service = ResultSubmissionService(db)
    return _respond(await service.delete_result_file(token, file_type))
