"""
Rider result submission.

The submission token is the rider's only credential: whoever holds it may
view and change that one result, and nothing else. `ResultSubmissionService.open`
turns a token into a `SubmissionCapability` bound to the result.

The `*_result*` methods on the service are the rider-facing entry points and
return `ActionResult` instead of raising.
"""

import logging
import re
import secrets
import string
import time
from datetime import datetime
from typing import Optional

import gpxpy
import gpxpy.gpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from randonneurs.config import settings
from randonneurs.shared.action_result import ActionResult
from randonneurs.shared.constants import (
    EventStatus,
    ResultFileType,
    ResultStatus,
    RIDER_SUBMITTABLE_STATUSES,
)
from randonneurs.shared.errors import (
    AlreadySubmittedToACP,
    DomainError,
    InvalidFinishTimeFormat,
    InvalidStatus,
    NotFound,
    ResultSaveFailed,
    UploadRejected,
)
from randonneurs.shared.storage import FileStorage, get_file_storage
from .models import Result
from .repository import ResultRepository
from .schemas import ResultSubmissionView, UploadedFile

logger = logging.getLogger(__name__)

FINISH_TIME_PATTERN = re.compile(r"^\d{1,3}:\d{2}$", re.ASCII)

ALLOWED_GPX_TYPES = frozenset({"application/gpx+xml", "application/xml", "text/xml"})
ALLOWED_IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/webp"})

_EXTENSION_PATTERN = re.compile(r"^[a-z0-9]{1,8}$")
_RANDOM_ALPHABET = string.ascii_lowercase + string.digits


def validate_submission(status: str, finish_time: Optional[str]) -> tuple[ResultStatus, Optional[str]]:
    """
    Check a rider's status and finish time.

    Returns:
        (status, finish_time) to store; finish_time is None unless finished

    Raises:
        InvalidStatus: status is not finished, dnf or dns
        InvalidFinishTimeFormat: finished without an H(HH):MM time
    """
    try:
        parsed = ResultStatus(status)
    except ValueError:
        raise InvalidStatus()
    if parsed not in RIDER_SUBMITTABLE_STATUSES:
        raise InvalidStatus()

    if parsed is not ResultStatus.FINISHED:
        return parsed, None

    finish_time = (finish_time or "").strip()
    if not finish_time:
        raise InvalidFinishTimeFormat("Finish time is required for finished rides")
    if not FINISH_TIME_PATTERN.match(finish_time):
        raise InvalidFinishTimeFormat()
    return parsed, finish_time


UPLOAD_CHUNK_BYTES = 64 * 1024


def _too_large(max_bytes: int) -> UploadRejected:
    return UploadRejected(f"File too large. Maximum size is {max_bytes // (1024 * 1024)}MB.")


async def read_upload(file, max_bytes: int, chunk_size: int = UPLOAD_CHUNK_BYTES) -> bytes:
    """
    Read an uploaded file, stopping as soon as it exceeds `max_bytes`.

    Args:
        file: Anything with `async read(size)` (e.g. FastAPI UploadFile)

    Raises:
        UploadRejected: file larger than `max_bytes`
    """
    size = getattr(file, "size", None)
    if size is not None and size > max_bytes:
        raise _too_large(max_bytes)

    chunks = []
    total = 0
    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise _too_large(max_bytes)
        chunks.append(chunk)
    return b"".join(chunks)


def validate_upload(
    file_type: ResultFileType,
    content_type: Optional[str],
    content: bytes,
    max_bytes: int,
) -> None:
    """
    Raises:
        UploadRejected: empty, too large, wrong MIME type, or unreadable GPX
    """
    if not content:
        raise UploadRejected("No file provided")
    if len(content) > max_bytes:
        raise _too_large(max_bytes)

    content_type = (content_type or "").split(";")[0].strip().lower()
    if file_type is ResultFileType.GPX:
        if content_type not in ALLOWED_GPX_TYPES:
            raise UploadRejected("Invalid file type. Please upload a GPX/XML file.")
        try:
            gpxpy.parse(content.decode("utf-8"))
        except (gpxpy.gpx.GPXException, UnicodeDecodeError) as e:
            logger.info(f"Rejected GPX upload: {e}")
            raise UploadRejected("Invalid GPX file")
    elif content_type not in ALLOWED_IMAGE_TYPES:
        raise UploadRejected("Invalid file type. Please upload an image (JPEG, PNG, WebP) file.")


def build_file_path(
    event_id: str,
    rider_id: str,
    file_type: ResultFileType,
    filename: Optional[str],
) -> str:
    """'{event_id}/{rider_id}/{file_type}-{ms}-{rand6}.{ext}'"""
    default_ext = "gpx" if file_type is ResultFileType.GPX else "jpg"
    ext = default_ext
    if filename and "." in filename:
        candidate = filename.rsplit(".", 1)[1].lower()
        if _EXTENSION_PATTERN.match(candidate):
            ext = candidate

    timestamp = int(time.time() * 1000)
    random_id = "".join(secrets.choice(_RANDOM_ALPHABET) for _ in range(6))
    return f"{event_id}/{rider_id}/{file_type.value}-{timestamp}-{random_id}.{ext}"


def _parse_file_type(file_type: ResultFileType | str) -> ResultFileType:
    try:
        return ResultFileType(file_type)
    except ValueError:
        raise UploadRejected(f"Unknown file type: {file_type}")


class SubmissionCapability:
    """Operations allowed on the one result a token points to."""

    def __init__(
        self,
        db: AsyncSession,
        result: Result,
        storage: FileStorage,
        max_upload_bytes: int,
    ):
        self._db = db
        self._result = result
        self._storage = storage
        self._max_upload_bytes = max_upload_bytes

    @property
    def result_id(self) -> str:
        return self._result.id

    def view(self) -> ResultSubmissionView:
        return ResultSubmissionView.from_result(self._result)

    def _ensure_open(self) -> None:
        if self._result.event.status == EventStatus.SUBMITTED.value:
            raise AlreadySubmittedToACP()

    async def submit(
        self,
        status: str,
        finish_time: Optional[str] = None,
        gpx_url: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ResultSubmissionView:
        """
        Record the rider's outcome, replacing anything submitted before.

        Raises:
            InvalidStatus, InvalidFinishTimeFormat, AlreadySubmittedToACP
            ResultSaveFailed: the change could not be stored
        """
        parsed_status, finish_time = validate_submission(status, finish_time)
        self._ensure_open()

        result = self._result
        result.status = parsed_status.value
        result.finish_time = finish_time
        result.gpx_url = (gpx_url or "").strip() or None
        result.rider_notes = (notes or "").strip() or None
        result.submitted_at = datetime.utcnow()
        result_id = result.id
        try:
            await self._db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error saving result {result_id}: {e}")
            await self._db.rollback()
            raise ResultSaveFailed()

        logger.info(f"Result {result.id} submitted as {parsed_status.value}")
        return self.view()

    async def attach_file(
        self,
        file_type: ResultFileType | str,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
    ) -> UploadedFile:
        """
        Store a GPX track or control-card photo and reference it on the result.

        If the reference cannot be saved, the stored file is removed again.

        Raises:
            UploadRejected, AlreadySubmittedToACP
        """
        file_type = _parse_file_type(file_type)
        validate_upload(file_type, content_type, content, self._max_upload_bytes)
        self._ensure_open()

        result = self._result
        path = build_file_path(result.event_id, result.rider_id, file_type, filename)

        try:
            await self._storage.upload(path, content)
        except OSError as e:
            logger.error(f"Error uploading file {path}: {e}")
            raise UploadRejected("Failed to upload file")

        try:
            setattr(result, file_type.path_field, path)
            await self._db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error saving file reference for result {result.id}: {e}")
            await self._db.rollback()
            await self._storage.remove([path])
            raise UploadRejected("Failed to save file reference")

        return UploadedFile(path=path, url=self._storage.get_public_url(path))

    async def detach_file(self, file_type: ResultFileType | str) -> None:
        """
        Remove a stored file and clear its reference. No-op when nothing is stored.

        Raises:
            UploadRejected, AlreadySubmittedToACP
            ResultSaveFailed: the reference could not be cleared
        """
        file_type = _parse_file_type(file_type)
        self._ensure_open()

        result = self._result
        path = getattr(result, file_type.path_field)
        if not path:
            return

        try:
            await self._storage.remove([path])
        except (OSError, ValueError) as e:
            logger.error(f"Error deleting file {path}: {e}")

        result_id = result.id
        try:
            setattr(result, file_type.path_field, None)
            await self._db.commit()
        except SQLAlchemyError as e:
            logger.error(f"Error clearing file reference for result {result_id}: {e}")
            await self._db.rollback()
            raise ResultSaveFailed("Failed to delete file")


class ResultSubmissionService:
    """Token-based result submission for riders."""

    def __init__(
        self,
        db: AsyncSession,
        storage: Optional[FileStorage] = None,
        max_upload_bytes: Optional[int] = None,
    ):
        self.db = db
        self.results = ResultRepository(db)
        self.storage = storage or get_file_storage()
        self.max_upload_bytes = max_upload_bytes or settings.max_upload_bytes

    async def open(self, token: str) -> SubmissionCapability:
        """
        Resolve a token into a capability for its result.

        Raises:
            NotFound: empty or unknown token
        """
        result = await self.results.get_by_token(token)
        if result is None:
            raise NotFound()
        return SubmissionCapability(self.db, result, self.storage, self.max_upload_bytes)

    async def get_result_by_token(self, token: str) -> ActionResult[ResultSubmissionView]:
        try:
            capability = await self.open(token)
        except DomainError as e:
            return ActionResult.fail(e)
        return ActionResult.ok(capability.view())

    async def submit_result(
        self,
        token: str,
        status: str,
        finish_time: Optional[str] = None,
        gpx_url: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> ActionResult[ResultSubmissionView]:
        try:
            # Validate before the lookup so bad input never touches the store
            validate_submission(status, finish_time)
            capability = await self.open(token)
            view = await capability.submit(status, finish_time, gpx_url, notes)
        except DomainError as e:
            return ActionResult.fail(e)
        return ActionResult.ok(view)

    async def upload_result_file(
        self,
        token: str,
        file_type: ResultFileType | str,
        filename: Optional[str],
        content_type: Optional[str],
        content: bytes,
    ) -> ActionResult[UploadedFile]:
        try:
            capability = await self.open(token)
            uploaded = await capability.attach_file(file_type, filename, content_type, content)
        except DomainError as e:
            return ActionResult.fail(e)
        return ActionResult.ok(uploaded)

    async def delete_result_file(
        self, token: str, file_type: ResultFileType | str
    ) -> ActionResult[None]:
        try:
            capability = await self.open(token)
            await capability.detach_file(file_type)
        except DomainError as e:
            return ActionResult.fail(e)
        return ActionResult.ok()
