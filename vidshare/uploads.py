"""
Multipart upload handling.

Files attached to a request are checked against the media allow-list and the
size/count limits, written to a scratch directory, and handed to the route
handler as ``StoredUpload`` records. Anything the handler does not move into
the ``MediaStore`` is deleted once the request finishes.
"""

import asyncio
import functools
import logging
import random
import re
import shutil
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, AsyncIterator, BinaryIO

from fastapi import Depends, HTTPException, Request, status
from starlette.datastructures import UploadFile

logger = logging.getLogger(__name__)

ALLOWED_FORMATS = frozenset({"jpeg", "jpg", "png", "gif", "mp4", "mov", "avi", "mkv"})

# Registered MIME subtypes that do not spell out the format name
MIME_SUBTYPE_ALIASES = {
    "quicktime": "mov",
    "x-msvideo": "avi",
    "msvideo": "avi",
    "x-matroska": "mkv",
}

REJECTED_TYPE_MESSAGE = "Only video and image files are allowed!"

# Field names become part of the scratch file name
FIELD_NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]{1,64}")

_COPY_CHUNK_SIZE = 1024 * 1024


class UploadTooLarge(Exception):
    """Raised while copying when a file grows past the per-file limit."""


@dataclass(frozen=True)
class StoredUpload:
    field_name: str
    filename: str
    content_type: str | None
    path: Path
    size: int


def is_allowed_media(filename: str, content_type: str | None) -> bool:
    """Both the extension and the declared MIME type must name an allowed format."""
    extension = Path(filename).suffix.lower().lstrip(".")
    if extension not in ALLOWED_FORMATS:
        return False
    if not content_type or "/" not in content_type:
        return False
    subtype = content_type.split(";", 1)[0].strip().lower().split("/", 1)[1]
    subtype = MIME_SUBTYPE_ALIASES.get(subtype, subtype)
    return any(fmt in subtype for fmt in ALLOWED_FORMATS)


def _copy_bounded(source: BinaryIO, target: Path, max_bytes: int) -> int:
    """Copy ``source`` into the already-reserved ``target``; return bytes written."""
    if hasattr(source, "seek"):
        source.seek(0)
    written = 0
    with target.open("wb") as buffer:
        while True:
            chunk = source.read(_COPY_CHUNK_SIZE)
            if not chunk:
                break
            written += len(chunk)
            if written > max_bytes:
                raise UploadTooLarge(target.name)
            buffer.write(chunk)
    return written


class ScratchStorage:
    """
    Temporary home for uploaded files.

    Created and disposed explicitly (see the app lifespan). Files are named
    ``<field>-<epoch ms>-<random><ext>`` and reserved with an exclusive create,
    so two uploads never share a name within one process run.
    """

    def __init__(self, directory: Path, *, max_file_size: int, max_files: int):
        self.directory = Path(directory)
        self.max_file_size = max_file_size
        self.max_files = max_files
        self._live: set[Path] = set()

    def open(self) -> "ScratchStorage":
        self.directory.mkdir(parents=True, exist_ok=True)
        return self

    def close(self) -> None:
        for path in list(self._live):
            self._remove(path)

    def _reserve(self, field_name: str, extension: str) -> Path:
        while True:
            unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
            path = self.directory / f"{field_name}-{unique_suffix}{extension}"
            if path.resolve().parent != self.directory.resolve():
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Invalid file field '{field_name}'",
                )
            try:
                path.open("xb").close()
            except FileExistsError:
                continue
            self._live.add(path)
            return path

    def _remove(self, path: Path) -> None:
        path.unlink(missing_ok=True)
        self._live.discard(path)

    def _validate(
        self,
        files: list[tuple[str, UploadFile]],
        allowed_fields: frozenset[str] | None,
    ) -> None:
        if len(files) > self.max_files:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Too many files: at most {self.max_files} per request",
            )
        seen_fields = set()
        for field_name, upload in files:
            if not FIELD_NAME_PATTERN.fullmatch(field_name) or (
                allowed_fields is not None and field_name not in allowed_fields
            ):
                logger.warning("Rejected upload on unexpected field %r", field_name)
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Unexpected file field '{field_name[:64]}'",
                )
            if field_name in seen_fields:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=f"Only one file allowed for field '{field_name}'",
                )
            seen_fields.add(field_name)
            if not is_allowed_media(upload.filename or "", upload.content_type):
                logger.warning(
                    "Rejected upload %r (%s) on field %s",
                    upload.filename,
                    upload.content_type,
                    field_name,
                )
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail=REJECTED_TYPE_MESSAGE,
                )
            if upload.size is not None and upload.size > self.max_file_size:
                raise HTTPException(
                    status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                    detail="File too large",
                )

    async def _write(self, field_name: str, upload: UploadFile) -> StoredUpload:
        filename = upload.filename or ""
        target = self._reserve(field_name, Path(filename).suffix.lower())
        copy_operation = functools.partial(
            _copy_bounded, upload.file, target, self.max_file_size
        )
        try:
            size = await asyncio.get_running_loop().run_in_executor(None, copy_operation)
        except UploadTooLarge:
            self._remove(target)
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="File too large",
            )
        except BaseException:
            self._remove(target)
            raise
        return StoredUpload(
            field_name=field_name,
            filename=filename,
            content_type=upload.content_type,
            path=target,
            size=size,
        )

    async def accept(
        self,
        files: list[tuple[str, UploadFile]],
        allowed_fields: frozenset[str] | None = None,
    ) -> dict[str, StoredUpload]:
        """
        Validate every file first, then write them all.
        If any write fails, the files already written for this request are removed.

        ``allowed_fields`` limits which form fields may carry a file; field
        names must always be plain ``[A-Za-z0-9_-]`` words.
        """
        self._validate(files, allowed_fields)
        stored: dict[str, StoredUpload] = {}
        try:
            for field_name, upload in files:
                stored[field_name] = await self._write(field_name, upload)
        except BaseException:
            for item in stored.values():
                self.discard(item)
            raise
        return stored

    def discard(self, upload: StoredUpload) -> None:
        self._remove(upload.path)


class MediaStore:
    """
    Permanent home for accepted media. Files are moved out of scratch storage
    and referenced as ``<url_prefix>/<name>``.
    """

    def __init__(self, directory: Path, *, url_prefix: str = "/media"):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    def open(self) -> "MediaStore":
        self.directory.mkdir(parents=True, exist_ok=True)
        return self

    def save(self, upload: StoredUpload) -> str:
        destination = self.directory / upload.path.name
        shutil.move(str(upload.path), destination)
        logger.debug("Stored %s as %s", upload.filename, destination.name)
        return f"{self.url_prefix}/{destination.name}"

    def path_for(self, reference: str | None) -> Path | None:
        if not reference or not reference.startswith(self.url_prefix + "/"):
            return None
        name = reference[len(self.url_prefix) + 1 :]
        if not name or "/" in name or name in (".", ".."):
            return None
        return self.directory / name

    def remove(self, reference: str | None) -> None:
        path = self.path_for(reference)
        if path is not None:
            path.unlink(missing_ok=True)


def get_scratch_storage(request: Request) -> ScratchStorage:
    return request.app.state.scratch_storage


def get_media_store(request: Request) -> MediaStore:
    return request.app.state.media_store


class AcceptUploads:
    """
    Dependency: store the request's files in scratch storage before the
    handler runs, and clean up whatever the handler left behind.

    Only the named form fields may carry files, like multer's ``fields()``.
    """

    def __init__(self, *fields: str):
        self.fields = frozenset(fields)

    async def __call__(
        self,
        request: Request,
        scratch: ScratchStorage = Depends(get_scratch_storage),
    ) -> AsyncIterator[dict[str, StoredUpload]]:
        form = await request.form()
        files = [
            (field_name, value)
            for field_name, value in form.multi_items()
            if isinstance(value, UploadFile) and value.filename
        ]
        stored = await scratch.accept(files, self.fields)
        try:
            yield stored
        finally:
            for upload in stored.values():
                scratch.discard(upload)


def uploads_for(*fields: str):
    """Annotated dependency type accepting files on ``fields`` only."""
    return Annotated[dict[str, StoredUpload], Depends(AcceptUploads(*fields))]


MediaStoreDep = Annotated[MediaStore, Depends(get_media_store)]
