"""Handles multipart uploads: size bounding, content sniffing and storage.

The primary entry point is `upload_files`, which stores every file part of a
multipart request in a destination directory. Each part is sniffed with
libmagic, checked against the configured allow-list and then either renamed to
a random stem (keeping its extension) or stored under the client's file name.
"""

import asyncio
import logging
import os
from pathlib import Path
from typing import BinaryIO

import magic
from starlette.datastructures import FormData
from starlette.datastructures import UploadFile
from starlette.requests import Request
from starlette.types import Message

from toolkit.core.config import ToolkitSettings
from toolkit.core.exceptions import FileTooLargeError
from toolkit.core.exceptions import FileTypeNotAllowedError
from toolkit.core.exceptions import NoFileUploadedError
from toolkit.core.exceptions import UploadError
from toolkit.core.validation import COPY_CHUNK_SIZE
from toolkit.core.validation import RENAMED_FILE_STEM_LENGTH
from toolkit.core.validation import SNIFF_LENGTH
from toolkit.models.toolkit_models import UploadedFile
from toolkit.services.filesystem import ensure_dir
from toolkit.services.random_strings import RandomStringGenerator

__all__ = [
    "file_extension",
    "upload_files",
    "upload_one_file",
]

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Request body bounding
# ---------------------------------------------------------------------------


def _bounded_request(request: Request, max_bytes: int) -> Request:
    """Returns a view of ``request`` whose body stream fails past ``max_bytes``."""
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > max_bytes:
        logger.warning("Rejected upload: declared length %s exceeds %d bytes", declared, max_bytes)
        raise FileTooLargeError(max_bytes)

    received = 0
    upstream = request.receive

    async def receive() -> Message:
        nonlocal received
        message = await upstream()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > max_bytes:
                logger.warning("Rejected upload: body exceeded %d bytes while streaming", max_bytes)
                raise FileTooLargeError(max_bytes)
        return message

    return Request(request.scope, receive)


async def _parse_form(request: Request, max_bytes: int) -> FormData:
    bounded = _bounded_request(request, max_bytes)
    return await bounded.form(max_files=float("inf"))


# ---------------------------------------------------------------------------
# Single part handling
# ---------------------------------------------------------------------------


def _is_allowed(content_type: str, allowed_file_types: list[str]) -> bool:
    if not allowed_file_types:
        return True
    wanted = content_type.casefold()
    return any(ft.casefold() == wanted for ft in allowed_file_types)


def file_extension(file_name: str) -> str:
    """Returns everything from the last dot of the base name, dotfiles included.

    ``"photo.tar.gz"`` gives ``".gz"``, ``".bashrc"`` gives ``".bashrc"`` and a name
    without a dot gives ``""``.
    """
    base = file_name.rsplit("/", 1)[-1]
    dot = base.rfind(".")
    return base[dot:] if dot >= 0 else ""


def _copy_to_disk(source: BinaryIO, target: Path) -> int:
    written = 0
    with open(target, "wb") as outfile:
        while chunk := source.read(COPY_CHUNK_SIZE):
            outfile.write(chunk)
            written += len(chunk)
    return written


async def _store_part(
    part: UploadFile,
    destination: Path,
    settings: ToolkitSettings,
    generator: RandomStringGenerator,
    rename: bool,
) -> UploadedFile:
    original_name = part.filename or ""

    head = await part.read(SNIFF_LENGTH)
    try:
        content_type = await asyncio.to_thread(magic.from_buffer, head, mime=True)
    except magic.MagicException as mime_err:
        logger.error("Failed to detect MIME type for %s: %s", original_name, mime_err)
        raise UploadError(f"could not detect type of uploaded file {original_name!r}") from mime_err

    if not _is_allowed(content_type, settings.allowed_file_types):
        logger.warning(
            "Rejected upload %s: detected type %s not in %s",
            original_name,
            content_type,
            settings.allowed_file_types,
        )
        raise FileTypeNotAllowedError(content_type)

    # The sniffed bytes belong to the file and must be copied too
    await part.seek(0)

    if rename:
        new_name = generator.random_string(RENAMED_FILE_STEM_LENGTH) + file_extension(original_name)
    else:
        new_name = original_name

    file_size = await asyncio.to_thread(_copy_to_disk, part.file, destination / new_name)
    logger.debug(
        "Stored upload %s as %s (%d bytes, MIME: %s)",
        original_name,
        new_name,
        file_size,
        content_type,
    )
    return UploadedFile(
        new_file_name=new_name,
        original_file_name=original_name,
        file_size=file_size,
    )


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


async def upload_files(
    request: Request,
    destination_dir: str | os.PathLike[str],
    settings: ToolkitSettings,
    generator: RandomStringGenerator,
    rename: bool = True,
) -> list[UploadedFile]:
    """Stores every file part of a multipart request in ``destination_dir``.

    Parts are processed in form order and the first failure stops the loop.
    The raised :class:`UploadError` carries the files stored before it in
    ``uploaded_files``.

    Raises:
        FileTooLargeError: If the body exceeds the configured size limit.
        FileTypeNotAllowedError: If a part's sniffed type is not allowed.
        PathNotDirectoryError: If ``destination_dir`` exists as a file.
        UploadError: If a part cannot be sniffed or written to disk.
    """
    max_bytes = settings.effective_max_file_size
    ensure_dir(destination_dir)
    destination = Path(destination_dir)

    form = await _parse_form(request, max_bytes)
    uploaded: list[UploadedFile] = []
    try:
        for field_name, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue
            try:
                uploaded.append(await _store_part(value, destination, settings, generator, rename))
            except UploadError as exc:
                exc.uploaded_files = list(uploaded)
                raise
            except OSError as exc:
                logger.error("Failed to store upload %s from field %s: %s", value.filename, field_name, exc)
                raise UploadError(f"could not store uploaded file {value.filename!r}", uploaded) from exc
    finally:
        await form.close()

    logger.info("Stored %d uploaded file(s) in %s", len(uploaded), destination)
    return uploaded


async def upload_one_file(
    request: Request,
    destination_dir: str | os.PathLike[str],
    settings: ToolkitSettings,
    generator: RandomStringGenerator,
    rename: bool = True,
) -> UploadedFile:
    """Like :func:`upload_files`, returning the first stored file only.

    Raises:
        NoFileUploadedError: If the request carried no file part.
    """
    files = await upload_files(request, destination_dir, settings, generator, rename=rename)
    if not files:
        raise NoFileUploadedError()
    return files[0]
