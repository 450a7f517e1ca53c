import logging
import mimetypes
import os
from pathlib import Path

from fastapi import HTTPException
from starlette.responses import FileResponse

logger = logging.getLogger(__name__)


def download_file(directory: str | os.PathLike[str], file_name: str, display_name: str) -> FileResponse:
    """Serves ``directory/file_name`` as an attachment named ``display_name``.

    Browsers show a "Save as" dialog instead of rendering the file. ASCII names
    are sent as ``attachment; filename="<display_name>"``; other names use the
    RFC 5987 ``filename*=utf-8''...`` form Starlette produces. Range requests
    and conditional headers are handled by ``FileResponse``.

    Raises:
        HTTPException: 404 if the file does not exist or is not a regular file.
    """
    path = Path(directory) / file_name
    if not path.is_file():
        logger.warning("Download requested for missing file %s", path)
        raise HTTPException(status_code=404, detail="File not found")

    headers = None
    if display_name.isascii():
        headers = {"Content-Disposition": f'attachment; filename="{display_name}"'}
    return FileResponse(
        path,
        headers=headers,
        media_type=mimetypes.guess_type(path)[0] or "text/plain",
        filename=display_name,
        content_disposition_type="attachment",
    )
