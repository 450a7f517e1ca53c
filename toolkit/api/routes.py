import logging
from uuid import uuid4

from fastapi import APIRouter
from fastapi import Depends
from fastapi import Query
from fastapi import Request
from fastapi.responses import FileResponse
from fastapi.responses import Response
from pydantic import BaseModel

from toolkit.core.config import settings
from toolkit.models.toolkit_models import JSONEnvelope
from toolkit.tools import Toolkit

# Configure module logger
logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

_toolkit = Toolkit(settings=settings)


def get_toolkit() -> Toolkit:
    """Dependency returning the service-wide toolkit; overridden in tests."""
    return _toolkit


class SlugRequest(BaseModel):
    text: str


@router.post("/upload", summary="Store every uploaded file", tags=["Files"])
async def upload(request: Request, rename: bool = True, toolkit: Toolkit = Depends(get_toolkit)) -> Response:
    request_id = str(uuid4())
    logger.info("[%s] Upload request received (rename=%s)", request_id, rename)
    files = await toolkit.upload_files(request, settings.upload_dir, rename=rename)
    logger.info("[%s] Stored %d file(s)", request_id, len(files))
    return toolkit.write_json(200, JSONEnvelope(message=f"{len(files)} file(s) uploaded", data=files))


@router.post("/upload-one", summary="Store exactly one uploaded file", tags=["Files"])
async def upload_one(request: Request, rename: bool = True, toolkit: Toolkit = Depends(get_toolkit)) -> Response:
    uploaded = await toolkit.upload_one_file(request, settings.upload_dir, rename=rename)
    return toolkit.write_json(200, JSONEnvelope(message="file uploaded", data=uploaded))


@router.get("/download/{file_name}", summary="Download a stored file", tags=["Files"])
def download(
    file_name: str,
    display_name: str | None = None,
    toolkit: Toolkit = Depends(get_toolkit),
) -> FileResponse:
    return toolkit.download_file(settings.upload_dir, file_name, display_name or file_name)


@router.post("/slug", summary="Build a slug from free text", tags=["Text"])
async def slug(request: Request, toolkit: Toolkit = Depends(get_toolkit)) -> Response:
    payload = await toolkit.read_json(request, SlugRequest)
    return toolkit.write_json(200, JSONEnvelope(message="slug created", data={"slug": toolkit.slugify(payload.text)}))


@router.get("/random", summary="Generate a random string", tags=["Text"])
def random_string(
    length: int = Query(default=25, ge=0, le=1024),
    alpha_start: bool = False,
    toolkit: Toolkit = Depends(get_toolkit),
) -> Response:
    if alpha_start:
        value = toolkit.random_string_with_alpha_start(length)
    else:
        value = toolkit.random_string(length)
    return toolkit.write_json(200, JSONEnvelope(data={"value": value}))
