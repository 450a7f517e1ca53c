import logging

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.responses import Response
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from toolkit.api.routes import router
from toolkit.core.exceptions import ToolkitError
from toolkit.core.logging import setup_logging
from toolkit.models.toolkit_models import JSONEnvelope
from toolkit.services.json_codec import error_json
from toolkit.services.json_codec import write_json

setup_logging()

app = FastAPI(title="Web Toolkit demo")

logger = logging.getLogger(__name__)


@app.exception_handler(ToolkitError)
async def toolkit_exception_handler(_request: Request, exc: ToolkitError) -> Response:
    logger.error("%s: %s (status: %d)", type(exc).__name__, exc, exc.status_code)
    return error_json(exc, exc.status_code)


@app.exception_handler(ValidationError)
async def validation_exception_handler(_request: Request, exc: ValidationError) -> Response:
    logger.error("Body validation failed: %s", exc.errors(), exc_info=False)
    return error_json(exc, status.HTTP_400_BAD_REQUEST)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> Response:
    logger.error("HTTP exception: %s (status: %s)", exc.detail, exc.status_code)
    return write_json(exc.status_code, JSONEnvelope(error=True, message=str(exc.detail)).model_dump(exclude_none=True))


@app.get("/health", status_code=status.HTTP_200_OK, tags=["Health"])
async def health_check() -> dict[str, str]:
    logger.info("Health check endpoint called")
    return {"status": "ok"}


app.include_router(router)
