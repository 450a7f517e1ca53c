from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict


class UploadedFile(BaseModel):
    """Metadata about a file stored by the upload handler."""

    model_config = ConfigDict(frozen=True)

    new_file_name: str
    original_file_name: str
    file_size: int  # bytes actually written, not the size the client declared


class JSONEnvelope(BaseModel):
    """Fixed-shape wrapper used for JSON error and status responses."""

    error: bool = False
    message: str = ""
    data: Any | None = None
