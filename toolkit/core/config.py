"""Toolkit configuration settings.

This module defines the toolkit-wide settings using Pydantic's BaseSettings.
Embedding applications usually build a ``ToolkitSettings`` directly and hand it
to :class:`toolkit.tools.Toolkit`; values can also be loaded from environment
variables (``TOOLKIT_`` prefix) or an .env file.

Size limits left at ``0`` mean "use the default". The default is substituted on
every call, so a settings object is never mutated by the helpers.
"""

from pathlib import Path
from typing import Annotated

from pydantic import Field
from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import NoDecode

from toolkit.core.validation import DEFAULT_MAX_FILE_SIZE
from toolkit.core.validation import DEFAULT_MAX_JSON_SIZE


class ToolkitSettings(BaseSettings):
    """Configuration shared by every toolkit operation.

    Attributes:
        max_file_size: Upper bound in bytes for a multipart upload body. 0 means 1 GiB.
        allowed_file_types: MIME types accepted by the upload handler. Empty allows any type.
        max_json_size: Upper bound in bytes for a JSON request body. 0 means 1 MiB.
        allow_unknown_fields: Whether ``read_json`` accepts object keys the target does not declare.
    """

    max_file_size: int = Field(default=0, ge=0)
    allowed_file_types: Annotated[list[str], NoDecode] = Field(default_factory=list)
    max_json_size: int = Field(default=0, ge=0)
    allow_unknown_fields: bool = Field(default=False)

    model_config = {
        "env_file": ".env",
        "env_prefix": "TOOLKIT_",
        "extra": "ignore",
        "validate_assignment": True,
    }

    @field_validator("allowed_file_types", mode="before")  # type: ignore
    @classmethod
    def split_file_types(cls, v: str | list[str] | None) -> list[str]:
        """Accepts the allow-list either as a list or as a comma-separated string.

        Args:
            v: The value from the environment or direct assignment.

        Returns:
            A list of MIME type strings, blanks removed.
        """
        if v is None:
            return []
        if isinstance(v, str):
            return [ft.strip() for ft in v.split(",") if ft.strip()]
        return list(v)

    @property
    def effective_max_file_size(self) -> int:
        return self.max_file_size or DEFAULT_MAX_FILE_SIZE

    @property
    def effective_max_json_size(self) -> int:
        return self.max_json_size or DEFAULT_MAX_JSON_SIZE


class ServiceSettings(ToolkitSettings):
    """Settings for the demo service in ``toolkit.main``.

    Attributes:
        upload_dir: Directory uploaded files are stored in and downloaded from.
    """

    upload_dir: Path = Field(default=Path("uploads"))


settings = ServiceSettings()
