"""The ``Toolkit`` facade.

One ``Toolkit`` bundles a :class:`ToolkitSettings` and a
:class:`RandomStringGenerator` and exposes every helper as a method, so an
application configures limits once and passes a single object around.
"""

import os
from collections.abc import Mapping
from typing import Any
from typing import TypeVar

import httpx
from starlette.requests import Request
from starlette.responses import FileResponse
from starlette.responses import Response

from toolkit.core.config import ToolkitSettings
from toolkit.models.toolkit_models import UploadedFile
from toolkit.services import downloads
from toolkit.services import filesystem
from toolkit.services import json_codec
from toolkit.services import remote
from toolkit.services import slugs
from toolkit.services import uploads
from toolkit.services.random_strings import RandomStringGenerator

T = TypeVar("T")


class Toolkit:
    def __init__(
        self,
        settings: ToolkitSettings | None = None,
        generator: RandomStringGenerator | None = None,
    ) -> None:
        self.settings = settings if settings is not None else ToolkitSettings()
        self.generator = generator if generator is not None else RandomStringGenerator()

    # --- Random strings ---

    def random_string(self, length: int) -> str:
        return self.generator.random_string(length)

    def random_string_with_alpha_start(self, length: int) -> str:
        return self.generator.random_string_with_alpha_start(length)

    # --- Uploads and filesystem ---

    async def upload_files(
        self, request: Request, destination_dir: str | os.PathLike[str], rename: bool = True
    ) -> list[UploadedFile]:
        return await uploads.upload_files(request, destination_dir, self.settings, self.generator, rename=rename)

    async def upload_one_file(
        self, request: Request, destination_dir: str | os.PathLike[str], rename: bool = True
    ) -> UploadedFile:
        return await uploads.upload_one_file(request, destination_dir, self.settings, self.generator, rename=rename)

    def ensure_dir(self, path: str | os.PathLike[str]) -> None:
        filesystem.ensure_dir(path)

    # --- Text ---

    def slugify(self, text: str) -> str:
        return slugs.slugify(text)

    # --- JSON ---

    async def read_json(
        self,
        request: Request,
        target: type[T],
        max_size: int | None = None,
        allow_unknown_fields: bool | None = None,
    ) -> T:
        return await json_codec.read_json(
            request,
            target,
            self.settings,
            max_size=max_size,
            allow_unknown_fields=allow_unknown_fields,
        )

    def write_json(self, status_code: int, payload: Any, headers: Mapping[str, str] | None = None) -> Response:
        return json_codec.write_json(status_code, payload, headers)

    def error_json(self, err: BaseException, status_code: int = 400) -> Response:
        return json_codec.error_json(err, status_code)

    # --- Outbound ---

    def post_json(self, uri: str, payload: Any, client: httpx.Client | None = None) -> tuple[httpx.Response, int]:
        return remote.post_json(uri, payload, client)

    async def apost_json(
        self, uri: str, payload: Any, client: httpx.AsyncClient | None = None
    ) -> tuple[httpx.Response, int]:
        return await remote.apost_json(uri, payload, client)

    # --- Downloads ---

    def download_file(self, directory: str | os.PathLike[str], file_name: str, display_name: str) -> FileResponse:
        return downloads.download_file(directory, file_name, display_name)
