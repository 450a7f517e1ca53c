import httpx
import pytest
from starlette.requests import Request

from toolkit.core.config import ToolkitSettings
from toolkit.tools import Toolkit

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 600
TEXT_BYTES = b"just some plain text\n"


def _fake_from_buffer(buffer: bytes, mime: bool = False) -> str:
    if buffer.startswith(b"\x89PNG"):
        return "image/png"
    if buffer.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    return "text/plain"


@pytest.fixture
def fake_magic(monkeypatch):
    """Replace libmagic sniffing with a signature check on the first bytes."""
    monkeypatch.setattr("toolkit.services.uploads.magic.from_buffer", _fake_from_buffer, raising=True)


# Fixture factory building a Starlette request from raw body bytes
@pytest.fixture
def make_request():
    def _make_request(body: bytes, headers: dict[str, str] | None = None, chunk_size: int | None = None) -> Request:
        chunk_size = chunk_size or max(len(body), 1)
        chunks = [body[i : i + chunk_size] for i in range(0, len(body), chunk_size)] or [b""]
        messages = [
            {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
            for i, chunk in enumerate(chunks)
        ]

        async def receive():
            if messages:
                return messages.pop(0)
            return {"type": "http.disconnect"}

        raw_headers = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items()]
        scope = {
            "type": "http",
            "method": "POST",
            "path": "/",
            "query_string": b"",
            "headers": raw_headers,
        }
        return Request(scope, receive)

    return _make_request


@pytest.fixture
def multipart_request(make_request):
    """Build a multipart/form-data request; ``files`` uses httpx's ``files=`` format."""

    def _multipart_request(files, data=None, chunk_size: int | None = None) -> Request:
        encoded = httpx.Request("POST", "http://testserver/", files=files, data=data)
        body = encoded.read()
        headers = {"content-type": encoded.headers["content-type"], "content-length": str(len(body))}
        return make_request(body, headers, chunk_size=chunk_size)

    return _multipart_request


@pytest.fixture
def json_request(make_request):
    def _json_request(body: bytes | str) -> Request:
        if isinstance(body, str):
            body = body.encode("utf-8")
        return make_request(body, {"content-type": "application/json", "content-length": str(len(body))})

    return _json_request


@pytest.fixture
def toolkit() -> Toolkit:
    return Toolkit(settings=ToolkitSettings(allowed_file_types=["image/png", "image/jpeg"]))
