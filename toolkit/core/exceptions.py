"""Core custom exceptions for the toolkit.

Every helper raises a subclass of :class:`ToolkitError`. ``status_code`` is the
HTTP status an application would normally answer with; ``error_json`` and the
demo app's exception handler use it, callers are free to ignore it.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from toolkit.models.toolkit_models import UploadedFile


class ToolkitError(Exception):
    """Base exception for toolkit errors."""

    status_code: int = 400


# ---------------------------------------------------------------------------
# Uploads and filesystem
# ---------------------------------------------------------------------------


class UploadError(ToolkitError):
    """Base exception for upload failures.

    ``uploaded_files`` holds the records stored before the failing part, so a
    caller can clean up or report partial progress.
    """

    def __init__(self, message: str, uploaded_files: "list[UploadedFile] | None" = None) -> None:
        super().__init__(message)
        self.uploaded_files: list[UploadedFile] = list(uploaded_files or [])


class FileTooLargeError(UploadError):
    """Raised when a multipart body exceeds the configured size limit."""

    status_code = 413

    def __init__(self, max_bytes: int, uploaded_files: "list[UploadedFile] | None" = None) -> None:
        super().__init__("uploaded file is too big", uploaded_files)
        self.max_bytes = max_bytes


class FileTypeNotAllowedError(UploadError):
    """Raised when the sniffed content type is not in the allow-list."""

    status_code = 415

    def __init__(self, content_type: str, uploaded_files: "list[UploadedFile] | None" = None) -> None:
        super().__init__("uploaded file type is not permitted", uploaded_files)
        self.content_type = content_type


class NoFileUploadedError(UploadError):
    """Raised when exactly one file was expected but the form carried none."""

    def __init__(self) -> None:
        super().__init__("no file uploaded")


class PathNotDirectoryError(ToolkitError):
    """Raised when a path that must be a directory exists as something else."""

    status_code = 500

    def __init__(self, path: str) -> None:
        super().__init__("file is not a directory")
        self.path = path


# ---------------------------------------------------------------------------
# Slugs
# ---------------------------------------------------------------------------


class SlugError(ToolkitError):
    """Base exception for slug generation."""


class EmptyInputError(SlugError):
    def __init__(self) -> None:
        super().__init__("empty string not permitted")


class EmptySlugError(SlugError):
    def __init__(self) -> None:
        super().__init__("after trimming, slug is of zero length")


# ---------------------------------------------------------------------------
# JSON decoding
# ---------------------------------------------------------------------------


class JSONDecodeFailure(ToolkitError):
    """Base exception for request bodies that cannot be decoded."""


class MalformedJSONError(JSONDecodeFailure):
    """Raised for syntax errors. ``offset`` is None when input ended mid-value."""

    def __init__(self, offset: int | None = None) -> None:
        if offset is None:
            message = "body contains badly-formed JSON"
        else:
            message = f"body contains badly-formed JSON (at character {offset})"
        super().__init__(message)
        self.offset = offset


class TypeMismatchError(JSONDecodeFailure):
    """Raised when a JSON value has the wrong type for its destination."""

    def __init__(self, field: str | None = None, offset: int | None = None) -> None:
        if field:
            message = f'body contains incorrect JSON type for field "{field}"'
        else:
            message = f"body contains incorrect JSON type (at character {offset or 0})"
        super().__init__(message)
        self.field = field
        self.offset = offset


class EmptyBodyError(JSONDecodeFailure):
    def __init__(self) -> None:
        super().__init__("body must not be empty")


class UnknownFieldError(JSONDecodeFailure):
    def __init__(self, name: str) -> None:
        super().__init__(f'body contains unknown key "{name}"')
        self.name = name


class BodyTooLargeError(JSONDecodeFailure):
    status_code = 413

    def __init__(self, max_bytes: int) -> None:
        super().__init__(f"body must not be larger than {max_bytes} bytes")
        self.max_bytes = max_bytes


class InternalDecodeError(JSONDecodeFailure):
    """Raised when the decode target itself cannot be used (a programming error)."""

    status_code = 500

    def __init__(self, detail: str) -> None:
        super().__init__(f"error unmarshalling JSON: {detail}")
        self.detail = detail


class MultipleJSONValuesError(JSONDecodeFailure):
    def __init__(self) -> None:
        super().__init__("only one JSON value allowed")


# ---------------------------------------------------------------------------
# Encoding and outbound calls
# ---------------------------------------------------------------------------


class SerializationError(ToolkitError):
    """Raised when a payload cannot be encoded as JSON."""

    status_code = 500


class TransportError(ToolkitError):
    """Raised when an outbound request fails at the network level."""

    status_code = 502
