"""Helpers for HTTP backend services built on Starlette/FastAPI.

Random strings, multipart uploads, slugs, JSON request/response handling,
outbound JSON posts and file downloads, grouped behind :class:`Toolkit`.
"""

from .core.config import ToolkitSettings  # noqa: F401
from .core.exceptions import ToolkitError  # noqa: F401
from .models.toolkit_models import JSONEnvelope  # noqa: F401
from .models.toolkit_models import UploadedFile  # noqa: F401
from .services.random_strings import RandomStringGenerator  # noqa: F401
from .tools import Toolkit  # noqa: F401
