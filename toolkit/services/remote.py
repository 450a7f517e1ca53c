import logging
from typing import Any

import httpx

from toolkit.core.exceptions import TransportError
from toolkit.services.json_codec import JSON_MEDIA_TYPE
from toolkit.services.json_codec import encode_json

logger = logging.getLogger(__name__)

_JSON_HEADERS = {"Content-Type": JSON_MEDIA_TYPE}


def post_json(uri: str, payload: Any, client: httpx.Client | None = None) -> tuple[httpx.Response, int]:
    """POSTs ``payload`` as JSON to ``uri``.

    Without a ``client`` a one-off ``httpx.Client`` is opened and closed around
    the call; the response body is already read at that point. A caller-supplied
    client is left open.

    Returns:
        The response and its status code.

    Raises:
        SerializationError: If ``payload`` cannot be encoded.
        TransportError: If the request could not be sent or no response arrived.
    """
    content = encode_json(payload)
    logger.debug("POST %s (%d bytes of JSON)", uri, len(content))
    try:
        if client is None:
            with httpx.Client() as default_client:
                response = default_client.post(uri, content=content, headers=_JSON_HEADERS)
        else:
            response = client.post(uri, content=content, headers=_JSON_HEADERS)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("POST %s failed: %s", uri, exc)
        raise TransportError(str(exc)) from exc
    logger.debug("POST %s answered %d", uri, response.status_code)
    return response, response.status_code


async def apost_json(uri: str, payload: Any, client: httpx.AsyncClient | None = None) -> tuple[httpx.Response, int]:
    """Async counterpart of :func:`post_json` built on ``httpx.AsyncClient``."""
    content = encode_json(payload)
    logger.debug("POST %s (%d bytes of JSON)", uri, len(content))
    try:
        if client is None:
            async with httpx.AsyncClient() as default_client:
                response = await default_client.post(uri, content=content, headers=_JSON_HEADERS)
        else:
            response = await client.post(uri, content=content, headers=_JSON_HEADERS)
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.warning("POST %s failed: %s", uri, exc)
        raise TransportError(str(exc)) from exc
    logger.debug("POST %s answered %d", uri, response.status_code)
    return response, response.status_code
