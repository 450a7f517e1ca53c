import logging
import re

from toolkit.core.exceptions import EmptyInputError
from toolkit.core.exceptions import EmptySlugError

logger = logging.getLogger(__name__)

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Builds a URL-safe slug from free text.

    Every run of characters outside ``[a-z0-9]`` (after lower-casing) becomes a
    single dash and the result never starts or ends with one. Letters outside
    ASCII are not transliterated, they count as separators.

    Raises:
        EmptyInputError: If ``text`` is empty.
        EmptySlugError: If nothing remains after trimming the dashes.
    """
    if not text:
        raise EmptyInputError()
    slug = _NON_SLUG_RUN.sub("-", text.lower()).strip("-")
    if not slug:
        logger.debug("Input %r produced an empty slug", text)
        raise EmptySlugError()
    return slug
