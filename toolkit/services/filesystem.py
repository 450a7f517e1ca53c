import logging
import os
from pathlib import Path

from toolkit.core.exceptions import PathNotDirectoryError
from toolkit.core.validation import DIRECTORY_MODE

logger = logging.getLogger(__name__)


def ensure_dir(path: str | os.PathLike[str]) -> None:
    """Creates ``path`` (and missing parents) unless it already exists.

    A newly created leaf directory gets mode 0755 regardless of the process
    umask. Calling this on an existing directory does nothing.

    Raises:
        PathNotDirectoryError: If ``path`` exists but is not a directory.
        OSError: If the directory cannot be created.
    """
    target = Path(path)
    if not target.exists():
        target.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
        os.chmod(target, DIRECTORY_MODE)
        logger.info("Created directory %s", target)
        return
    if not target.is_dir():
        logger.warning("Refusing to use %s: exists and is not a directory", target)
        raise PathNotDirectoryError(str(target))
