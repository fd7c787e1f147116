"""
Output filename synthesis and unique path resolution.

`make_output_filename` never touches the filesystem. `ensure_unique_path`
only checks for existence; it does not reserve the path it returns, so two
workers resolving the same candidate at the same moment can both receive it.
"""

import secrets
import time
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config import image as image_config
from ..domain.exceptions import UniquePathException
from ..domain.image import ImageFile, split_extension


def random_hex_token() -> str:
    """
    Returns six hex characters of random data.

    Uses the OS entropy source. If that is unavailable, falls back to the
    current wall-clock nanoseconds masked to the same width; the token is then
    easier to collide but still valid.
    """
    try:
        return secrets.token_hex(image_config.NAME_RANDOM_BYTES)
    except (OSError, NotImplementedError) as e:
        logger.warning(f"Random source unavailable ({e}); using clock-based name token.")
        width = image_config.NAME_RANDOM_BYTES * 2
        mask = (1 << (width * 4)) - 1
        return f"{time.time_ns() & mask:0{width}x}"


def make_output_filename(image: ImageFile, prefix: Optional[str] = None, keep_name: bool = False) -> str:
    """
    Builds the output base filename for `image`.

    Keep-name mode: `[prefix_]<original stem>.avif`.
    Timestamped mode: `[prefix_]<YYYYMMDD of mtime>_<6 hex chars>.avif`.

    Args:
        image: The source image.
        prefix: Optional prefix joined with an underscore.
        keep_name: Keep the original stem instead of date + random token.

    Returns:
        The filename, without any directory.
    """
    target_ext = image_config.TARGET_EXTENSION
    if keep_name:
        stem, _ = split_extension(image.filename)
        parts = [prefix, stem] if prefix else [stem]
    else:
        date_str = image.mtime.strftime(image_config.NAME_DATE_FORMAT)
        parts = [date_str, random_hex_token()]
        if prefix:
            parts.insert(0, prefix)
    return f"{'_'.join(parts)}.{target_ext}"


def ensure_unique_path(path: Path) -> Path:
    """
    Returns `path` if it does not exist, otherwise the first free `<stem>-<n><suffix>`.

    Args:
        path: The preferred output path.

    Returns:
        A path that did not exist when it was checked.

    Raises:
        UniquePathException: If every suffix up to `MAX_UNIQUE_ATTEMPTS` is taken.
    """
    if not path.exists():
        return path
    stem, ext = split_extension(path.name)
    suffix = f".{ext}" if ext else ""
    for n in range(1, image_config.MAX_UNIQUE_ATTEMPTS + 1):
        candidate = path.with_name(f"{stem}-{n}{suffix}")
        if not candidate.exists():
            logger.trace(f"{path.name} exists; using {candidate.name}")
            return candidate
    raise UniquePathException(f"could not find unique name for {path}")
