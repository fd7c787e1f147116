"""
Discovers source images in a directory tree.

The scan visits every regular file below the input directory, keeps the ones
whose extension is in the allow-set and normalizes that extension once. An
entry that cannot be read is logged and skipped; only a root that is not a
usable directory stops the scan.
"""

import os
import stat
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List

from loguru import logger

from ..domain.exceptions import InputDirectoryException
from ..domain.image import ImageFile, is_allowed_extension, normalize_extension, split_extension


@dataclass
class ScanResult:
    """
    Images found by `scan_directory` and the per-extension inventory.

    Attributes:
        files: Every accepted image, in walk order.
        counts: Normalized extension -> number of files.
    """

    files: List[ImageFile] = field(default_factory=list)
    counts: Dict[str, int] = field(default_factory=dict)

    def files_with_extension(self, ext: str) -> List[ImageFile]:
        return [f for f in self.files if f.ext == ext]


def _log_walk_error(error: OSError) -> None:
    logger.warning(f"skip {error.filename}: {error}")


def _describe(file_path: Path) -> ImageFile | None:
    """Builds an `ImageFile` for an accepted regular file, or returns None to skip it."""
    _, raw_ext = split_extension(file_path.name)
    if not raw_ext or not is_allowed_extension(raw_ext):
        return None
    try:
        st = os.stat(file_path)
    except OSError as e:
        logger.warning(f"can't stat {file_path}: {e}")
        return None
    if not stat.S_ISREG(st.st_mode):
        return None
    return ImageFile(
        path=file_path,
        mtime=datetime.fromtimestamp(st.st_mtime),
        ext=normalize_extension(raw_ext),
        size=st.st_size,
    )


def scan_directory(input_dir: Path) -> ScanResult:
    """
    Recursively scans `input_dir` for images in the accepted formats.

    Args:
        input_dir: The directory to scan.

    Returns:
        A `ScanResult` with the accepted files and their counts per normalized
        extension. "jpeg" files are counted under "jpg".

    Raises:
        InputDirectoryException: If `input_dir` does not exist or is not a directory.
    """
    if not input_dir.is_dir():
        raise InputDirectoryException(f"input is not a directory or not accessible: {input_dir}")

    files: List[ImageFile] = []
    counts: Counter = Counter()
    for dir_path, _dir_names, file_names in os.walk(input_dir, onerror=_log_walk_error):
        for file_name in file_names:
            image = _describe(Path(dir_path) / file_name)
            if image is None:
                continue
            files.append(image)
            counts[image.ext] += 1

    logger.debug(f"Scanned {input_dir}: {len(files)} image(s) found.")
    return ScanResult(files=files, counts=dict(counts))
