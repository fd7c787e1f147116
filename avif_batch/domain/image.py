"""
The source image descriptor produced by the scan.
"""
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..config.image import ALLOWED_EXTENSIONS, EXTENSION_ALIASES


def split_extension(filename: str) -> tuple[str, str]:
    """
    Splits a base filename at its final dot.

    Unlike `Path.suffix`, a leading dot counts, so ".png" has the extension
    "png" and an empty stem.

    Returns:
        A `(stem, extension)` tuple. The extension is "" when there is no dot.
    """
    stem, dot, ext = filename.rpartition(".")
    if not dot:
        return filename, ""
    return stem, ext


def normalize_extension(ext: str) -> str:
    """Lowercases an extension, strips a leading dot and folds aliases such as `jpeg`."""
    ext = ext.lower().lstrip(".")
    return EXTENSION_ALIASES.get(ext, ext)


def is_allowed_extension(ext: str) -> bool:
    return ext.lower() in ALLOWED_EXTENSIONS


@dataclass(frozen=True)
class ImageFile:
    """
    One discovered source image.

    Instances are created by the scanner and never modified afterwards.
    Workers read them to build the output name and to report the original
    size.

    Attributes:
        path: Path to the file as found during the walk.
        mtime: Last modification time (local time).
        ext: Normalized extension, e.g. "jpg" for both .jpg and .JPEG.
        size: Size in bytes.
    """

    path: Path
    mtime: datetime
    ext: str
    size: int

    @property
    def filename(self) -> str:
        return self.path.name
