"""
Converts a single image to AVIF.

Each call to `AvifEncoder.convert` runs one job end to end:

1. Build the output name and resolve it to a path that does not exist yet.
2. Create an empty temp file in the destination directory.
3. Run `avifenc <source> <temp>`.
4. Rename the temp file onto the destination, or copy it when the rename fails.
5. Stat the destination to confirm the converted size.

Every call returns exactly one `ConversionResult`, and the temp file is gone
afterwards whatever the outcome. Encoders hold no per-job state, so one
instance can be shared by all worker threads.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import List, Optional

from loguru import logger

from ..config.common import AVIFENC_NAME, AVIFENC_OPTIONS
from ..config.image import TEMP_FILE_PREFIX, TEMP_FILE_SUFFIX
from ..domain.exceptions import (
    ConversionException,
    EncoderFailedException,
    OutputPlacementException,
    OutputStatException,
    TempFileException,
)
from ..domain.image import ImageFile
from ..domain.results import ConversionResult
from ..utils.command_utils import run_cmd
from .naming_service import ensure_unique_path, make_output_filename


class TempOutputFile:
    """
    An empty temp file that is removed on exit unless it was moved away.

    Usage:
        with TempOutputFile(directory) as tmp:
            ...write to tmp.path...
            tmp.commit_to(destination)
    """

    def __init__(self, directory: Path):
        self.directory = directory
        self.path: Optional[Path] = None
        self.consumed = False

    def __enter__(self) -> "TempOutputFile":
        try:
            fd, name = tempfile.mkstemp(prefix=TEMP_FILE_PREFIX, suffix=TEMP_FILE_SUFFIX, dir=self.directory)
        except OSError as e:
            raise TempFileException(f"create temp file: {e}") from e
        os.close(fd)
        self.path = Path(name)
        return self

    def __exit__(self, exc_type, exc, tb):
        if self.path is not None and not self.consumed:
            try:
                self.path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning(f"Could not remove temp file {self.path}: {e}")
        return False

    def commit_to(self, destination: Path) -> None:
        """
        Moves the temp file onto `destination`.

        An atomic rename is tried first. If it fails (e.g., across filesystems)
        the bytes are copied and flushed to disk, then the temp file is removed
        by `__exit__`.

        Raises:
            OutputPlacementException: If both the rename and the copy fail.
        """
        try:
            os.rename(self.path, destination)
        except OSError as rename_err:
            logger.debug(f"rename {self.path} -> {destination} failed ({rename_err}); copying instead.")
            try:
                copy_file(self.path, destination)
            except OSError as copy_err:
                self._discard_partial(destination)
                raise OutputPlacementException(
                    f"save output failed: rename: {rename_err}, copy: {copy_err}"
                ) from copy_err
            return
        self.consumed = True

    @staticmethod
    def _discard_partial(destination: Path) -> None:
        try:
            destination.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove partial output {destination}: {e}")


def copy_file(src: Path, dst: Path) -> None:
    """Copies `src` to `dst` byte for byte and flushes `dst` to disk before closing it."""
    with open(src, "rb") as fin, open(dst, "wb") as fout:
        shutil.copyfileobj(fin, fout)
        fout.flush()
        os.fsync(fout.fileno())


class AvifEncoder:
    """
    Runs conversion jobs against one output directory.

    Attributes:
        output_dir: Where converted files are written.
        prefix: Optional output filename prefix.
        keep_name: Keep the original stem instead of a timestamped name.
        avifenc_cmd: The encoder executable (name or path).
        options: Quality/depth arguments placed before the two file paths.
    """

    def __init__(
        self,
        output_dir: Path,
        prefix: Optional[str] = None,
        keep_name: bool = False,
        avifenc_cmd: str = AVIFENC_NAME,
        options: Optional[List[str]] = None,
    ):
        self.output_dir = output_dir
        self.prefix = prefix
        self.keep_name = keep_name
        self.avifenc_cmd = avifenc_cmd
        self.options = list(AVIFENC_OPTIONS if options is None else options)

    def resolve_destination(self, image: ImageFile) -> Path:
        """Names the output for `image` and makes the path unique in `output_dir`."""
        out_name = make_output_filename(image, self.prefix, self.keep_name)
        return ensure_unique_path(self.output_dir / out_name)

    def build_command(self, source: Path, temp_path: Path) -> List[str]:
        return [self.avifenc_cmd, *self.options, str(source), str(temp_path)]

    def encode(self, source: Path, temp_path: Path) -> None:
        """
        Runs the encoder from `source` into `temp_path`.

        Raises:
            EncoderFailedException: With the captured output, if the encoder
                could not be started or exited non-zero.
        """
        result = run_cmd(self.build_command(source, temp_path), show_cmd=True)
        if result is None:
            raise EncoderFailedException(f"{AVIFENC_NAME} could not be started")
        if result.returncode != 0:
            raise EncoderFailedException(
                f"{AVIFENC_NAME} failed: exit status {result.returncode}; output: {result.stdout}"
            )

    def _convert(self, image: ImageFile) -> ConversionResult:
        destination = self.resolve_destination(image)
        with TempOutputFile(destination.parent) as tmp:
            self.encode(image.path, tmp.path)
            tmp.commit_to(destination)
        try:
            converted_size = destination.stat().st_size
        except OSError as e:
            raise OutputStatException(f"stat output failed: {e}") from e
        return ConversionResult.succeeded(image.path, image.size, destination, converted_size)

    def convert(self, image: ImageFile) -> ConversionResult:
        """
        Converts one image. Never raises for per-job failures.

        Returns:
            A successful result with the destination and converted size, or a
            failed result with a diagnostic message.
        """
        try:
            return self._convert(image)
        except ConversionException as e:
            logger.debug(f"Conversion of {image.path} failed: {e}")
            return ConversionResult.failed(image.path, image.size, str(e))
