"""
This module provides the Modules class, which locates the external `avifenc`
encoder required by the application.
"""
import shutil
import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from ..config.common import AVIFENC_DIR, AVIFENC_NAME
from ..domain.exceptions import EncoderNotFoundException


class Modules:
    """
    Resolves external tools.

    A directory configured as `paths.avifenc_dir` in `config.user.yaml` takes
    priority; otherwise the executable must be on the system PATH.
    """

    @staticmethod
    def _executable_name() -> str:
        return f"{AVIFENC_NAME}.exe" if sys.platform == "win32" else AVIFENC_NAME

    @staticmethod
    def find_avifenc(configured_dir: Optional[Path] = AVIFENC_DIR) -> Optional[str]:
        """
        Returns the path of the `avifenc` executable, or None if it cannot be found.

        Args:
            configured_dir: Directory to look in before falling back to PATH.
        """
        exe_name = Modules._executable_name()
        if configured_dir and configured_dir.is_dir():
            configured_path = configured_dir / exe_name
            if configured_path.is_file():
                logger.debug(f"Using avifenc from configured path: '{configured_path}'")
                return str(configured_path)
            logger.warning(
                f"`avifenc_dir` is configured, but '{exe_name}' was not found there. Falling back to system PATH."
            )
        return shutil.which(AVIFENC_NAME)

    @staticmethod
    def require_avifenc(configured_dir: Optional[Path] = AVIFENC_DIR) -> str:
        """
        Resolves `avifenc` or raises.

        Raises:
            EncoderNotFoundException: If the executable cannot be resolved.
        """
        avifenc_path = Modules.find_avifenc(configured_dir)
        if not avifenc_path:
            raise EncoderNotFoundException(
                f"{AVIFENC_NAME} not found in PATH. Install libavif or set "
                "'paths.avifenc_dir' in 'config.user.yaml'."
            )
        logger.debug(f"Resolved encoder: {avifenc_path}")
        return avifenc_path
