"""
Main entry point for the AVIF batch converter.

Parses command-line arguments, configures logging and runs the conversion
pipeline. Fatal preconditions (missing input directory, no matching files,
missing encoder) end the process with exit status 1.
"""

import sys
from typing import Optional, Sequence

from loguru import logger

from avif_batch.cli import get_args
from avif_batch.config.common import DEFAULT_LOG_LEVEL, LOGGER_FORMAT
from avif_batch.domain.exceptions import ImageConverterException
from avif_batch.pipeline.conversion_pipeline import ConversionPipeline


def configure_logger(level: str = DEFAULT_LOG_LEVEL) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format=LOGGER_FORMAT)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = get_args(argv)
    configure_logger(args.log_level)
    logger.debug(f"Parsed arguments: {args}")

    try:
        ConversionPipeline(args).run()
    except ImageConverterException as e:
        logger.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
