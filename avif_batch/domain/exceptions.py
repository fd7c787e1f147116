"""
Defines custom exception types for the AVIF batch converter.

Two families exist. Fatal preconditions stop the run before any worker is
started. Conversion exceptions are raised inside a single job and are turned
into a failed `ConversionResult` by the worker, so they never abort the pool.

All custom exceptions inherit from the base `ImageConverterException`.
"""


class ImageConverterException(Exception):
    """Base class for all custom exceptions in the application."""

    pass


# --- Fatal Preconditions ---
class InputDirectoryException(ImageConverterException):
    """Raised when the input path does not exist or is not a directory."""

    pass


class NoMatchingFilesException(ImageConverterException):
    """Raised when the scan found no files of the requested source format."""

    pass


class EncoderNotFoundException(ImageConverterException):
    """
    Raised when the `avifenc` executable cannot be resolved.

    This is checked once before the pool starts, never per job.
    """

    pass


class OutputDirectoryException(ImageConverterException):
    """Raised when the output directory cannot be created."""

    pass


# --- Per-Job Conversion Exceptions ---
class ConversionException(ImageConverterException):
    """Base class for failures contained to a single conversion job."""

    pass


class UniquePathException(ConversionException):
    """Raised when every numbered candidate for an output path already exists."""

    pass


class TempFileException(ConversionException):
    """Raised when the temporary output file cannot be created."""

    pass


class EncoderFailedException(ConversionException):
    """
    Raised when the encoder exits non-zero or cannot be started.

    The message carries the captured combined stdout/stderr of the encoder.
    """

    pass


class OutputPlacementException(ConversionException):
    """Raised when both the rename and the copy fallback fail."""

    pass


class OutputStatException(ConversionException):
    """
    Raised when the placed output cannot be stat'ed.

    The job counts as failed even though a file may exist on disk, since the
    converted size could not be confirmed.
    """

    pass
