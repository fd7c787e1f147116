"""
This module contains helper functions for formatting data into human-readable
strings, mostly for per-file and summary log lines.
"""

MEGABYTE = 1024 * 1024


def formatted_size(size_bytes: int) -> str:
    """
    Converts a size in bytes to a human-readable string (e.g., B, KB, MB, GB, TB).

    Args:
        size_bytes: The size of the file in bytes.

    Returns:
        A formatted string with the appropriate unit.
        For example, 1536 becomes "1.50 KB", and 2097152 becomes "2 MB".
    """
    if size_bytes < 0:
        size_bytes = 0

    units = ["B", "KB", "MB", "GB", "TB", "PB"]
    factor = 1024.0

    if size_bytes == 0:
        return "0 B"

    for unit in units:
        if size_bytes < factor:
            if unit == "B":
                return f"{size_bytes} {unit}"
            return f"{size_bytes:.2f} {unit}".replace(".00", "")
        size_bytes /= factor

    return f"{size_bytes:.2f} {units[-1]}".replace(".00", "")


def format_mb(size_bytes: int) -> str:
    """Formats a byte count as megabytes with two decimals, e.g. "1.50 MB"."""
    return f"{size_bytes / MEGABYTE:.2f} MB"


def reduction_percent(original_bytes: int, converted_bytes: int) -> float:
    """
    Returns how much smaller the converted data is, as a percentage.

    Computed as `(1 - converted / original) * 100`. Defined as 0 when
    `original_bytes` is 0. Negative values mean the output grew.
    """
    if original_bytes == 0:
        return 0.0
    return (1.0 - converted_bytes / original_bytes) * 100.0
