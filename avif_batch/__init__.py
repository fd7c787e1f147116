"""
AVIF batch converter.

The package is laid out in layers:

- ``config``: static settings and the optional user configuration file.
- ``domain``: the image file descriptor, conversion results and exceptions.
- ``services``: scanning, output naming and the per-file conversion worker.
- ``pipeline``: the worker pool and the end-to-end run flow.
- ``utils``: command execution, encoder lookup and formatting helpers.
"""

__version__ = "1.0.0"
