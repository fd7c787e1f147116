"""
Configuration settings related to image discovery and output naming.
"""

# --- Source Image Identification ---
# Extensions (lowercase, no dot) recognized during the scan. Anything else is
# ignored silently.
ALLOWED_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "bmp", "tiff", "webp", "heic"})

# Aliases folded into a single key before counting or filtering.
EXTENSION_ALIASES = {"jpeg": "jpg"}

# --- Output Settings ---
TARGET_EXTENSION = "avif"

# Temp files live next to the final output so the rename stays on one filesystem.
TEMP_FILE_PREFIX = "avif_tmp_"
TEMP_FILE_SUFFIX = f".{TARGET_EXTENSION}"

# Highest numeric suffix tried when resolving a unique output path.
MAX_UNIQUE_ATTEMPTS = 999

# `strftime` format of the date part of timestamped names.
NAME_DATE_FORMAT = "%Y%m%d"

# Bytes of entropy in timestamped names (two hex characters each).
NAME_RANDOM_BYTES = 3
