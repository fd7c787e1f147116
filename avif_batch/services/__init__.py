"""
Services Package for the AVIF batch converter.

- **File Processing Service (`scan_directory`):**
  Walks the input tree, classifies images by normalized extension and builds
  the per-extension inventory.

- **Naming Service (`make_output_filename`, `ensure_unique_path`):**
  Synthesizes output filenames and resolves them to paths that do not exist yet.

- **Encoding Service (`AvifEncoder`):**
  Converts one image per call: runs `avifenc` into a temp file next to the
  destination and moves the result into place.

- **Logging Service (`SummaryReport`):**
  Writes the final tally as a YAML report.
"""
