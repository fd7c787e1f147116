"""
Utilities Package for the AVIF batch converter.

Modules:
    - command_utils.py: Runs external commands and captures their combined output.
    - format_utils.py: Human-readable sizes and size-reduction arithmetic.
    - module_utils.py: Locates the `avifenc` executable before a run starts.
"""
