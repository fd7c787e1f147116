"""
Configuration Package for the AVIF batch converter.

Static settings are kept apart from the application logic so that encoder
parameters, accepted source formats and naming rules can be adjusted in one
place.

This package includes settings for:
- Logging format and the optional `config.user.yaml` overrides.
- Encoder parameters passed to `avifenc`.
- Accepted image extensions, the target extension and temp-file naming.
"""
