"""
Core domain models of the AVIF batch converter.

Modules:
    exceptions.py: Exception types for fatal preconditions and per-job
                   conversion failures.
    image.py: `ImageFile`, the immutable descriptor of one discovered source
              image, plus extension normalization.
    results.py: `ConversionResult` for a single job and `ConversionSummary`,
                the aggregator that tallies results.
"""
