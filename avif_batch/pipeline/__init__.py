"""
This package contains the conversion pipeline.

`pool.py` fans jobs out to a fixed number of worker threads and fans the
results back in. `conversion_pipeline.py` runs the whole flow: scan, filter,
preview or convert, and report.
"""
