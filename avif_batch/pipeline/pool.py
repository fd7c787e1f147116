"""
Fixed-size worker pool for conversion jobs.

Workers are threads: each job spends its time waiting on the `avifenc`
subprocess or on the filesystem, so the GIL is not a bottleneck.
"""

import concurrent.futures
import traceback
from typing import Callable, Iterator, Sequence

from loguru import logger

from ..domain.image import ImageFile
from ..domain.results import ConversionResult


class ConversionPool:
    """
    Runs a conversion function over a list of jobs with `workers` threads.

    The executor queues every job up front and hands each one to exactly one
    worker. Results come back in completion order, not submission order.
    """

    def __init__(self, convert: Callable[[ImageFile], ConversionResult], workers: int):
        self.convert = convert
        self.workers = max(1, workers)

    def run(self, jobs: Sequence[ImageFile]) -> Iterator[ConversionResult]:
        """
        Converts `jobs` and yields one result per job as each finishes.

        The generator ends only after every worker has finished its last job.
        An exception escaping `convert` is reported as a failed result for
        that job.
        """
        logger.info(f"Using {self.workers} worker thread(s) for {len(jobs)} job(s).")
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self.workers, thread_name_prefix="avif-worker"
        ) as executor:
            futures = {executor.submit(self.convert, job): job for job in jobs}
            for future in concurrent.futures.as_completed(futures):
                job = futures[future]
                try:
                    yield future.result()
                except Exception as exc:  # Keep one result per job even on unexpected errors.
                    tb_str = "".join(traceback.format_exception(exc))
                    logger.error(
                        f"Unhandled error converting {job.path}:\n"
                        f"Exception type: {type(exc).__name__}\n"
                        f"Traceback: {tb_str}"
                    )
                    yield ConversionResult.failed(job.path, job.size, f"unexpected error: {exc}")
