import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from loguru import logger

from ..domain.exceptions import ConversionException, NoMatchingFilesException, OutputDirectoryException
from ..domain.image import ImageFile, normalize_extension
from ..domain.results import ConversionResult, ConversionSummary
from ..services.encoder_service import AvifEncoder
from ..services.file_processing_service import ScanResult, scan_directory
from ..services.logging_service import SummaryReport
from ..services.naming_service import ensure_unique_path, make_output_filename
from ..utils.format_utils import format_mb, formatted_size
from ..utils.module_utils import Modules
from .pool import ConversionPool


@dataclass(frozen=True)
class PreviewEntry:
    source: Path
    destination: Path
    size: int


def normalize_format(value: Optional[str]) -> str:
    """Normalizes a requested format: strips a leading dot, lowercases, folds `jpeg`."""
    if not value:
        return ""
    return normalize_extension(value.strip())


class ConversionPipeline:
    """
    Runs one batch: scan, select, then list, preview or convert.

    Fatal preconditions raise `ImageConverterException` subclasses before any
    worker starts. Per-file failures are collected in the summary.
    """

    def __init__(self, args: argparse.Namespace):
        self.args = args
        self.input_dir = Path(args.input)
        self.source_format = normalize_format(args.format)
        self.output_dir = Path(args.output) if args.output else self.input_dir
        self.prefix: Optional[str] = args.prefix or None
        self.keep_name: bool = args.keep_name
        self.workers: int = max(1, args.workers)

    def scan(self) -> ScanResult:
        scan_result = scan_directory(self.input_dir)
        logger.info("=== Found file types ===")
        for ext, count in sorted(scan_result.counts.items()):
            logger.info(f"{ext}: {count}")
        return scan_result

    def select_jobs(self, scan_result: ScanResult) -> List[ImageFile]:
        if not scan_result.counts.get(self.source_format):
            raise NoMatchingFilesException(f"No .{self.source_format} files found in directory {self.input_dir}")
        jobs = scan_result.files_with_extension(self.source_format)
        logger.debug(f"Selected {len(jobs)} file(s), {formatted_size(sum(j.size for j in jobs))} in total.")
        return jobs

    def preview(self, jobs: Iterable[ImageFile]) -> List[PreviewEntry]:
        """
        Names every job and resolves a unique destination without writing anything.

        A job whose name cannot be made unique is logged and left out of the
        preview; the remaining jobs are still previewed.
        """
        entries = []
        for image in jobs:
            out_name = make_output_filename(image, self.prefix, self.keep_name)
            try:
                destination = ensure_unique_path(self.output_dir / out_name)
            except ConversionException as e:
                logger.error(f"ERROR: {image.path} -> {e}")
                continue
            entries.append(PreviewEntry(image.path, destination, image.size))
            logger.info(f"{image.path} -> {destination} ({format_mb(image.size)})")
        return entries

    def prepare_output_dir(self) -> None:
        try:
            self.output_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryException(f"failed to create output directory: {e}") from e

    def convert(self, jobs: List[ImageFile]) -> ConversionSummary:
        """
        Converts `jobs` in the worker pool and tallies the results.

        The encoder must be resolvable before this is called; see `run`.
        """
        avifenc_path = Modules.require_avifenc()
        self.prepare_output_dir()
        encoder = AvifEncoder(self.output_dir, prefix=self.prefix, keep_name=self.keep_name, avifenc_cmd=avifenc_path)
        pool = ConversionPool(encoder.convert, self.workers)

        summary = ConversionSummary().consume(self._reported(pool.run(jobs)))
        self.report_summary(summary)
        return summary

    def _reported(self, results: Iterable[ConversionResult]) -> Iterator[ConversionResult]:
        for result in results:
            self.report_result(result)
            yield result

    @staticmethod
    def report_result(result: ConversionResult) -> None:
        if not result.ok:
            logger.error(f"ERROR: {result.source} -> {result.error}")
            return
        logger.success(
            f"OK: {result.source.name} -> {result.destination.name} "
            f"({format_mb(result.original_size)} -> {format_mb(result.converted_size)}, "
            f"{result.reduction:.1f}% reduction)"
        )

    @staticmethod
    def report_summary(summary: ConversionSummary) -> None:
        logger.info(f"Summary: {summary.success_count} successful, {summary.failure_count} failed")
        if summary.success_count > 0 and summary.total_original_bytes > 0:
            logger.info(
                f"Total size: {format_mb(summary.total_original_bytes)} -> "
                f"{format_mb(summary.total_converted_bytes)} "
                f"({summary.reduction_percent:.1f}% reduction)"
            )

    def run(self) -> Optional[ConversionSummary]:
        """
        Executes the batch according to the parsed arguments.

        Returns:
            The summary of a conversion run, or None when the run stopped
            after listing, without a format, or after a dry-run preview.
        """
        scan_result = self.scan()
        if self.args.list:
            return None
        if not self.source_format:
            logger.info("No format specified. Use --format (e.g. --format jpg).")
            return None

        jobs = self.select_jobs(scan_result)
        logger.info(f"Converting {len(jobs)} .{self.source_format} files to AVIF (workers={self.workers})")
        if self.args.dry_run:
            logger.info("DRY RUN - no conversion will be performed")
            self.preview(jobs)
            return None

        summary = self.convert(jobs)
        if getattr(self.args, "summary_yaml", None):
            SummaryReport(Path(self.args.summary_yaml)).write(summary, self.source_format, self.output_dir)
        return summary
