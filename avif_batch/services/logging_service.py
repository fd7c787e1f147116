"""
Writes the end-of-run summary as a YAML report.

Console output goes through loguru; this report is the machine-readable
record of a run, written only when a path is requested on the command line.
"""

from datetime import datetime
from pathlib import Path

import yaml
from loguru import logger

from ..domain.results import ConversionSummary


class SummaryReport:
    """
    YAML report of a `ConversionSummary`.

    Attributes:
        report_path: The file the report is written to. Parent directories
                     are created as needed.
    """

    def __init__(self, report_path: Path):
        self.report_path = report_path

    def build(self, summary: ConversionSummary, source_format: str, output_dir: Path) -> dict:
        report = {
            "finished_at": datetime.now().isoformat(timespec="seconds"),
            "source_format": source_format,
            "output_dir": str(output_dir),
        }
        report.update(summary.to_dict())
        return report

    def write(self, summary: ConversionSummary, source_format: str, output_dir: Path) -> None:
        """
        Writes the report. A write failure is logged, not raised, since the
        conversions themselves are already done.
        """
        content = self.build(summary, source_format, output_dir)
        try:
            self.report_path.parent.mkdir(parents=True, exist_ok=True)
            with self.report_path.open("w", encoding="utf-8") as f:
                yaml.dump(content, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
        except OSError as e:
            logger.error(f"Failed to write summary report {self.report_path}: {e}")
            return
        logger.info(f"Summary report written to {self.report_path}")
