"""
Conversion results and their aggregation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from ..utils.format_utils import reduction_percent


@dataclass(frozen=True)
class ConversionResult:
    """
    Outcome of one conversion job.

    A successful result carries both `destination` and `converted_size`; a
    failed one carries neither and has an `error` message instead. Use the
    `succeeded` and `failed` constructors rather than building instances
    directly.
    """

    source: Path
    original_size: int
    destination: Optional[Path] = None
    converted_size: Optional[int] = None
    error: Optional[str] = None

    @classmethod
    def succeeded(cls, source: Path, original_size: int, destination: Path, converted_size: int) -> "ConversionResult":
        return cls(
            source=source,
            original_size=original_size,
            destination=destination,
            converted_size=converted_size,
        )

    @classmethod
    def failed(cls, source: Path, original_size: int, error: str) -> "ConversionResult":
        return cls(source=source, original_size=original_size, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def reduction(self) -> float:
        if not self.ok:
            return 0.0
        return reduction_percent(self.original_size, self.converted_size or 0)


@dataclass
class ConversionSummary:
    """
    Tallies conversion results.

    Byte totals only include successful conversions, so the aggregate
    reduction is 0 when nothing succeeded.
    """

    success_count: int = 0
    failure_count: int = 0
    total_original_bytes: int = 0
    total_converted_bytes: int = 0
    failures: List[ConversionResult] = field(default_factory=list)

    def add(self, result: ConversionResult) -> None:
        if result.ok:
            self.success_count += 1
            self.total_original_bytes += result.original_size
            self.total_converted_bytes += result.converted_size or 0
        else:
            self.failure_count += 1
            self.failures.append(result)

    def consume(self, results: Iterable[ConversionResult]) -> "ConversionSummary":
        """Adds every result until the iterable is exhausted."""
        for result in results:
            self.add(result)
        return self

    @property
    def reduction_percent(self) -> float:
        return reduction_percent(self.total_original_bytes, self.total_converted_bytes)

    def to_dict(self) -> dict:
        return {
            "success": self.success_count,
            "failed": self.failure_count,
            "total_original_bytes": self.total_original_bytes,
            "total_converted_bytes": self.total_converted_bytes,
            "reduction_percent": round(self.reduction_percent, 1),
            "failures": [
                {"source": str(r.source), "error": r.error} for r in self.failures
            ],
        }
