"""Timing helpers to log duration and throughput of operations."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from time import perf_counter
from typing import Iterator, Optional


@dataclass
class _Timer:
    label: str
    logger: logging.Logger
    level: int
    unit: str
    expected_total: Optional[int]
    count: int = 0
    start: float = field(default_factory=perf_counter)

    def add(self, amount: int = 1) -> None:
        self.count += amount

    def set_total(self, total: int) -> None:
        self.expected_total = total

    @property
    def elapsed(self) -> float:
        return perf_counter() - self.start

    def _resolved_total(self) -> int:
        return self.expected_total if self.expected_total is not None else self.count

    def finish(self, success: bool = True) -> None:
        elapsed = self.elapsed
        total = self._resolved_total()

        if not success:
            self.logger.error(
                "%s failed after %.2fs (%s %s)", self.label, elapsed, f"{total:,}", self.unit
            )
            return

        message = f"{self.label} completed in {elapsed:.2f}s ({total:,} {self.unit}"
        if elapsed > 0 and total:
            message += f" @ {total / elapsed:,.0f} {self.unit}/s"
        message += ")"
        self.logger.log(self.level, message)


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
    unit: str = "rows",
    total: Optional[int] = None,
) -> Iterator[_Timer]:
    """Time the enclosed block and log its duration and throughput.

    Args:
        label: Description of the operation being timed
        logger: Logger instance to use (defaults to "payroll_contrib.timer")
        level: Logging level for the success message
        unit: Unit for throughput calculation (e.g., "rows", "results")
        total: Expected total count; otherwise whatever ``add`` accumulated
    """
    timer = _Timer(
        label=label,
        logger=logger or logging.getLogger("payroll_contrib.timer"),
        level=level,
        unit=unit,
        expected_total=total,
    )
    try:
        yield timer
    except Exception:
        timer.finish(success=False)
        raise
    else:
        timer.finish(success=True)
