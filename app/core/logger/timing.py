"""Timing helpers to log the duration of service operations."""
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
    count: int = 0
    start: float = field(default_factory=perf_counter)

    def add(self, amount: int = 1) -> None:
        self.count += amount

    def finish(self, success: bool = True) -> None:
        elapsed = perf_counter() - self.start
        if success:
            message = f"{self.label} completed in {elapsed:.3f}s"
            if self.count:
                message += f" ({self.count:,} {self.unit})"
            self.logger.log(self.level, message)
        else:
            self.logger.error(f"{self.label} failed after {elapsed:.3f}s")


@contextmanager
def timeit(
    label: str,
    *,
    logger: Optional[logging.Logger] = None,
    level: int = logging.INFO,
    unit: str = "rows",
) -> Iterator[_Timer]:
    """Log how long the wrapped block took.

    Args:
        label: Description of the operation being timed
        logger: Logger instance to use (defaults to "salary_history.timer")
        level: Logging level for the timing message
        unit: Unit reported next to the counter accumulated via ``add``
    """
    log = logger or logging.getLogger("salary_history.timer")
    timer = _Timer(label=label, logger=log, level=level, unit=unit)
    try:
        yield timer
    except Exception:
        timer.finish(success=False)
        raise
    else:
        timer.finish(success=True)
