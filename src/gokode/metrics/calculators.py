"""Per-file metric calculators.

A calculator turns the decoded text of one source file into a single metric
value. New metrics are added by registering another calculator; the pipeline
picks them by name from ``GokodeConfig.metrics``.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence

from ..exceptions import InvalidConfigError
from .models import MetricValue


class MetricCalculator(Protocol):
    name: str

    def compute(self, text: str) -> MetricValue: ...


class LineCount:
    """Number of lines in a file.

    Counts line terminators, plus one for a trailing line without one. The
    text is expected to come from a stream opened with universal newlines,
    so ``\\r\\n`` and ``\\r`` have already been folded into ``\\n``.
    """

    name = "number_of_rows"

    def compute(self, text: str) -> int:
        if not text:
            return 0
        rows = text.count("\n")
        if not text.endswith("\n"):
            rows += 1
        return rows


_REGISTRY: dict[str, Callable[[], MetricCalculator]] = {
    LineCount.name: LineCount,
}


def register_calculator(name: str, factory: Callable[[], MetricCalculator]) -> None:
    """Make a calculator available to :func:`build_calculators`."""
    _REGISTRY[name] = factory


def available_metrics() -> list[str]:
    return sorted(_REGISTRY)


def build_calculators(names: Sequence[str]) -> list[MetricCalculator]:
    """Instantiate calculators by metric name, preserving order.

    Raises:
        InvalidConfigError: If a name has no registered calculator.
    """
    calculators = []
    for name in names:
        factory = _REGISTRY.get(name)
        if factory is None:
            raise InvalidConfigError(
                "metrics", name, f"unknown metric (available: {', '.join(available_metrics())})"
            )
        calculators.append(factory())
    return calculators
