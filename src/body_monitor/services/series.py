"""Derive plotting series from a weight history."""

from collections.abc import Sequence
from dataclasses import dataclass

from body_monitor.domain.models import SeriesPoint

CHART_MIN_POINTS = 4


@dataclass(frozen=True)
class ChartPoint:
    """A series point with its display labels."""

    sequence_index: int
    value: float
    tick_label: str
    tooltip: str


def derive_series(weights: Sequence[float]) -> list[SeriesPoint]:
    """Return one point per sample, indexed from 1 in input order."""
    return [
        SeriesPoint(sequence_index=index, value=value)
        for index, value in enumerate(weights, start=1)
    ]


def should_plot(series: Sequence[SeriesPoint]) -> bool:
    """Return True when the history is long enough to chart."""
    return len(series) >= CHART_MIN_POINTS


def chart_points(series: Sequence[SeriesPoint]) -> list[ChartPoint]:
    """Attach axis and tooltip labels to each point."""
    return [
        ChartPoint(
            sequence_index=point.sequence_index,
            value=point.value,
            # Only even measurements get an axis label.
            tick_label=str(point.sequence_index)
            if point.sequence_index % 2 == 0
            else "",
            tooltip=f"{point.value:.1f} kg",
        )
        for point in series
    ]
