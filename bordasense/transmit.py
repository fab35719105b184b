"""Summary statistics over the filtered samples and their report."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from bordasense.process import sort_streams
from bordasense.sensors import SensorData

TRANSMISSION_PERIOD_MS = 1000


def _wrap32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _wrap64(value: int) -> int:
    value &= 0xFFFFFFFFFFFFFFFF
    return value - (1 << 64) if value & (1 << 63) else value


def _tdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


@dataclass(frozen=True)
class Summary:
    """Per-stream minimum, maximum, median and standard deviation."""

    min: SensorData
    max: SensorData
    median: SensorData
    stddev: SensorData


def isqrt(x: int) -> int:
    """Floor square root of ``x`` taken as an unsigned 32-bit value."""
    return math.isqrt(x & 0xFFFFFFFF)


def _stream_stddev(column: Sequence[int]) -> int:
    mean = 0
    m2 = 0
    for n, x in enumerate(column, start=1):
        delta = _wrap32(x - mean)
        mean = _wrap32(mean + _tdiv(delta, n))
        delta2 = _wrap32(x - mean)
        m2 = _wrap64(m2 + delta * delta2)
    return isqrt(_tdiv(m2, len(column) - 1))


def calculate_data(samples: Iterable[SensorData]) -> Summary:
    """Summarise at least two samples stream by stream."""
    ordered = sort_streams(samples)
    if len(ordered) < 2:
        raise ValueError("a summary needs at least two samples")
    columns = zip(*(sample.values() for sample in ordered))
    return Summary(
        min=ordered[0],
        max=ordered[-1],
        median=ordered[len(ordered) // 2],
        stddev=SensorData.from_values(_stream_stddev(column) for column in columns),
    )


def format_report(samples: Iterable[SensorData], summary: Summary) -> str:
    """The report of the first stream: the queued values, then the summary."""
    lines = ["Raw[0] values in queue:"]
    lines.extend(f"  [{i:02d}] = {sample.ax}" for i, sample in enumerate(samples))
    lines.append("------ Summary (raw[0]) ------")
    lines.append(f"Min     : {summary.min.ax}")
    lines.append(f"Max     : {summary.max.ax}")
    lines.append(f"Median  : {summary.median.ax}")
    lines.append(f"Stddev  : {summary.stddev.ax}")
    return "\n".join(lines)