"""Read, filter and report stages wired into one sampling loop."""

from __future__ import annotations

import logging
import time

from bordasense.i2c import I2CError
from bordasense.process import FILTERED_SIZE, RingQueue, median_sample
from bordasense.read import PRODUCTION_SIZE, READ_PERIOD_MS, SensorReader
from bordasense.sensors import SensorData
from bordasense.transmit import Summary, calculate_data, format_report

logger = logging.getLogger(__name__)


class Pipeline:
    """Samples into a production queue, median-filters into a filtered queue, summarises."""

    def __init__(
        self,
        reader: SensorReader,
        *,
        production_size: int = PRODUCTION_SIZE,
        filtered_size: int = FILTERED_SIZE,
        interval: float = READ_PERIOD_MS / 1000,
    ) -> None:
        self.reader = reader
        self.production = RingQueue(production_size)
        self.filtered = RingQueue(filtered_size)
        self.interval = interval

    def read_step(self) -> SensorData | None:
        """Read one sample into the production queue; None if the read failed."""
        try:
            sample = self.reader.read_sample()
        except I2CError:
            return None
        self.production.push(sample)
        return sample

    def process_step(self) -> SensorData:
        """Push the median of the production queue into the filtered queue."""
        median = median_sample(self.production.snapshot().items())
        self.filtered.push(median)
        return median

    def report_step(self) -> Summary | None:
        """Summarise and log the filtered queue once it holds two samples."""
        samples = self.filtered.snapshot().items()
        if len(samples) < 2:
            return None
        summary = calculate_data(samples)
        for line in format_report(samples, summary).splitlines():
            logger.info(line)
        return summary

    def run(self, cycles: int) -> list[Summary]:
        """Run ``cycles`` read/process/report rounds and return the summaries made."""
        if cycles < 0:
            raise ValueError("cycles must not be negative")
        if not self.reader.initialized:
            self.reader.initialize()
        summaries: list[Summary] = []
        for cycle in range(cycles):
            if cycle and self.interval > 0:
                time.sleep(self.interval)
            if self.read_step() is None:
                continue
            self.process_step()
            summary = self.report_step()
            if summary is not None:
                summaries.append(summary)
        return summaries