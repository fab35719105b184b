import struct

import pytest

from bordasense.i2c import I2CBus
from bordasense.pipeline import Pipeline
from bordasense.read import SensorReader
from bordasense.sensors import BMP280_ADDR, MPU9250_ADDR, SensorData

CALIBRATION = struct.pack(
    "<12H", 27504, 26435, 64536, 36477, 54851, 3024, 2855, 140, 65529, 15500, 50936, 6000
)
BMP_BLOCK = bytes([0x65, 0x5A, 0xC0, 0x7E, 0xED, 0x00])
MPU_BLOCK = bytes([0x40, 0x00, 0x00, 0x00, 0xC0, 0x00, 0x00, 0x00, 0x05, 0x1E, 0x00, 0x00, 0x00, 0x00])


def _bank(entries):
    bank = bytearray(256)
    for reg, data in entries.items():
        bank[reg : reg + len(data)] = data
    return bytes(bank)


def _pipeline(**kwargs):
    bus = I2CBus(
        {
            MPU9250_ADDR: _bank({0x3B: MPU_BLOCK}),
            BMP280_ADDR: _bank({0x88: CALIBRATION, 0xF7: BMP_BLOCK}),
        }
    )
    return Pipeline(SensorReader(bus), interval=0, **kwargs), bus


def test_run_fills_queues_and_reports_from_second_cycle():
    pipeline, _ = _pipeline()
    summaries = pipeline.run(3)
    assert len(pipeline.production) == 3
    assert len(pipeline.filtered) == 3
    assert len(summaries) == 2


def test_run_queues_are_bounded():
    pipeline, _ = _pipeline(production_size=5, filtered_size=10)
    pipeline.run(12)
    assert len(pipeline.production) == 5
    assert len(pipeline.filtered) == 10


def test_constant_stream_summary():
    pipeline, _ = _pipeline()
    summary = pipeline.run(4)[-1]
    ax = pipeline.filtered.items()[0].ax
    assert summary.min.ax == summary.max.ax == summary.median.ax == ax
    assert summary.stddev.ax == 0


def test_process_step_pushes_median():
    pipeline, _ = _pipeline()
    pipeline.reader.initialize()
    samples = [SensorData(ax=v) for v in (9, 1, 5)]
    for sample in samples:
        pipeline.production.push(sample)
    median = pipeline.process_step()
    assert median.ax == 5
    assert pipeline.filtered.items() == [median]


def test_process_step_on_empty_queue_fails():
    pipeline, _ = _pipeline()
    with pytest.raises(ValueError):
        pipeline.process_step()


def test_report_step_needs_two_filtered_samples():
    pipeline, _ = _pipeline()
    pipeline.filtered.push(SensorData(ax=1))
    assert pipeline.report_step() is None
    pipeline.filtered.push(SensorData(ax=3))
    summary = pipeline.report_step()
    assert (summary.min.ax, summary.max.ax) == (1, 3)


def test_failed_read_is_skipped():
    pipeline, bus = _pipeline()
    pipeline.reader.initialize()
    del bus.targets[MPU9250_ADDR]
    assert pipeline.read_step() is None
    assert len(pipeline.production) == 0
    assert pipeline.run(2) == []


def test_run_rejects_negative_cycles():
    pipeline, _ = _pipeline()
    with pytest.raises(ValueError):
        pipeline.run(-1)