"""Sensor sampling: one combined reading from the MPU9250 and BMP280."""

from __future__ import annotations

import logging
import struct

from bordasense.i2c import I2CBus, I2CError, attach_device
from bordasense.sensors import (
    BMP280_ADDR,
    BMP280_REG_START,
    MPU9250_ACCEL_GYRO_REG_START,
    MPU9250_ADDR,
    SCALE_MULTIPLIER,
    Bmp280Calibration,
    Sensor,
    SensorData,
    SensorName,
    bmp280_init,
    bmp280_read_calibration_data,
    mpu9250_accel_divisor,
    mpu9250_gyro_divisor,
    mpu9250_init,
)

logger = logging.getLogger(__name__)

PRODUCTION_SIZE = 5
READ_PERIOD_MS = 1000

_MPU9250_BLOCK = 14
_BMP280_BLOCK = 6
ACCEL_FACTOR = SCALE_MULTIPLIER
GYRO_FACTOR = 10 * SCALE_MULTIPLIER


def _wrap32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _tdiv(a: int, b: int) -> int:
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def decode_mpu9250(data: bytes, accel_divisor: int, gyro_divisor: int) -> tuple[int, ...]:
    """Scale the accelerometer and gyroscope words of a 14-byte MPU9250 block.

    The block holds seven big-endian signed words; the fourth (temperature)
    is skipped. Returns ``(ax, ay, az, gx, gy, gz)``.
    """
    if len(data) < _MPU9250_BLOCK:
        raise ValueError(f"MPU9250 block needs {_MPU9250_BLOCK} bytes, got {len(data)}")
    if accel_divisor == 0 or gyro_divisor == 0:
        raise ValueError("divisor must not be zero")
    words = struct.unpack_from(">7h", data)
    accel = tuple(_tdiv(_wrap32(raw * ACCEL_FACTOR), accel_divisor) for raw in words[:3])
    gyro = tuple(_tdiv(_wrap32(raw * GYRO_FACTOR), gyro_divisor) for raw in words[4:])
    return accel + gyro


def decode_bmp280_raw(data: bytes) -> tuple[int, int]:
    """Extract the 20-bit raw ``(pressure, temperature)`` from a 6-byte BMP280 block."""
    if len(data) < _BMP280_BLOCK:
        raise ValueError(f"BMP280 block needs {_BMP280_BLOCK} bytes, got {len(data)}")
    pressure = (data[0] << 12) | (data[1] << 4) | (data[2] >> 4)
    temperature = (data[3] << 12) | (data[4] << 4) | (data[5] >> 4)
    return pressure, temperature


class SensorReader:
    """Reads combined samples from an MPU9250 and a BMP280 on one bus."""

    def __init__(self, bus: I2CBus) -> None:
        self.bus = bus
        self.mpu = Sensor(SensorName.MPU9250, MPU9250_ADDR)
        self.bmp = Sensor(SensorName.BMP280, BMP280_ADDR)
        self.sensors = [self.mpu, self.bmp]
        self.calibration = Bmp280Calibration()
        self.initialized = False

    def initialize(self) -> None:
        """Attach both sensors, configure them and load BMP280 calibration.

        Attaching a device fails loudly; a sensor that does not answer its
        configuration write is logged and left as it is.
        """
        for sensor in self.sensors:
            sensor.device = attach_device(self.bus, sensor.addr)
            try:
                if sensor.name is SensorName.BMP280:
                    bmp280_init(sensor)
                elif sensor.name is SensorName.MPU9250:
                    mpu9250_init(sensor)
            except I2CError:
                pass
        try:
            self.calibration = bmp280_read_calibration_data(self.bmp)
        except I2CError:
            self.calibration = Bmp280Calibration()
        self.initialized = True

    def read_sample(self) -> SensorData:
        """Read one sample from both sensors."""
        if not self.initialized:
            raise I2CError("sensors are not initialized")
        try:
            block = self.mpu.device.register_read(MPU9250_ACCEL_GYRO_REG_START, _MPU9250_BLOCK)
        except I2CError:
            logger.error("Failed to read MPU9250.")
            raise
        motion = decode_mpu9250(block, mpu9250_accel_divisor(self.mpu), mpu9250_gyro_divisor(self.mpu))

        try:
            block = self.bmp.device.register_read(BMP280_REG_START, _BMP280_BLOCK)
        except I2CError:
            logger.error("Failed to read BMP280.")
            raise
        raw_pressure, raw_temp = decode_bmp280_raw(block)
        # Pressure is compensated before temperature, using the previous t_fine.
        pressure = self.calibration.compensate_pressure(raw_pressure)
        temperature = self.calibration.compensate_temperature(raw_temp)
        return SensorData.from_values((*motion, pressure, temperature))