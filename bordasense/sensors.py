"""BMP280 and MPU9250 configuration, calibration and sample records."""

from __future__ import annotations

import enum
import logging
import struct
from collections.abc import Iterable
from dataclasses import astuple, dataclass, fields

from bordasense.i2c import I2CDevice, I2CError

logger = logging.getLogger(__name__)

BMP280_ADDR = 0x77
BMP280_REG_START = 0xF7
BMP280_REG_CONTROL = 0xF4
BMP280_REG_CONFIG = 0xF5
BMP280_DIG_REG_START = 0x88

BMP280_MODE_SLEEP = 0x00
BMP280_MODE_FORCED = 0x01
BMP280_MODE_NORMAL = 0x03

BMP280_OSRS_T = 0x01
BMP280_OSRS_P = 0x01

MPU9250_ADDR = 0x68
MPU9250_ACCEL_GYRO_REG_START = 0x3B
MPU9250_GYRO_CONFIG = 0x1B
MPU9250_ACCEL_CONFIG = 0x1C
MPU9250_GYRO_MODE = 0x00
MPU9250_ACCEL_MODE = 0x00

SCALE_MULTIPLIER = 100

_CALIBRATION_LENGTH = 24
_FULL_SCALE_MASK = 0x18

_ACCEL_DIVISORS = {0x00: 16384, 0x01: 8192, 0x10: 4096, 0x11: 2048}
_GYRO_DIVISORS = {0x00: 1310, 0x01: 655, 0x10: 328, 0x11: 164}


def _wrap32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - (1 << 32) if value & 0x80000000 else value


def _wrap64(value: int) -> int:
    value &= 0xFFFFFFFFFFFFFFFF
    return value - (1 << 64) if value & (1 << 63) else value


def _tdiv(a: int, b: int) -> int:
    """Integer division truncating toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


class SensorName(enum.Enum):
    MPU9250 = 0
    BMP280 = 1


@dataclass
class Sensor:
    """A sensor on the bus; ``device`` is set once it is attached."""

    name: SensorName
    addr: int
    device: I2CDevice | None = None


def _device(sensor: Sensor) -> I2CDevice:
    if sensor.device is None:
        raise I2CError(f"sensor {sensor.name.name} is not attached to a bus")
    return sensor.device


@dataclass(frozen=True)
class SensorData:
    """One sample of all eight data streams, each a signed 32-bit value."""

    ax: int = 0
    ay: int = 0
    az: int = 0
    gx: int = 0
    gy: int = 0
    gz: int = 0
    pres: int = 0
    temp: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, _wrap32(getattr(self, f.name)))

    @classmethod
    def from_values(cls, values: Iterable[int]) -> SensorData:
        """Build a sample from the eight stream values in field order."""
        items = tuple(values)
        if len(items) != len(fields(cls)):
            raise ValueError(f"expected {len(fields(cls))} values, got {len(items)}")
        return cls(*items)

    def values(self) -> tuple[int, ...]:
        """The eight stream values in field order."""
        return astuple(self)


@dataclass
class Bmp280Calibration:
    """BMP280 trimming parameters, kept as unsigned 16-bit words."""

    T1: int = 0
    T2: int = 0
    T3: int = 0
    P1: int = 0
    P2: int = 0
    P3: int = 0
    P4: int = 0
    P5: int = 0
    P6: int = 0
    P7: int = 0
    P8: int = 0
    P9: int = 0
    t_fine: int = 0

    def __post_init__(self) -> None:
        for name in ("T1", "T2", "T3", "P1", "P2", "P3", "P4", "P5", "P6", "P7", "P8", "P9"):
            setattr(self, name, getattr(self, name) & 0xFFFF)

    @classmethod
    def from_bytes(cls, data: bytes) -> Bmp280Calibration:
        """Decode the 24 little-endian calibration bytes."""
        if len(data) < _CALIBRATION_LENGTH:
            raise ValueError(f"calibration needs {_CALIBRATION_LENGTH} bytes, got {len(data)}")
        return cls(*struct.unpack_from("<12H", data))

    def compensate_temperature(self, adc_t: int) -> int:
        """Compensated temperature in hundredths of a degree; updates ``t_fine``."""
        adc = _wrap32(adc_t)
        var1 = _wrap32(((adc >> 3) - (self.T1 << 1)) * self.T2) >> 11
        delta = (adc >> 4) - self.T1
        var2 = _wrap32((_wrap32(delta * delta) >> 12) * self.T3) >> 14
        self.t_fine = _wrap32(var1 + var2)
        temperature = _wrap32(self.t_fine * 5 + 128) >> 8
        return _tdiv(_wrap32(SCALE_MULTIPLIER * temperature), 100) & 0xFFFFFFFF

    def compensate_pressure(self, adc_p: int) -> int:
        """Compensated pressure in hundredths of a hectopascal; 0 if undefined."""
        var1 = _wrap64(self.t_fine - 128000)
        var2 = _wrap64(var1 * var1 * self.P6)
        var2 = _wrap64(var2 + _wrap64(_wrap64(var1 * self.P5) << 17))
        var2 = _wrap64(var2 + _wrap64(self.P4 << 35))
        var1 = _wrap64(
            (_wrap64(var1 * var1 * self.P3) >> 8) + _wrap64(_wrap64(var1 * self.P2) << 12)
        )
        var1 = _wrap64(_wrap64((1 << 47) + var1) * self.P1) >> 33
        if var1 == 0:
            return 0
        p = 1048576 - _wrap32(adc_p)
        p = _tdiv(_wrap64(_wrap64(_wrap64(p << 31) - var2) * 3125), var1)
        var1 = _wrap64(self.P9 * (p >> 13) * (p >> 13)) >> 25
        var2 = _wrap64(self.P8 * p) >> 19
        p = _wrap64((_wrap64(p + var1 + var2) >> 8) + (self.P7 << 4))
        return _tdiv(_wrap64(SCALE_MULTIPLIER * p), 25600) & 0xFFFFFFFF


def bmp280_init(sensor: Sensor) -> None:
    """Put the BMP280 in normal mode with the configured oversampling."""
    control = BMP280_MODE_NORMAL | (BMP280_OSRS_T << 5) | (BMP280_OSRS_P << 2)
    try:
        _device(sensor).register_write(BMP280_REG_CONTROL, control)
    except I2CError:
        logger.error("Failed to initialize BMP280.")
        raise


def bmp280_read_calibration_data(sensor: Sensor) -> Bmp280Calibration:
    """Read the trimming parameters from the BMP280."""
    try:
        data = _device(sensor).register_read(BMP280_DIG_REG_START, _CALIBRATION_LENGTH)
    except I2CError:
        logger.error("Failed to read calibration data.")
        raise
    return Bmp280Calibration.from_bytes(data)


def mpu9250_init(sensor: Sensor) -> None:
    """Set the gyroscope and accelerometer full-scale ranges."""
    device = _device(sensor)
    try:
        contents = device.register_read(MPU9250_GYRO_CONFIG, 2)
    except I2CError:
        logger.error("Failed to initialise the MPU9250 sensor.")
        raise
    for offset, (current, mode) in enumerate(zip(contents, (MPU9250_GYRO_MODE, MPU9250_ACCEL_MODE))):
        value = ((current & ~_FULL_SCALE_MASK) | (mode << 3)) & 0xFF
        device.register_write(MPU9250_GYRO_CONFIG + offset, value)


def _divisor(sensor: Sensor, register: int, table: dict[int, int], what: str) -> int:
    try:
        (contents,) = _device(sensor).register_read(register, 1)
    except I2CError:
        logger.error("Failed to read %s config.", what)
        raise
    try:
        return table[contents]
    except KeyError:
        raise ValueError(f"unexpected {what} config value: 0x{contents:02X}") from None


def mpu9250_accel_divisor(sensor: Sensor) -> int:
    """Raw-count divisor for the accelerometer's configured range."""
    return _divisor(sensor, MPU9250_ACCEL_CONFIG, _ACCEL_DIVISORS, "accelerometer")


def mpu9250_gyro_divisor(sensor: Sensor) -> int:
    """Raw-count divisor for the gyroscope's configured range."""
    return _divisor(sensor, MPU9250_GYRO_CONFIG, _GYRO_DIVISORS, "gyroscope")