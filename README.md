# bordasense

Sampling, filtering and summarising of readings from an MPU9250 inertial
unit and a BMP280 barometer that share one I2C bus.

Data flows through three stages:

1. **Read**: `bordasense.read.SensorReader` reads the accelerometer,
   gyroscope, pressure and temperature channels. It turns the raw register
   values into scaled integers and returns them as a
   `bordasense.sensors.SensorData` record with eight channels.
2. **Process**: the latest readings are kept in a
   `bordasense.process.RingQueue`. This is a fixed-capacity ring that
   overwrites its oldest slot when it is full. The per-channel median of
   that window (`median_sample`) is pushed into a second, filtered queue.
3. **Report**: `bordasense.transmit.calculate_data` reduces the filtered
   samples to a `Summary`. The summary holds the per-channel minimum,
   maximum, median and standard deviation. `format_report` renders the
   first channel (`ax`) of that summary as text.

`bordasense.pipeline.Pipeline` chains the three stages:

- `read_step` reads one sample. It returns `None` if the read raised
  `I2CError`.
- `process_step` pushes the median of the production queue into the filtered
  queue.
- `report_step` summarises the filtered queue and logs the report once the
  queue holds at least two samples.
- `run(cycles)` initialises the reader if needed and runs that many rounds,
  sleeping `interval` seconds between rounds. It returns the summaries it
  made.

The production queue holds 5 samples and the filtered queue holds 10 by
default. The default interval is 1 second.

## The I2C bus model

`bordasense.i2c.I2CBus` is an in-memory bus. It is built from a mapping of
7-bit addresses to register contents, at most 256 bytes per target.

- A write sets the register pointer with its first byte. Any further bytes
  are stored at consecutive registers, wrapping at 256.
- `transmit(address, data)` writes.
- `transmit_receive(address, data, length)` writes and then reads `length`
  bytes from the pointer.
- Addressing a target that is not on the bus raises `I2CError`.

`attach_device(bus, address)` checks that the address fits in 7 bits and
returns an `I2CDevice`. The device offers `register_read(reg_addr, length)`
and `register_write(reg_addr, value)`.

```python
from bordasense.i2c import I2CBus
from bordasense.read import SensorReader
from bordasense.pipeline import Pipeline

bus = I2CBus({0x68: bytes(256), 0x77: bytes(256)})
pipeline = Pipeline(SensorReader(bus), interval=0)
summaries = pipeline.run(3)
```

## Pure computations

The numeric parts work without any bus:

```python
from bordasense.sensors import Bmp280Calibration, SensorData
from bordasense.process import sort_streams, median_sample
from bordasense.transmit import isqrt, calculate_data

calibration = Bmp280Calibration.from_bytes(calibration_bytes)  # 24 bytes read from register 0x88
temperature = calibration.compensate_temperature(adc_t)        # hundredths of a degree C
pressure = calibration.compensate_pressure(adc_p)              # hundredths of a hPa

samples = [SensorData.from_values(values) for values in readings]  # eight channels each
middle = median_sample(samples)
summary = calculate_data(samples)  # needs at least two samples

isqrt(17)  # 4
```

Some behaviour to be aware of:

- `compensate_pressure` uses the fine temperature (`t_fine`) that the last
  `compensate_temperature` call recorded. It returns 0 when the calibration
  makes the result undefined.
- `SensorReader.read_sample` compensates pressure before temperature, so
  each pressure uses the previous sample's `t_fine`.
- `SensorData` wraps every channel to a signed 32-bit value.
- `sort_streams` sorts each channel on its own.

## Sensor setup

- `bmp280_init` puts the barometer into normal mode with ×1 temperature and
  pressure oversampling.
- `mpu9250_init` sets the gyroscope and accelerometer full-scale ranges.
- `bmp280_read_calibration_data` returns the trimming parameters as a
  `Bmp280Calibration`.
- `mpu9250_accel_divisor` and `mpu9250_gyro_divisor` return the sensitivity
  divisors for the configured range. They raise `ValueError` on an
  unexpected configuration value.

## What this package does not do

- It has no driver for physical I2C hardware. `I2CBus` only models register
  banks in memory.
- Reports go only to the `logging` module. Nothing is sent over a radio link
  or a network.
- There is no command-line program.

## Tests

The tests use pytest, installed with the `test` extra.