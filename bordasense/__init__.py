"""Sampling, median filtering and summary of MPU9250 and BMP280 readings over a modelled I2C bus."""

__version__ = "0.1.0"

__all__ = ["i2c", "sensors", "process", "read", "transmit", "pipeline"]