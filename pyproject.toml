[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "bordasense"
version = "0.1.0"
description = "MPU9250 and BMP280 sampling over a modelled I2C bus, with median filtering and summary statistics"
requires-python = ">=3.10"
dependencies = []
keywords = ["i2c", "bmp280", "mpu9250", "sensor", "imu", "barometer", "median-filter"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["bordasense"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
