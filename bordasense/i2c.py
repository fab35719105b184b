"""Register-level I2C access over an in-memory bus model."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass

logger = logging.getLogger(__name__)

SCL_IO = 22
SDA_IO = 21
BUS_FREQ_HZ = 100_000
TIMEOUT_MS = 1000
REGISTER_SPACE = 256


class I2CError(Exception):
    """A bus transfer or device setup failed."""


def _check_address(address: int) -> None:
    if not 0 <= address <= 0x7F:
        raise I2CError(f"address 0x{address:02X} is not a 7-bit I2C address")


class I2CBus:
    """An I2C master bus whose targets are 256-byte register banks.

    A write sets the register pointer with its first byte; any further bytes
    are stored at consecutive registers. Reads continue from the pointer.
    """

    def __init__(
        self,
        targets: Mapping[int, bytes] | None = None,
        *,
        scl_io: int = SCL_IO,
        sda_io: int = SDA_IO,
        frequency_hz: int = BUS_FREQ_HZ,
        timeout_ms: int = TIMEOUT_MS,
    ) -> None:
        self.scl_io = scl_io
        self.sda_io = sda_io
        self.frequency_hz = frequency_hz
        self.timeout_ms = timeout_ms
        self.targets: dict[int, bytearray] = {}
        for address, registers in (targets or {}).items():
            _check_address(address)
            initial = bytes(registers)
            if len(initial) > REGISTER_SPACE:
                raise ValueError("a target holds at most 256 registers")
            bank = bytearray(REGISTER_SPACE)
            bank[: len(initial)] = initial
            self.targets[address] = bank
        self._lock = threading.Lock()

    def _bank(self, address: int) -> bytearray:
        try:
            return self.targets[address]
        except KeyError:
            raise I2CError(f"no device acknowledged at address 0x{address:02X}") from None

    @staticmethod
    def _write(bank: bytearray, payload: bytes) -> int:
        pointer = payload[0]
        for offset, value in enumerate(payload[1:]):
            bank[(pointer + offset) % REGISTER_SPACE] = value
        return (pointer + len(payload) - 1) % REGISTER_SPACE

    def transmit(self, address: int, data: Iterable[int]) -> None:
        """Write ``data`` to the target at ``address``."""
        payload = bytes(data)
        if not payload:
            raise I2CError("a write needs at least the register byte")
        with self._lock:
            self._write(self._bank(address), payload)

    def transmit_receive(self, address: int, data: Iterable[int], length: int) -> bytes:
        """Write ``data``, then read ``length`` bytes from the target."""
        payload = bytes(data)
        if not payload:
            raise I2CError("a write needs at least the register byte")
        if length < 0:
            raise ValueError("length must not be negative")
        with self._lock:
            bank = self._bank(address)
            pointer = self._write(bank, payload)
            return bytes(bank[(pointer + i) % REGISTER_SPACE] for i in range(length))


@dataclass
class I2CDevice:
    """A target device on a bus, addressed by register."""

    bus: I2CBus
    address: int

    def register_read(self, reg_addr: int, length: int) -> bytes:
        """Read ``length`` bytes starting at ``reg_addr``."""
        return self.bus.transmit_receive(self.address, bytes([reg_addr]), length)

    def register_write(self, reg_addr: int, value: int) -> None:
        """Write one byte to ``reg_addr``."""
        self.bus.transmit(self.address, bytes([reg_addr, value]))


def attach_device(bus: I2CBus, address: int) -> I2CDevice:
    """Add a 7-bit addressed device to ``bus``."""
    try:
        _check_address(address)
    except I2CError:
        logger.error("Failed to create I2C device at address 0x%02X.", address)
        raise
    logger.info("Initialized sensor at address 0x%02X", address)
    return I2CDevice(bus, address)