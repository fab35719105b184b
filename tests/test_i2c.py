import pytest

from bordasense.i2c import I2CBus, I2CDevice, I2CError, attach_device


def test_write_then_read_round_trip():
    bus = I2CBus({0x68: b""})
    device = attach_device(bus, 0x68)
    device.register_write(0x1B, 0xAB)
    assert device.register_read(0x1B, 1) == b"\xab"


def test_initial_registers_are_readable():
    bus = I2CBus({0x77: bytes(range(16))})
    device = attach_device(bus, 0x77)
    assert device.register_read(4, 3) == bytes([4, 5, 6])


def test_multi_byte_write_auto_increments():
    bus = I2CBus({0x10: b""})
    bus.transmit(0x10, [0x20, 1, 2, 3])
    assert bus.transmit_receive(0x10, [0x20], 3) == bytes([1, 2, 3])


def test_register_pointer_wraps_at_end_of_space():
    bus = I2CBus({0x10: b""})
    bus.transmit(0x10, [0xFF, 7, 9])
    assert bus.targets[0x10][0xFF] == 7
    assert bus.targets[0x10][0x00] == 9


def test_missing_target_raises():
    bus = I2CBus({0x68: b""})
    device = I2CDevice(bus, 0x50)
    with pytest.raises(I2CError):
        device.register_read(0, 1)
    with pytest.raises(I2CError):
        device.register_write(0, 1)


def test_attach_rejects_non_seven_bit_address():
    with pytest.raises(I2CError):
        attach_device(I2CBus(), 0x80)


def test_attach_returns_device_with_address():
    bus = I2CBus({0x77: b""})
    device = attach_device(bus, 0x77)
    assert device.address == 0x77
    assert device.bus is bus


def test_empty_write_raises():
    bus = I2CBus({0x10: b""})
    with pytest.raises(I2CError):
        bus.transmit(0x10, [])


def test_out_of_range_byte_value_raises():
    device = attach_device(I2CBus({0x10: b""}), 0x10)
    with pytest.raises(ValueError):
        device.register_write(0x01, 256)


def test_negative_length_raises():
    bus = I2CBus({0x10: b""})
    with pytest.raises(ValueError):
        bus.transmit_receive(0x10, [0], -1)


def test_oversized_initial_bank_rejected():
    with pytest.raises(ValueError):
        I2CBus({0x10: bytes(300)})