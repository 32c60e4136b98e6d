import pytest

from darwinframe.protocol import (
    BulkReadData,
    CM730Address,
    CommError,
    CommResult,
    ErrorFlag,
    Instruction,
    Platform,
    checksum,
    high_byte,
    low_byte,
    make_color,
    make_word,
)

# The "head LED green" packet the driver sends when disconnecting.
DISCONNECT_PACKET = bytes([0xFF, 0xFF, 0xC8, 0x05, 0x03, 0x1A, 0xE0, 0x03, 0x32])


def test_checksum_of_disconnect_packet():
    assert checksum(DISCONNECT_PACKET) == DISCONNECT_PACKET[-1]


def test_checksum_ignores_header_bytes():
    altered = bytes([0x00, 0x12]) + DISCONNECT_PACKET[2:]
    assert checksum(altered) == checksum(DISCONNECT_PACKET)


def test_checksum_detects_changed_payload():
    altered = bytearray(DISCONNECT_PACKET)
    altered[6] ^= 0x01
    assert checksum(altered) != altered[-1]


def test_checksum_rejects_truncated_packet():
    with pytest.raises(ValueError):
        checksum(DISCONNECT_PACKET[:5])


def test_checksum_rejects_packet_without_length():
    with pytest.raises(ValueError):
        checksum(b"\xff\xff\x01")


def test_disconnect_packet_fields_decode():
    assert Instruction(DISCONNECT_PACKET[4]) is Instruction.WRITE
    assert CM730Address(DISCONNECT_PACKET[5]) is CM730Address.P_LED_HEAD_L
    assert make_word(DISCONNECT_PACKET[6], DISCONNECT_PACKET[7]) == make_color(0, 255, 0)


def test_make_color_green_matches_disconnect_packet():
    color = make_color(0, 255, 0)
    assert low_byte(color) == DISCONNECT_PACKET[6]
    assert high_byte(color) == DISCONNECT_PACKET[7]


def test_make_color_masks_inputs():
    assert make_color(0x1FF, 0x100, 0x2FF) == make_color(0xFF, 0x00, 0xFF)


def test_make_word_from_bytes():
    assert make_word(0x34, 0x12) == 0x1234


def test_make_word_truncates_to_sixteen_bits():
    assert make_word(0, 0x1FF) == 0xFF00


@pytest.mark.parametrize("word", [0, 1, 0xFF, 0x100, 0x1234, 0xFFFF])
def test_word_round_trip(word):
    assert make_word(low_byte(word), high_byte(word)) == word


def test_bulk_read_data_defaults():
    data = BulkReadData()
    assert data.error == -1
    assert data.length == 0
    assert all(b == 0 for b in data.table)


def test_bulk_read_data_reads_inside_window():
    data = BulkReadData(start_address=36, length=6)
    data.table[36] = 0x00
    data.table[37] = 0x08
    data.table[40] = 0x7F
    assert data.read_word(36) == 0x0800
    assert data.read_byte(40) == 0x7F


def test_bulk_read_data_outside_window_is_zero():
    data = BulkReadData(start_address=36, length=2)
    data.table[35] = 9
    data.table[38] = 9
    assert data.read_byte(35) == 0
    assert data.read_byte(38) == 0
    assert data.read_word(38) == 0


def test_comm_error_carries_result():
    err = CommError(CommResult.RX_TIMEOUT)
    assert err.result is CommResult.RX_TIMEOUT
    assert "RX_TIMEOUT" in str(err)


def test_comm_error_accepts_plain_int():
    err = CommError(5)
    assert err.result is CommResult.RX_CORRUPT


def test_error_flags_combine():
    flags = ErrorFlag(ErrorFlag.OVERLOAD | ErrorFlag.INPUT_VOLTAGE)
    assert ErrorFlag.OVERLOAD in flags
    assert ErrorFlag.INPUT_VOLTAGE in flags
    assert ErrorFlag.CHECKSUM not in flags


def test_abstract_platform_cannot_be_created():
    with pytest.raises(TypeError):
        Platform()