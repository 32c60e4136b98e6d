"""Wire-level pieces of the sub-controller bus protocol.

Packets have the layout ``FF FF id length instruction params... checksum``.
``length`` counts the instruction (or error byte), the parameters and the
checksum. The checksum is the inverted low byte of the sum of everything
from ``id`` up to the last parameter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum, IntFlag
from typing import Sequence

from darwinframe.registers import MX28Address

MAXNUM_TXPARAM = 256
MAXNUM_RXPARAM = 1024

# Byte offsets inside a packet.
ID = 2
LENGTH = 3
INSTRUCTION = 4
ERRBIT = 4
PARAMETER = 5

DEFAULT_BAUDNUMBER = 1
REFRESH_TIME = 6  # msec

ID_CM = 200
ID_BROADCAST = 254

HEADER = b"\xff\xff"


class CommResult(IntEnum):
    """Outcome of one packet exchange."""

    SUCCESS = 0
    TX_CORRUPT = 1
    TX_FAIL = 2
    RX_FAIL = 3
    RX_TIMEOUT = 4
    RX_CORRUPT = 5


class ErrorFlag(IntFlag):
    """Bits of the error byte in a status packet."""

    NONE = 0
    INPUT_VOLTAGE = 1
    ANGLE_LIMIT = 2
    OVERHEATING = 4
    RANGE = 8
    CHECKSUM = 16
    OVERLOAD = 32
    INSTRUCTION = 64


class CM730Address(IntEnum):
    """Control table addresses of the sub-controller board."""

    P_MODEL_NUMBER_L = 0
    P_MODEL_NUMBER_H = 1
    P_VERSION = 2
    P_ID = 3
    P_BAUD_RATE = 4
    P_RETURN_DELAY_TIME = 5
    P_RETURN_LEVEL = 16
    P_DXL_POWER = 24
    P_LED_PANNEL = 25
    P_LED_HEAD_L = 26
    P_LED_HEAD_H = 27
    P_LED_EYE_L = 28
    P_LED_EYE_H = 29
    P_BUTTON = 30
    P_GYRO_Z_L = 38
    P_GYRO_Z_H = 39
    P_GYRO_Y_L = 40
    P_GYRO_Y_H = 41
    P_GYRO_X_L = 42
    P_GYRO_X_H = 43
    P_ACCEL_X_L = 44
    P_ACCEL_X_H = 45
    P_ACCEL_Y_L = 46
    P_ACCEL_Y_H = 47
    P_ACCEL_Z_L = 48
    P_ACCEL_Z_H = 49
    P_VOLTAGE = 50
    P_LEFT_MIC_L = 51
    P_LEFT_MIC_H = 52
    P_ADC2_L = 53
    P_ADC2_H = 54
    P_ADC3_L = 55
    P_ADC3_H = 56
    P_ADC4_L = 57
    P_ADC4_H = 58
    P_ADC5_L = 59
    P_ADC5_H = 60
    P_ADC6_L = 61
    P_ADC6_H = 62
    P_ADC7_L = 63
    P_ADC7_H = 64
    P_ADC8_L = 65
    P_ADC8_H = 66
    P_RIGHT_MIC_L = 67
    P_RIGHT_MIC_H = 68
    P_ADC10_L = 69
    P_ADC10_H = 70
    P_ADC11_L = 71
    P_ADC11_H = 72
    P_ADC12_L = 73
    P_ADC12_H = 74
    P_ADC13_L = 75
    P_ADC13_H = 76
    P_ADC14_L = 77
    P_ADC14_H = 78
    P_ADC15_L = 79
    P_ADC15_H = 80
    MAXNUM_ADDRESS = 81


class Instruction(IntEnum):
    """Instruction codes of the bus protocol."""

    PING = 1
    READ = 2
    WRITE = 3
    REG_WRITE = 4
    ACTION = 5
    RESET = 6
    SYNC_WRITE = 0x83
    BULK_READ = 0x92


class CommError(Exception):
    """A packet exchange did not succeed."""

    def __init__(self, result: CommResult, message: str | None = None) -> None:
        self.result = CommResult(result)
        super().__init__(message or f"communication failed: {self.result.name}")


def make_word(low: int, high: int) -> int:
    """Combine two bytes into an unsigned 16-bit word."""
    return ((high << 8) + low) & 0xFFFF


def low_byte(word: int) -> int:
    return word & 0xFF


def high_byte(word: int) -> int:
    return (word & 0xFF00) >> 8


def make_color(red: int, green: int, blue: int) -> int:
    """Pack an RGB colour into the board's 15-bit LED format."""
    r = red & 0xFF
    g = green & 0xFF
    b = blue & 0xFF
    return ((b >> 3) << 10) | ((g >> 3) << 5) | (r >> 3)


def checksum(packet: Sequence[int]) -> int:
    """Checksum of a packet whose length byte is already filled in.

    Raises ValueError when the packet is shorter than its length byte claims.
    """
    if len(packet) <= LENGTH:
        raise ValueError("packet has no length byte")
    end = packet[LENGTH] + 3
    if len(packet) < end:
        raise ValueError("packet is shorter than its length byte claims")
    return ~sum(packet[ID:end]) & 0xFF


@dataclass
class BulkReadData:
    """The slice of a device's control table received in the last bulk read."""

    start_address: int = 0
    length: int = 0
    error: int = -1
    table: bytearray = field(
        default_factory=lambda: bytearray(int(MX28Address.MAXNUM_ADDRESS))
    )

    def _covers(self, address: int) -> bool:
        return self.start_address <= address < self.start_address + self.length

    def read_byte(self, address: int) -> int:
        """The byte at ``address``, or 0 when it was not part of the read."""
        return self.table[address] if self._covers(address) else 0

    def read_word(self, address: int) -> int:
        """The little-endian word at ``address``, or 0 when it was not part of the read."""
        if not self._covers(address):
            return 0
        return make_word(self.table[address], self.table[address + 1])


class Platform(ABC):
    """Port, locking and timing services the sub-controller driver relies on."""

    @abstractmethod
    def open_port(self) -> bool:
        """Open the serial port; False on failure."""

    @abstractmethod
    def set_baud(self, baud: int) -> bool:
        """Change the baud rate; False on failure."""

    @abstractmethod
    def close_port(self) -> None:
        ...

    @abstractmethod
    def clear_port(self) -> None:
        """Discard anything waiting in the port buffers."""

    @abstractmethod
    def write_port(self, packet: bytes) -> int:
        """Send ``packet``; return the number of bytes written."""

    @abstractmethod
    def read_port(self, count: int) -> bytes:
        """Read up to ``count`` bytes that are available now."""

    @abstractmethod
    def low_priority_wait(self) -> None:
        ...

    @abstractmethod
    def mid_priority_wait(self) -> None:
        ...

    @abstractmethod
    def high_priority_wait(self) -> None:
        ...

    @abstractmethod
    def low_priority_release(self) -> None:
        ...

    @abstractmethod
    def mid_priority_release(self) -> None:
        ...

    @abstractmethod
    def high_priority_release(self) -> None:
        ...

    @abstractmethod
    def set_packet_timeout(self, packet_length: float) -> None:
        """Start the reply timeout for a packet of ``packet_length`` bytes."""

    @abstractmethod
    def is_packet_timeout(self) -> bool:
        ...

    @abstractmethod
    def packet_time(self) -> float:
        """Milliseconds since the packet timeout was started."""

    @abstractmethod
    def set_update_timeout(self, msec: int) -> None:
        ...

    @abstractmethod
    def is_update_timeout(self) -> bool:
        ...

    @abstractmethod
    def update_time(self) -> float:
        """Milliseconds since the update timeout was started."""

    @abstractmethod
    def sleep(self, msec: float) -> None:
        ...