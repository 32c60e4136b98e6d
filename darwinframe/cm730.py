"""Driver for the sub-controller board that relays packets to the servos."""

from __future__ import annotations

import logging
from typing import Iterable, Mapping, MutableSequence, Optional, Sequence

from darwinframe.protocol import (
    ERRBIT,
    HEADER,
    ID,
    ID_BROADCAST,
    ID_CM,
    INSTRUCTION,
    LENGTH,
    MAXNUM_TXPARAM,
    PARAMETER,
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
from darwinframe.registers import (
    ID_L_FSR,
    ID_R_FSR,
    NUMBER_OF_JOINTS,
    FSRAddress,
    JointId,
    MX28Address,
    angle_to_value,
)

log = logging.getLogger(__name__)

# Turns the head LED green and is sent as-is when disconnecting.
_DISCONNECT_PACKET = bytes((0xFF, 0xFF, 0xC8, 0x05, 0x03, 0x1A, 0xE0, 0x03, 0x32))


def _at(buffer: Sequence[int], index: int) -> int:
    """Byte at ``index``, or 0 past the end of what was received."""
    return buffer[index] if 0 <= index < len(buffer) else 0


def _header_offset(buffer: Sequence[int]) -> int:
    """Position of the first packet header candidate in ``buffer``."""
    last = len(buffer) - 1
    for i in range(last):
        if buffer[i] == 0xFF and buffer[i + 1] == 0xFF:
            return i
        if i == last - 1 and buffer[last] == 0xFF:
            return i
    return max(last, 0)


def _complete(packet: Sequence[int]) -> bool:
    return len(packet) > LENGTH and len(packet) >= LENGTH + 1 + packet[LENGTH]


def _build_packet(dxl_id: int, instruction: int, params: Iterable[int]) -> bytearray:
    data = bytes(value & 0xFF for value in params)
    if len(data) + 2 > 0xFF or len(data) + 6 >= MAXNUM_TXPARAM + 6:
        raise CommError(CommResult.TX_CORRUPT, "packet has too many parameters")
    packet = bytearray(HEADER)
    packet += bytes((dxl_id & 0xFF, len(data) + 2, int(instruction) & 0xFF))
    packet += data
    packet.append(0)
    return packet


class CM730:
    """Talks to the sub-controller and, through it, to every device on the bus.

    Operations raise :class:`CommError` when an exchange fails. The error byte
    of the last status packet is kept in ``last_error``.
    """

    def __init__(self, platform: Platform) -> None:
        self.platform = platform
        self.last_error = ErrorFlag.NONE
        self.bulk_read_data = [BulkReadData() for _ in range(ID_BROADCAST)]
        self._bulk_packet: Optional[bytearray] = None

    def __enter__(self) -> CM730:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.disconnect()

    # -- packet exchange -------------------------------------------------

    def _txrx(self, tx: bytearray, priority: int) -> tuple[CommResult, bytearray]:
        platform = self.platform
        if priority > 1:
            platform.low_priority_wait()
        if priority > 0:
            platform.mid_priority_wait()
        platform.high_priority_wait()
        try:
            result, rx = self._exchange(tx)
            log.debug("RETURN: %s (%.2fms)", result.name, platform.packet_time())
        finally:
            platform.high_priority_release()
            if priority > 0:
                platform.mid_priority_release()
            if priority > 1:
                platform.low_priority_release()
        return result, rx

    def _exchange(self, tx: bytearray) -> tuple[CommResult, bytearray]:
        platform = self.platform
        length = tx[LENGTH] + 4
        tx[0] = tx[1] = 0xFF
        tx[length - 1] = checksum(tx)
        log.debug("TX: %s", bytes(tx[:length]).hex(" "))

        if length >= MAXNUM_TXPARAM + 6:
            return CommResult.TX_CORRUPT, bytearray()

        platform.clear_port()
        if platform.write_port(bytes(tx[:length])) != length:
            return CommResult.TX_FAIL, bytearray()

        if tx[ID] != ID_BROADCAST:
            return self._receive_status(tx, length)
        if tx[INSTRUCTION] == Instruction.BULK_READ:
            return self._receive_bulk(tx)
        return CommResult.SUCCESS, bytearray()

    def _receive_status(self, tx: bytearray, length: int) -> tuple[CommResult, bytearray]:
        platform = self.platform
        if tx[INSTRUCTION] == Instruction.READ:
            to_length = tx[PARAMETER + 1] + 6
        else:
            to_length = 6
        platform.set_packet_timeout(length)

        rx = bytearray()
        while True:
            rx += platform.read_port(to_length - len(rx))[: to_length - len(rx)]
            if len(rx) == to_length:
                offset = _header_offset(rx)
                if offset == 0:
                    if _complete(rx) and rx[to_length - 1] == checksum(rx):
                        result = CommResult.SUCCESS
                    else:
                        result = CommResult.RX_CORRUPT
                    break
                del rx[:offset]
            elif platform.is_packet_timeout():
                result = CommResult.RX_CORRUPT if rx else CommResult.RX_TIMEOUT
                break
        log.debug("RX: %s", bytes(rx).hex(" "))
        return result, rx

    def _receive_bulk(self, tx: bytearray) -> tuple[CommResult, bytearray]:
        platform = self.platform
        num = (tx[LENGTH] - 3) // 3
        requested = [
            (tx[PARAMETER + 3 * x + 2], tx[PARAMETER + 3 * x + 1], tx[PARAMETER + 3 * x + 3])
            for x in range(num)
        ]
        to_length = 0
        for dev_id, count, address in requested:
            to_length += count + 6
            if dev_id < len(self.bulk_read_data):
                self.bulk_read_data[dev_id].length = count
                self.bulk_read_data[dev_id].start_address = address

        platform.set_packet_timeout(to_length * 1.5)

        rx = bytearray()
        while True:
            rx += platform.read_port(to_length - len(rx))[: to_length - len(rx)]
            if len(rx) == to_length:
                result = CommResult.SUCCESS
                break
            if platform.is_packet_timeout():
                result = CommResult.RX_CORRUPT if rx else CommResult.RX_TIMEOUT
                break
        log.debug("RX: %s", bytes(rx).hex(" "))

        for dev_id, _, _ in requested:
            if dev_id < len(self.bulk_read_data):
                self.bulk_read_data[dev_id].error = -1

        while True:
            offset = _header_offset(rx)
            if offset != 0:
                del rx[:offset]
                continue
            if _complete(rx) and rx[LENGTH + rx[LENGTH]] == checksum(rx):
                self._store_bulk_reply(rx)
                del rx[: LENGTH + 1 + rx[LENGTH]]
                num -= 1
            else:
                result = CommResult.RX_CORRUPT
                del rx[:2]
            if num == 0:
                break
            if len(rx) <= 6:
                result = CommResult.RX_CORRUPT
                break
        return result, rx

    def _store_bulk_reply(self, rx: bytearray) -> None:
        dev_id = rx[ID]
        if dev_id >= len(self.bulk_read_data):
            return
        data = self.bulk_read_data[dev_id]
        for j in range(rx[LENGTH] - 2):
            address = data.start_address + j
            if address < len(data.table):
                data.table[address] = rx[PARAMETER + j]
        data.error = rx[ERRBIT]

    def _request(
        self, dxl_id: int, instruction: Instruction, params: Iterable[int], priority: int
    ) -> bytearray:
        result, rx = self._txrx(_build_packet(dxl_id, instruction, params), priority)
        if result != CommResult.SUCCESS:
            raise CommError(result)
        if dxl_id & 0xFF == ID_BROADCAST:
            self.last_error = ErrorFlag.NONE
        else:
            self.last_error = ErrorFlag(_at(rx, ERRBIT))
        return rx

    # -- connection ------------------------------------------------------

    def connect(self, joint_limits: Optional[Mapping[int, tuple[float, float]]] = None) -> bool:
        """Open the port, power the servos and set their angle limits.

        ``joint_limits`` maps joint ids to (clockwise, counter-clockwise)
        limits in degrees.
        """
        if not self.platform.open_port():
            log.error(
                "Fail to open port: the board is used by another program "
                "or root privileges are missing"
            )
            return False
        return self.dxl_power_on() and self.mx28_init_all(joint_limits)

    def change_baud(self, baud: int) -> bool:
        if not self.platform.set_baud(baud):
            log.error("Fail to change baudrate")
            return False
        return self.dxl_power_on()

    def disconnect(self) -> None:
        """Turn the head LED green and close the port."""
        self.platform.write_port(_DISCONNECT_PACKET)
        self.platform.close_port()

    def dxl_power_on(self) -> bool:
        """Switch on the servo power; False when the board does not answer."""
        try:
            self.write_byte(ID_CM, CM730Address.P_DXL_POWER, 1)
        except CommError:
            log.debug("Fail to change Dynamixel power")
            return False
        log.debug("Succeed to change Dynamixel power")
        try:
            self.write_word(ID_CM, CM730Address.P_LED_HEAD_L, make_color(255, 128, 0))
        except CommError:
            pass
        self.platform.sleep(300)
        return True

    def mx28_init_all(
        self, joint_limits: Optional[Mapping[int, tuple[float, float]]] = None
    ) -> bool:
        """Write the clockwise and counter-clockwise angle limits of each joint."""
        for joint, (cw_limit, ccw_limit) in (joint_limits or {}).items():
            name = JointId(joint).name if joint in JointId._value2member_map_ else str(joint)
            for address, angle, label in (
                (MX28Address.P_CW_ANGLE_LIMIT_L, cw_limit, "CW"),
                (MX28Address.P_CCW_ANGLE_LIMIT_L, ccw_limit, "CCW"),
            ):
                try:
                    self.write_word(joint, address, angle_to_value(angle))
                except CommError:
                    log.error("Fail to change %s limit of %s", label, name)
        return True

    # -- device access ---------------------------------------------------

    def ping(self, dxl_id: int) -> ErrorFlag:
        """Check that a device answers; returns its error byte."""
        self._request(dxl_id, Instruction.PING, (), 2)
        return self.last_error

    def read_byte(self, dxl_id: int, address: int) -> int:
        rx = self._request(dxl_id, Instruction.READ, (address, 1), 2)
        return _at(rx, PARAMETER)

    def read_word(self, dxl_id: int, address: int) -> int:
        rx = self._request(dxl_id, Instruction.READ, (address, 2), 2)
        return make_word(_at(rx, PARAMETER), _at(rx, PARAMETER + 1))

    def read_table(
        self,
        dxl_id: int,
        start_addr: int,
        end_addr: int,
        table: Optional[MutableSequence[int]] = None,
    ) -> MutableSequence[int]:
        """Read addresses ``start_addr``..``end_addr`` into ``table`` at the same offsets.

        A new table is made when none is given; the filled table is returned.
        """
        length = end_addr - start_addr + 1
        if length <= 0:
            raise ValueError("end address lies before start address")
        rx = self._request(dxl_id, Instruction.READ, (start_addr, length), 1)
        if table is None:
            table = bytearray(end_addr + 1)
        for i in range(length):
            table[start_addr + i] = _at(rx, PARAMETER + i)
        return table

    def write_byte(self, dxl_id: int, address: int, value: int) -> ErrorFlag:
        self._request(dxl_id, Instruction.WRITE, (address, value), 2)
        return self.last_error

    def write_word(self, dxl_id: int, address: int, value: int) -> ErrorFlag:
        self._request(
            dxl_id, Instruction.WRITE, (address, low_byte(value), high_byte(value)), 2
        )
        return self.last_error

    def write_board_byte(self, address: int, value: int) -> ErrorFlag:
        return self.write_byte(ID_CM, address, value)

    def write_board_word(self, address: int, value: int) -> ErrorFlag:
        return self.write_word(ID_CM, address, value)

    def write_table(
        self, dxl_id: int, start_addr: int, end_addr: int, table: Sequence[int]
    ) -> ErrorFlag:
        """Write ``table[start_addr:end_addr + 1]`` to the same addresses."""
        if end_addr < start_addr:
            raise ValueError("end address lies before start address")
        params = [start_addr, *table[start_addr : end_addr + 1]]
        self._request(dxl_id, Instruction.WRITE, params, 2)
        return self.last_error

    def sync_write(
        self, start_addr: int, each_length: int, number: int, params: Sequence[int]
    ) -> None:
        """Write to many devices at once.

        ``params`` holds ``number`` records of ``each_length`` values, each an id
        followed by the data for ``start_addr`` onwards.
        """
        count = number * each_length
        if len(params) < count:
            raise ValueError("fewer parameters than the records need")
        data = [start_addr, each_length - 1, *params[:count]]
        self._request(ID_BROADCAST, Instruction.SYNC_WRITE, data, 0)

    # -- bulk read -------------------------------------------------------

    def _responds(self, dxl_id: int) -> bool:
        try:
            self.ping(dxl_id)
        except CommError:
            return False
        return True

    def _set_bulk_packet(self, entries: list[tuple[int, int, int]]) -> None:
        params = [0]
        for entry in entries:
            params.extend(entry)
        self._bulk_packet = _build_packet(ID_BROADCAST, Instruction.BULK_READ, params)

    def make_bulk_read_packet(self) -> None:
        """Prepare a bulk read of the board and the foot sensors that answer."""
        entries = []
        if self._responds(ID_CM):
            entries.append((30, ID_CM, int(CM730Address.P_DXL_POWER)))
        if self._responds(ID_L_FSR):
            entries.append((10, ID_L_FSR, int(FSRAddress.P_FSR1_L)))
        if self._responds(ID_R_FSR):
            entries.append((10, ID_R_FSR, int(FSRAddress.P_FSR1_L)))
        self._set_bulk_packet(entries)

    def make_bulk_read_packet_wb(self) -> None:
        """Prepare a bulk read of the board and the present state of every joint."""
        entries = []
        if self._responds(ID_CM):
            entries.append((30, ID_CM, int(CM730Address.P_DXL_POWER)))
        for joint in range(1, NUMBER_OF_JOINTS):
            entries.append((6, joint, int(MX28Address.P_PRESENT_POSITION_L)))
        self._set_bulk_packet(entries)

    def bulk_read(self) -> None:
        """Run the prepared bulk read, filling ``bulk_read_data``.

        Without a prepared packet one is built and CommError(TX_FAIL) raised.
        """
        if self._bulk_packet is None:
            self.make_bulk_read_packet()
            raise CommError(CommResult.TX_FAIL, "bulk read packet was not prepared")
        result, _ = self._txrx(bytearray(self._bulk_packet), 0)
        if result != CommResult.SUCCESS:
            raise CommError(result)