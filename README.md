# darwinframe

Building blocks for a small humanoid robot made of MX-28 servos behind a
CM-730 sub-controller board. Pure Python, no dependencies beyond the
standard library.

## Modules

- `darwinframe.geometry`: `Point2D`, `Point3D` and `Vector3D` dataclasses
  with component-wise `+`/`-` (with another value of the same type or a
  number) and `*`/`/` by a number; `distance`, `length`, `normalize`, `dot`,
  `cross`, `angle_between` (degrees, signed when an `axis` is given);
  `Matrix3D`, a 4×4 row-major transform with `identity`, `copy`, `inverse`
  (raises `ValueError` when singular), `scale`, `rotate`, `translate`,
  `transform` and `set_transform`; and an empty `Plane3D`.
  Note that `Matrix3D.__mul__` accumulates the product onto an identity
  matrix, so `a * b` yields `a·b + I`; `scale`, `rotate`, `translate` and
  `*=` all go through it.
- `darwinframe.ini`: functions over an INI file path: `get_string`,
  `get_int`, `get_float`, `get_section`, `get_key`, `put_string`, `put_int`,
  `put_float`. Section and key names match regardless of ASCII case, `=` or
  `:` separate keys from values, `;` and `#` start comments. Writes go
  through a temporary file named like the target with its last character
  replaced by `~`. `put_string` with a `value` of `None` removes the key;
  with a `key` of `None` it removes the whole section.
- `darwinframe.inifile`: `IniFile`, the same operations bound to one path,
  with `get_float`, `get_int`, `get_string`, `get_section`, `get_key`, a
  single `put` for `str`, `int` and `float` values, and `delete`.
- `darwinframe.registers`: `MX28Address`, `FSRAddress`, `JointId`,
  `FallState`, servo range constants, and `angle_to_value`,
  `value_to_angle`, `mirror_value`, `mirror_angle`.
- `darwinframe.protocol`: `CommResult`, `ErrorFlag`, `CM730Address`,
  `Instruction`, the `CommError` exception, `BulkReadData`, the abstract
  `Platform`, and the helpers `checksum`, `make_word`, `low_byte`,
  `high_byte`, `make_color`.
- `darwinframe.cm730`: `CM730`, a client for the board: `connect`,
  `change_baud`, `disconnect`, `dxl_power_on`, `mx28_init_all`, `ping`,
  `read_byte`, `read_word`, `read_table`, `write_byte`, `write_word`,
  `write_board_byte`, `write_board_word`, `write_table`, `sync_write`,
  `make_bulk_read_packet`, `make_bulk_read_packet_wb` and `bulk_read`.
  Failed exchanges raise `CommError`; the error byte of the last status
  packet is kept in `last_error`. It can be used as a context manager that
  disconnects on exit.
- `darwinframe.motion_timer`: `MotionTimer`, which calls
  `manager.process()` every `interval` seconds (default 0.008) on a
  background thread; `start`, `stop`, `is_running`, and use as a context
  manager.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Examples

Geometry:

```python
from darwinframe.geometry import Point3D, Vector3D

a = Point3D(0.0, 0.0, 0.0)
b = Point3D(3.0, 4.0, 0.0)
print(a.distance(b))                      # 5.0
v = Vector3D.from_points(a, b)
print(v.angle_between(Vector3D(1.0, 0.0, 0.0)))
```

Settings:

```python
from darwinframe.inifile import IniFile

settings = IniFile("config.ini")
settings.put("Walking Config", "period_time", 600.0)   # stored as 600.000000
period = settings.get_float("Walking Config", "period_time", 0.0)
settings.delete("Walking Config", "period_time")
```

Talking to the board needs a subclass of `darwinframe.protocol.Platform`
that implements the port, locking and timing methods for your transport:

```python
from darwinframe.cm730 import CM730
from darwinframe.protocol import CM730Address, CommError
from darwinframe.registers import JointId, MX28Address

with CM730(my_platform) as board:
    board.connect({JointId.HEAD_PAN: (-90.0, 90.0)})
    try:
        position = board.read_word(JointId.HEAD_PAN, MX28Address.P_PRESENT_POSITION_L)
    except CommError as error:
        print(error.result.name)

    board.make_bulk_read_packet_wb()
    board.bulk_read()
    present = board.bulk_read_data[JointId.R_KNEE].read_word(MX28Address.P_PRESENT_POSITION_L)
```

Driving a periodic update:

```python
from darwinframe.motion_timer import MotionTimer

with MotionTimer(manager, interval=0.008):
    ...  # manager.process() runs every 8 ms here
```

Packet traffic and failures are reported through the `logging` module.

## What this package does not do

- It has no serial-port transport: `Platform` is abstract and you supply
  the implementation.
- It has no motion manager, walking gait, action playback, head control or
  camera/vision processing; `MotionTimer` only calls whatever object with a
  `process()` method you give it.
- It provides no command-line program.