"""Points, vectors and 4x4 homogeneous matrices for 3D geometry."""

from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Callable, Iterable, TypeVar, Union

# Degree/radian conversions throughout this module use this value of pi.
_PI = 3.141592

_T = TypeVar("_T", "Point2D", "Point3D", "Vector3D")


def _elementwise(a: _T, b: object, op: Callable[[float, float], float]) -> _T:
    """Apply ``op`` component-wise with another instance of the same type or a scalar."""
    cls = type(a)
    names = a._fields()
    if isinstance(b, cls):
        return cls(*(op(getattr(a, n), getattr(b, n)) for n in names))
    if isinstance(b, Real):
        return cls(*(op(getattr(a, n), float(b)) for n in names))
    return NotImplemented


def _scaled(a: _T, value: object, op: Callable[[float, float], float]) -> _T:
    if not isinstance(value, Real):
        return NotImplemented
    return type(a)(*(op(getattr(a, n), float(value)) for n in a._fields()))


@dataclass
class Point2D:
    """A point in the plane."""

    x: float = 0.0
    y: float = 0.0

    @staticmethod
    def _fields() -> tuple[str, ...]:
        return ("x", "y")

    def distance(self, other: Point2D) -> float:
        """Euclidean distance to ``other``."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def __add__(self, other: Union[Point2D, float]) -> Point2D:
        return _elementwise(self, other, lambda a, b: a + b)

    def __sub__(self, other: Union[Point2D, float]) -> Point2D:
        return _elementwise(self, other, lambda a, b: a - b)

    def __mul__(self, value: float) -> Point2D:
        return _scaled(self, value, lambda a, b: a * b)

    def __truediv__(self, value: float) -> Point2D:
        return _scaled(self, value, lambda a, b: a / b)


@dataclass
class Point3D:
    """A point in space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @staticmethod
    def _fields() -> tuple[str, ...]:
        return ("x", "y", "z")

    def distance(self, other: Point3D) -> float:
        """Euclidean distance to ``other``."""
        dx = self.x - other.x
        dy = self.y - other.y
        dz = self.z - other.z
        return math.sqrt(dx * dx + dy * dy + dz * dz)

    def __add__(self, other: Union[Point3D, float]) -> Point3D:
        return _elementwise(self, other, lambda a, b: a + b)

    def __sub__(self, other: Union[Point3D, float]) -> Point3D:
        return _elementwise(self, other, lambda a, b: a - b)

    def __mul__(self, value: float) -> Point3D:
        return _scaled(self, value, lambda a, b: a * b)

    def __truediv__(self, value: float) -> Point3D:
        return _scaled(self, value, lambda a, b: a / b)


@dataclass
class Vector3D:
    """A direction and magnitude in space."""

    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @staticmethod
    def _fields() -> tuple[str, ...]:
        return ("x", "y", "z")

    @classmethod
    def from_points(cls, start: Point3D, end: Point3D) -> Vector3D:
        """The vector leading from ``start`` to ``end``."""
        return cls(end.x - start.x, end.y - start.y, end.z - start.z)

    def length(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def normalize(self) -> None:
        """Scale this vector in place to unit length.

        Raises ZeroDivisionError for the zero vector.
        """
        length = self.length()
        self.x /= length
        self.y /= length
        self.z /= length

    def dot(self, other: Vector3D) -> float:
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3D) -> Vector3D:
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def angle_between(self, other: Vector3D, axis: Vector3D | None = None) -> float:
        """Angle to ``other`` in degrees.

        With ``axis`` given, the angle is negative when the rotation from this
        vector to ``other`` points against ``axis``.
        """
        cosine = self.dot(other) / (self.length() * other.length())
        cosine = max(-1.0, min(1.0, cosine))
        angle = math.acos(cosine) * (180.0 / _PI)
        if axis is not None and self.cross(other).dot(axis) < 0.0:
            angle *= -1.0
        return angle

    def __add__(self, other: Union[Vector3D, float]) -> Vector3D:
        return _elementwise(self, other, lambda a, b: a + b)

    def __sub__(self, other: Union[Vector3D, float]) -> Vector3D:
        return _elementwise(self, other, lambda a, b: a - b)

    def __mul__(self, value: float) -> Vector3D:
        return _scaled(self, value, lambda a, b: a * b)

    def __truediv__(self, value: float) -> Vector3D:
        return _scaled(self, value, lambda a, b: a / b)


_IDENTITY = (
    1.0, 0.0, 0.0, 0.0,
    0.0, 1.0, 0.0, 0.0,
    0.0, 0.0, 1.0, 0.0,
    0.0, 0.0, 0.0, 1.0,
)


class Matrix3D:
    """A 4x4 homogeneous transform stored row-major in ``m``."""

    def __init__(self, elements: Iterable[float] | None = None) -> None:
        if elements is None:
            self.m = list(_IDENTITY)
        else:
            values = [float(v) for v in elements]
            if len(values) != 16:
                raise ValueError("a Matrix3D needs exactly 16 elements")
            self.m = values

    def __repr__(self) -> str:
        return f"Matrix3D({self.m!r})"

    def __getitem__(self, index: tuple[int, int]) -> float:
        row, col = index
        return self.m[row * 4 + col]

    def __setitem__(self, index: tuple[int, int], value: float) -> None:
        row, col = index
        self.m[row * 4 + col] = float(value)

    def identity(self) -> None:
        """Reset this matrix to the identity."""
        self.m = list(_IDENTITY)

    def copy(self) -> Matrix3D:
        return Matrix3D(self.m)

    def inverse(self) -> None:
        """Invert this matrix in place.

        Raises ValueError, leaving the matrix unchanged, when it is singular.
        """
        m = self.m
        s = [m[r * 4 + c] for c in range(4) for r in range(4)]

        t = [
            s[10] * s[15], s[11] * s[14], s[9] * s[15], s[11] * s[13],
            s[9] * s[14], s[10] * s[13], s[8] * s[15], s[11] * s[12],
            s[8] * s[14], s[10] * s[12], s[8] * s[13], s[9] * s[12],
        ]
        d = [0.0] * 16
        d[0] = (t[0] * s[5] + t[3] * s[6] + t[4] * s[7]) - (t[1] * s[5] + t[2] * s[6] + t[5] * s[7])
        d[1] = (t[1] * s[4] + t[6] * s[6] + t[9] * s[7]) - (t[0] * s[4] + t[7] * s[6] + t[8] * s[7])
        d[2] = (t[2] * s[4] + t[7] * s[5] + t[10] * s[7]) - (t[3] * s[4] + t[6] * s[5] + t[11] * s[7])
        d[3] = (t[5] * s[4] + t[8] * s[5] + t[11] * s[6]) - (t[4] * s[4] + t[9] * s[5] + t[10] * s[6])
        d[4] = (t[1] * s[1] + t[2] * s[2] + t[5] * s[3]) - (t[0] * s[1] + t[3] * s[2] + t[4] * s[3])
        d[5] = (t[0] * s[0] + t[7] * s[2] + t[8] * s[3]) - (t[1] * s[0] + t[6] * s[2] + t[9] * s[3])
        d[6] = (t[3] * s[0] + t[6] * s[1] + t[11] * s[3]) - (t[2] * s[0] + t[7] * s[1] + t[10] * s[3])
        d[7] = (t[4] * s[0] + t[9] * s[1] + t[10] * s[2]) - (t[5] * s[0] + t[8] * s[1] + t[11] * s[2])

        t = [
            s[2] * s[7], s[3] * s[6], s[1] * s[7], s[3] * s[5],
            s[1] * s[6], s[2] * s[5], s[0] * s[7], s[3] * s[4],
            s[0] * s[6], s[2] * s[4], s[0] * s[5], s[1] * s[4],
        ]
        d[8] = (t[0] * s[13] + t[3] * s[14] + t[4] * s[15]) - (t[1] * s[13] + t[2] * s[14] + t[5] * s[15])
        d[9] = (t[1] * s[12] + t[6] * s[14] + t[9] * s[15]) - (t[0] * s[12] + t[7] * s[14] + t[8] * s[15])
        d[10] = (t[2] * s[12] + t[7] * s[13] + t[10] * s[15]) - (t[3] * s[12] + t[6] * s[13] + t[11] * s[15])
        d[11] = (t[5] * s[12] + t[8] * s[13] + t[11] * s[14]) - (t[4] * s[12] + t[9] * s[13] + t[10] * s[14])
        d[12] = (t[2] * s[10] + t[5] * s[11] + t[1] * s[9]) - (t[4] * s[11] + t[0] * s[9] + t[3] * s[10])
        d[13] = (t[8] * s[11] + t[0] * s[8] + t[7] * s[10]) - (t[6] * s[10] + t[9] * s[11] + t[1] * s[8])
        d[14] = (t[6] * s[9] + t[11] * s[11] + t[3] * s[8]) - (t[10] * s[11] + t[2] * s[8] + t[7] * s[9])
        d[15] = (t[10] * s[10] + t[4] * s[8] + t[9] * s[9]) - (t[8] * s[9] + t[11] * s[10] + t[5] * s[8])

        det = s[0] * d[0] + s[1] * d[1] + s[2] * d[2] + s[3] * d[3]
        if det == 0:
            raise ValueError("matrix is singular")
        inv_det = 1 / det
        self.m = [value * inv_det for value in d]

    def scale(self, factors: Vector3D) -> None:
        """Multiply this matrix in place by a scaling matrix."""
        mat = Matrix3D()
        mat.m[0] = factors.x
        mat.m[5] = factors.y
        mat.m[10] = factors.z
        self *= mat

    def rotate(self, angle: float, axis: Vector3D) -> None:
        """Multiply this matrix in place by a rotation of ``angle`` degrees about ``axis``."""
        rad = angle * _PI / 180.0
        c = math.cos(rad)
        s = math.sin(rad)
        x, y, z = axis.x, axis.y, axis.z
        mat = Matrix3D()
        mat.m[0] = c + x * x * (1 - c)
        mat.m[1] = x * y * (1 - c) - z * s
        mat.m[2] = x * z * (1 - c) + y * s
        mat.m[4] = x * y * (1 - c) + z * s
        mat.m[5] = c + y * y * (1 - c)
        mat.m[6] = y * z * (1 - c) - x * s
        mat.m[8] = x * z * (1 - c) - y * s
        mat.m[9] = y * z * (1 - c) + x * s
        mat.m[10] = c + z * z * (1 - c)
        self *= mat

    def translate(self, offset: Vector3D) -> None:
        """Multiply this matrix in place by a translation by ``offset``."""
        mat = Matrix3D()
        mat.m[3] = offset.x
        mat.m[7] = offset.y
        mat.m[11] = offset.z
        self *= mat

    def transform(self, point: Union[Point3D, Vector3D]) -> Union[Point3D, Vector3D]:
        """Apply this transform to a point or vector, returning the same kind."""
        m = self.m
        return type(point)(
            m[0] * point.x + m[1] * point.y + m[2] * point.z + m[3],
            m[4] * point.x + m[5] * point.y + m[6] * point.z + m[7],
            m[8] * point.x + m[9] * point.y + m[10] * point.z + m[11],
        )

    def set_transform(self, point: Point3D, angle: Vector3D) -> None:
        """Set this matrix to a rotation by ``angle`` (degrees per axis) followed by a move to ``point``."""
        cx = math.cos(angle.x * _PI / 180.0)
        cy = math.cos(angle.y * _PI / 180.0)
        cz = math.cos(angle.z * _PI / 180.0)
        sx = math.sin(angle.x * _PI / 180.0)
        sy = math.sin(angle.y * _PI / 180.0)
        sz = math.sin(angle.z * _PI / 180.0)

        self.identity()
        m = self.m
        m[0] = cz * cy
        m[1] = cz * sy * sx - sz * cx
        m[2] = cz * sy * cx + sz * sx
        m[3] = point.x
        m[4] = sz * cy
        m[5] = sz * sy * sx + cz * cx
        m[6] = sz * sy * cx - cz * sx
        m[7] = point.y
        m[8] = -sy
        m[9] = cy * sx
        m[10] = cy * cx
        m[11] = point.z

    def __mul__(self, other: Matrix3D) -> Matrix3D:
        """Matrix product accumulated onto an identity matrix (self * other + I)."""
        if not isinstance(other, Matrix3D):
            return NotImplemented
        result = Matrix3D()
        a, b = self.m, other.m
        for row in range(4):
            for col in range(4):
                result.m[row * 4 + col] += sum(
                    a[row * 4 + k] * b[k * 4 + col] for k in range(4)
                )
        return result

    def __imul__(self, other: Matrix3D) -> Matrix3D:
        if not isinstance(other, Matrix3D):
            return NotImplemented
        self.m = (self * other).m
        return self


class Plane3D:
    """A plane in space; carries no data or behaviour."""