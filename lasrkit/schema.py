"""Point attribute schemas and typed access to packed point records."""

from __future__ import annotations

import math
import struct
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from enum import IntEnum

LAS_CORE_ATTRIBUTES = frozenset(
    {
        "X", "Y", "Z", "Intensity", "ReturnNumber",
        "NumberOfReturns", "ScanDirectionFlag", "EdgeOfFlightLine",
        "Classification", "UserData", "ScanAngleRank", "PointSourceID",
        "gpstime", "ScannerChannel", "ScanAngle", "R", "G", "B", "flags",
    }
)

_ATTRIBUTE_ALIASES: dict[str, tuple[str, ...]] = {
    "X": ("X", "x"),
    "Y": ("Y", "y"),
    "Z": ("Z", "z"),
    "Intensity": ("Intensity", "intensity", "i"),
    "ReturnNumber": ("return", "Return", "ReturnNumber", "return_number", "r"),
    "NumberOfReturns": ("NumberOfReturns", "NumberReturns", "numberofreturns", "n"),
    "Classification": ("Classification", "classification", "class", "c"),
    "gpstime": ("gpstime", "gps_time", "GPStime", "t", "time", "gps"),
    "UserData": ("UserData", "userdata", "user_data", "ud", "u"),
    "PointSourceID": ("PointSourceID", "point_source", "point_source_id", "pointsourceid", "psid", "p"),
    "ScanAngle": ("angle", "Angle", "ScanAngle", "ScanAngleRank", "scan_angle", "a"),
    "R": ("R", "Red", "red"),
    "G": ("G", "Green", "green"),
    "B": ("B", "Blue", "blue"),
    "NIR": ("N", "NIR", "nir"),
}

_ALIAS_TO_STANDARD = {
    alias: standard for standard, aliases in _ATTRIBUTE_ALIASES.items() for alias in aliases
}


def map_attribute(name: str) -> str:
    """Return the standard attribute name for an alias, or the name unchanged."""
    return _ALIAS_TO_STANDARD.get(name, name)


class AttributeType(IntEnum):
    """Storage type of an attribute in a point record."""

    NOTYPE = 0
    UINT8 = 1
    INT8 = 2
    UINT16 = 3
    INT16 = 4
    UINT32 = 5
    INT32 = 6
    UINT64 = 7
    INT64 = 8
    FLOAT = 9
    DOUBLE = 10


_STRUCTS = {
    AttributeType.UINT8: struct.Struct("<B"),
    AttributeType.INT8: struct.Struct("<b"),
    AttributeType.UINT16: struct.Struct("<H"),
    AttributeType.INT16: struct.Struct("<h"),
    AttributeType.UINT32: struct.Struct("<I"),
    AttributeType.INT32: struct.Struct("<i"),
    AttributeType.UINT64: struct.Struct("<Q"),
    AttributeType.INT64: struct.Struct("<q"),
    AttributeType.FLOAT: struct.Struct("<f"),
    AttributeType.DOUBLE: struct.Struct("<d"),
}

_TYPE_NAMES = {
    AttributeType.NOTYPE: "Unknown",
    AttributeType.UINT8: "uchar",
    AttributeType.INT8: "char",
    AttributeType.UINT16: "ushort",
    AttributeType.INT16: "short",
    AttributeType.UINT32: "uint",
    AttributeType.INT32: "int",
    AttributeType.UINT64: "uint64",
    AttributeType.INT64: "int64",
    AttributeType.FLOAT: "float",
    AttributeType.DOUBLE: "double",
}

_INT_LIMITS = {
    AttributeType.UINT8: (0, 2**8 - 1),
    AttributeType.INT8: (-(2**7), 2**7 - 1),
    AttributeType.UINT16: (0, 2**16 - 1),
    AttributeType.INT16: (-(2**15), 2**15 - 1),
    AttributeType.UINT32: (0, 2**32 - 1),
    AttributeType.INT32: (-(2**31), 2**31 - 1),
    AttributeType.UINT64: (0, 2**64 - 1),
    AttributeType.INT64: (-(2**63), 2**63 - 1),
}

_FLOAT_MAX = struct.unpack("<f", b"\xff\xff\x7f\x7f")[0]
_INT32 = struct.Struct("<i")

# Positions of the core attributes every schema starts with.
_FLAG, _X, _Y, _Z = 0, 1, 2, 3


def _round_half_away(value: float) -> int:
    floor = math.floor(value)
    diff = value - floor
    if diff > 0.5 or (diff == 0.5 and value > 0):
        return floor + 1
    return floor


def _unscale(value: float, attribute: "Attribute") -> float:
    delta = value - attribute.value_offset
    if attribute.scale_factor == 0:
        if delta == 0 or math.isnan(delta):
            return math.nan
        return math.copysign(math.inf, delta)
    return delta / attribute.scale_factor


@dataclass
class Attribute:
    """One named, typed, scaled field of a point record."""

    name: str
    type: AttributeType
    scale_factor: float = 1.0
    value_offset: float = 0.0
    description: str = ""
    offset: int = 0
    size: int = field(init=False)

    def __post_init__(self) -> None:
        self.type = AttributeType(self.type)
        self.size = _STRUCTS[self.type].size if self.type in _STRUCTS else 0

    def type_name(self) -> str:
        """Return the short C-like name of the storage type."""
        return _TYPE_NAMES.get(self.type, "Unknown")

    def describe(self, verbose: bool = False) -> str:
        if verbose:
            return (
                f"Attribute: {self.name:<15} | Address offset: {self.offset:<2} | Size: {self.size:<1} | "
                f"Type: {self.type_name():<6} | Scale Factor: {self.scale_factor:<5.2f} | "
                f"Value Offset: {self.value_offset:<5.2f}"
            )
        return f"Name: {self.name:<15} | {self.type_name():<6} | Desc: {self.description}"


class AttributeSchema:
    """Ordered list of attributes laid out back to back in a point record."""

    def __init__(self) -> None:
        self.attributes: list[Attribute] = []
        self.total_point_size = 0

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self.attributes)

    def __len__(self) -> int:
        return len(self.attributes)

    def find_attribute(self, name: str) -> Attribute | None:
        return next((attribute for attribute in self.attributes if attribute.name == name), None)

    def has_attribute(self, name: str) -> bool:
        return self.find_attribute(name) is not None

    def attribute_index(self, name: str) -> int | None:
        """Return the position of the attribute called ``name``, or None."""
        return next((i for i, attribute in enumerate(self.attributes) if attribute.name == name), None)

    def add_attribute(self, attribute: Attribute) -> Attribute:
        """Append a copy of ``attribute`` at the end of the record and return it."""
        stored = replace(attribute, offset=self.total_point_size)
        self.attributes.append(stored)
        self.total_point_size += stored.size
        return stored

    def new_attribute(
        self,
        name: str,
        type: AttributeType,
        scale_factor: float = 1.0,
        value_offset: float = 0.0,
        description: str = "",
    ) -> Attribute:
        """Create an attribute and append it to the record."""
        return self.add_attribute(Attribute(name, type, scale_factor, value_offset, description))

    def describe(self, verbose: bool = False) -> str:
        return "\n".join(attribute.describe(verbose) for attribute in self.attributes)


class Point:
    """A point record: a window of ``schema.total_point_size`` bytes in a buffer.

    Without ``data`` the point owns a zeroed buffer of its own; otherwise it is a
    view at ``offset`` into the given buffer.
    """

    def __init__(
        self,
        schema: AttributeSchema | None = None,
        data: bytearray | None = None,
        offset: int = 0,
    ) -> None:
        self.schema = schema
        if data is None:
            self.data = bytearray(schema.total_point_size if schema is not None else 0)
            self.offset = 0
            self.own_data = schema is not None
        else:
            self.data = data
            self.offset = offset
            self.own_data = False

    def copy(self) -> "Point":
        """Duplicate the point: an owning point gets fresh bytes, a view stays a view."""
        if self.own_data:
            size = self.schema.total_point_size
            point = Point(self.schema)
            point.data[:] = self.data[self.offset:self.offset + size]
            return point
        point = Point(self.schema, self.data, self.offset)
        return point

    def zero(self) -> None:
        size = self.schema.total_point_size
        self.data[self.offset:self.offset + size] = bytes(size)

    def __repr__(self) -> str:
        return f"Point({self.x:.2f}, {self.y:.2f}, {self.z:.2f})"

    def _core_int(self, index: int) -> int:
        attribute = self.schema.attributes[index]
        return _INT32.unpack_from(self.data, self.offset + attribute.offset)[0]

    def _set_core_int(self, index: int, value: int) -> None:
        attribute = self.schema.attributes[index]
        _INT32.pack_into(self.data, self.offset + attribute.offset, int(value))

    def _core_double(self, index: int) -> float:
        attribute = self.schema.attributes[index]
        position = self.offset + attribute.offset
        if attribute.type == AttributeType.INT32:
            raw = _INT32.unpack_from(self.data, position)[0]
            return attribute.scale_factor * raw + attribute.value_offset
        if attribute.type in (AttributeType.FLOAT, AttributeType.DOUBLE):
            return _STRUCTS[attribute.type].unpack_from(self.data, position)[0]
        return 0.0

    def _set_core_double(self, index: int, value: float) -> None:
        attribute = self.schema.attributes[index]
        position = self.offset + attribute.offset
        if attribute.type in (AttributeType.FLOAT, AttributeType.DOUBLE):
            _STRUCTS[attribute.type].pack_into(self.data, position, value)
            return
        scaled = (value - attribute.value_offset) / attribute.scale_factor
        _INT32.pack_into(self.data, position, int(scaled))

    def _flag_bytes(self) -> tuple[int, int]:
        attribute = self.schema.attributes[_FLAG]
        return self.offset + attribute.offset, max(attribute.size, 1)

    def get_flag(self, i: int) -> bool:
        """Return bit ``i`` of the flag attribute."""
        start, size = self._flag_bytes()
        if not 0 <= i < size * 8:
            return False
        flags = int.from_bytes(self.data[start:start + size], "little")
        return bool(flags & (1 << i))

    def set_flag(self, i: int, value: bool = True) -> None:
        """Set or clear bit ``i`` of the flag attribute."""
        start, size = self._flag_bytes()
        if not 0 <= i < size * 8:
            raise IndexError(f"flag bit {i} does not fit in a {size}-byte flag attribute")
        flags = int.from_bytes(self.data[start:start + size], "little")
        flags = flags | (1 << i) if value else flags & ~(1 << i)
        self.data[start:start + size] = flags.to_bytes(size, "little")

    X = property(lambda self: self._core_int(_X), lambda self, v: self._set_core_int(_X, v))
    Y = property(lambda self: self._core_int(_Y), lambda self, v: self._set_core_int(_Y, v))
    Z = property(lambda self: self._core_int(_Z), lambda self, v: self._set_core_int(_Z, v))
    x = property(lambda self: self._core_double(_X), lambda self, v: self._set_core_double(_X, v))
    y = property(lambda self: self._core_double(_Y), lambda self, v: self._set_core_double(_Y, v))
    z = property(lambda self: self._core_double(_Z), lambda self, v: self._set_core_double(_Z, v))
    deleted = property(lambda self: self.get_flag(0), lambda self, v: self.set_flag(0, v))
    buffered = property(lambda self: self.get_flag(1), lambda self, v: self.set_flag(1, v))

    def _raw(self, attribute: Attribute) -> float | int | None:
        fmt = _STRUCTS.get(attribute.type)
        if fmt is None:
            return None
        return fmt.unpack_from(self.data, self.offset + attribute.offset)[0]

    def _store(self, attribute: Attribute, value: float) -> None:
        scaled = _unscale(value, attribute)
        kind = attribute.type
        if kind in _INT_LIMITS:
            low, high = _INT_LIMITS[kind]
            if math.isnan(scaled):
                raise ValueError(f"cannot store NaN in integer attribute '{attribute.name}'")
            if math.isinf(scaled):
                stored: float | int = high if scaled > 0 else low
            else:
                stored = min(max(_round_half_away(scaled), low), high)
        elif kind == AttributeType.FLOAT:
            stored = min(max(scaled, -_FLOAT_MAX), _FLOAT_MAX)
        elif kind == AttributeType.DOUBLE:
            stored = scaled
        else:
            return
        _STRUCTS[kind].pack_into(self.data, self.offset + attribute.offset, stored)

    def attribute_as_double(self, index: int) -> float:
        """Return the scaled value of the attribute at position ``index``."""
        attribute = self.schema.attributes[index]
        raw = self._raw(attribute)
        if raw is None:
            return 0.0
        return attribute.value_offset + attribute.scale_factor * raw

    def outside_clip(
        self, min_x: float, min_y: float, max_x: float, max_y: float, circle: bool = False
    ) -> bool:
        """Tell whether the point falls outside a box, or the circle inscribed in it."""
        x = self.x
        if x < min_x or x > max_x:
            return True
        y = self.y
        if y < min_y or y > max_y:
            return True
        if circle:
            radius = (max_x - min_x) / 2
            dx = (max_x + min_x) / 2 - x
            dy = (max_y + min_y) / 2 - y
            return dx * dx + dy * dy > radius * radius
        return False


class AttributeAccessor:
    """Reads and writes one attribute by name, resolving it on first use."""

    def __init__(
        self, name: str = "", schema: AttributeSchema | None = None, default_value: float = 0.0
    ) -> None:
        self.name = name
        self.default_value = default_value
        if schema is not None:
            self.attribute = schema.find_attribute(name)
            if self.attribute is None:
                raise KeyError(f"attribute '{name}' not found in schema")
            self._resolved = True
        else:
            self.attribute = None
            self._resolved = False

    def _resolve(self, point: Point) -> Attribute | None:
        if not self._resolved:
            self.attribute = point.schema.find_attribute(self.name)
            self._resolved = True
        return self.attribute

    def read(self, point: Point) -> float:
        """Return the scaled value, or the default when the attribute is absent."""
        attribute = self._resolve(point)
        if attribute is None:
            return self.default_value
        raw = point._raw(attribute)
        if raw is None:
            return self.default_value
        return attribute.value_offset + attribute.scale_factor * raw

    def write(self, point: Point, value: float) -> None:
        """Store ``value``, rounded and clamped to the attribute's type; no-op if absent."""
        attribute = self._resolve(point)
        if attribute is None:
            return
        point._store(attribute, value)

    def __call__(self, point: Point, *args: float):
        if not args:
            return self.read(point)
        if len(args) == 1:
            self.write(point, args[0])
            return None
        raise TypeError("an accessor takes a point and at most one value")

    def exists(self) -> bool:
        return self.attribute is not None

    def reset(self) -> None:
        """Forget the resolved attribute so the next point resolves it again."""
        self._resolved = False
        self.attribute = None