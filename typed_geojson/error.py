"""
Error types.

```
(GeoJsonError)
 ├── MalformedJsonError
 ├── (DecodeError)
 │    ├── NotAnObjectError
 │    ├── ExpectedArrayError
 │    ├── MissingMemberError
 │    ├── InvalidTypeError
 │    ├── CoordinateDepthError
 │    ├── ShortPositionError
 │    ├── NumericConversionError
 │    ├── InvalidFeatureIdError
 │    ├── InvalidPropertiesError
 │    ├── NonJsonValueError
 │    ├── BboxError
 │    └── NestingTooDeepError
 └── (BridgeError)
      ├── UnsupportedGeometryError
      └── MixedGeometryCollectionError
```

Every ``DecodeError`` carries a ``path`` that locates the offending value in the
input, f.e. ``$.features[2].geometry.coordinates[0][1]``.
"""

from dataclasses import dataclass
from enum import Enum, auto
from json import JSONDecodeError
from typing import Any, TypeAlias, TypeGuard


__docformat__ = "google"
__all__ = (
    "GeoJsonError",
    "MalformedJsonError",
    "MalformedJsonCause",
    "DecodeError",
    "NotAnObjectError",
    "ExpectedArrayError",
    "MissingMemberError",
    "InvalidTypeError",
    "CoordinateDepthError",
    "ShortPositionError",
    "NumericConversionError",
    "InvalidFeatureIdError",
    "InvalidPropertiesError",
    "NonJsonValueError",
    "BboxError",
    "BboxErrorCause",
    "NestingTooDeepError",
    "BridgeError",
    "UnsupportedGeometryError",
    "MixedGeometryCollectionError",
    "is_bbox_error",
    "is_bridge_error",
    "is_decode_error",
    "is_depth_error",
    "is_missing_type",
)


class GeoJsonError(Exception):
    """Base exception for GeoJSON that cannot be decoded or converted."""


MalformedJsonCause: TypeAlias = JSONDecodeError | ValueError | RecursionError
"""Causes for a ``MalformedJsonError``."""


@dataclass(kw_only=True)
class MalformedJsonError(GeoJsonError):
    """
    The input text is not valid JSON.

    This includes the non-standard ``NaN``, ``Infinity`` and ``-Infinity`` constants
    that Python's ``json`` module accepts by default, and documents nested so deeply
    that the JSON decoder itself gives up.

    Attributes:
        cause: the exception raised while decoding the text
    """

    cause: MalformedJsonCause

    def __str__(self) -> str:
        return f"malformed JSON: {self.cause}"


@dataclass(kw_only=True)
class DecodeError(GeoJsonError):
    """
    Base exception for JSON values that do not make up a valid GeoJSON object.

    Attributes:
        path: location of the offending value, where ``$`` is the input value itself
    """

    path: str


@dataclass(kw_only=True)
class NotAnObjectError(DecodeError):
    """
    Expected a JSON object.

    Attributes:
        found: the JSON type that was found instead
    """

    found: str

    def __str__(self) -> str:
        return f"{self.path}: expected an object, found {self.found}"


@dataclass(kw_only=True)
class ExpectedArrayError(DecodeError):
    """
    Expected the ``features`` or ``geometries`` member to be a JSON array.

    Attributes:
        member: the name of the member
        found: the JSON type that was found instead
    """

    member: str
    found: str

    def __str__(self) -> str:
        return f"{self.path}: expected '{self.member}' to be an array, found {self.found}"


@dataclass(kw_only=True)
class MissingMemberError(DecodeError):
    """
    A mandatory member is missing from an object.

    Attributes:
        member: the name of the member, f.e. ``"type"`` or ``"coordinates"``
    """

    member: str

    def __str__(self) -> str:
        return f"{self.path}: missing '{self.member}' member"


@dataclass(kw_only=True)
class InvalidTypeError(DecodeError):
    """
    The ``type`` member is not one of the expected discriminants.

    This is raised both for unknown types, and for known types in a place where
    they are not allowed, f.e. a ``Feature`` inside ``geometries``.

    Attributes:
        found: the value of the ``type`` member
        expected: the types that would have been accepted
    """

    found: Any
    expected: tuple[str, ...]

    def __str__(self) -> str:
        expected = ", ".join(self.expected)
        return f"{self.path}: invalid type {self.found!r}, expected one of: {expected}"


@dataclass(kw_only=True)
class CoordinateDepthError(DecodeError):
    """
    A ``coordinates`` member does not nest arrays as deep as its geometry type requires.

    ``Point`` coordinates are one array deep, ``LineString`` and ``MultiPoint``
    coordinates two, ``Polygon`` and ``MultiLineString`` coordinates three,
    and ``MultiPolygon`` coordinates four.

    Attributes:
        kind: the geometry type
        expected_depth: the number of nested arrays required by ``kind``
        found: the JSON type found where a nested array or a number was expected
    """

    kind: str
    expected_depth: int
    found: str

    def __str__(self) -> str:
        levels = "level" if self.expected_depth == 1 else "levels"
        return (
            f"{self.path}: {self.kind} coordinates must be nested"
            f" {self.expected_depth} {levels} deep, found {self.found}"
        )


@dataclass(kw_only=True)
class ShortPositionError(DecodeError):
    """
    A position has fewer than two values.

    Attributes:
        length: the number of values in the position
    """

    length: int

    def __str__(self) -> str:
        return f"{self.path}: a position needs at least 2 values, found {self.length}"


@dataclass(kw_only=True)
class NumericConversionError(DecodeError):
    """
    A coordinate, bounding box, property or foreign member value is not a finite number.

    Attributes:
        value: the offending value
    """

    value: Any

    def __str__(self) -> str:
        return f"{self.path}: expected a finite number, found {self.value!r}"


@dataclass(kw_only=True)
class InvalidFeatureIdError(DecodeError):
    """
    The ``id`` of a feature is neither a string nor a number.

    Attributes:
        value: the offending value
    """

    value: Any

    def __str__(self) -> str:
        return f"{self.path}: feature id must be a string or a number, found {self.value!r}"


@dataclass(kw_only=True)
class InvalidPropertiesError(DecodeError):
    """
    The ``properties`` of a feature are neither an object nor ``null``.

    Attributes:
        found: the JSON type that was found instead
    """

    found: str

    def __str__(self) -> str:
        return f"{self.path}: properties must be an object or null, found {self.found}"


@dataclass(kw_only=True)
class NonJsonValueError(DecodeError):
    """
    A property or foreign member contains something other than JSON values.

    JSON text never decodes to such values, but Python values passed to ``parse()`` may
    contain anything, f.e. sets, or dictionaries with non-string keys.

    Attributes:
        value: the offending value, or the offending key
    """

    value: Any

    def __str__(self) -> str:
        return f"{self.path}: expected a JSON value, found {self.value!r}"


class BboxErrorCause(Enum):
    """Details on why a ``bbox`` member is invalid."""

    EXPECTED_ARRAY = auto()
    """The bounding box is not an array."""

    NON_NUMERIC = auto()
    """The bounding box contains something other than numbers."""

    ODD_LENGTH = auto()
    """The bounding box does not have the same number of minimum and maximum values."""

    TOO_SHORT = auto()
    """The bounding box has fewer than two dimensions."""

    def __str__(self) -> str:
        match self:
            case BboxErrorCause.EXPECTED_ARRAY:
                return "expected an array"
            case BboxErrorCause.NON_NUMERIC:
                return "expected numeric values"
            case BboxErrorCause.ODD_LENGTH:
                return "expected an even number of values"
            case BboxErrorCause.TOO_SHORT:
                return "expected at least 4 values"
            case _:
                raise AssertionError


@dataclass(kw_only=True)
class BboxError(DecodeError):
    """
    A ``bbox`` member is malformed.

    Attributes:
        cause: why the bounding box is invalid
        value: the offending bounding box, or the offending value inside it
    """

    cause: BboxErrorCause
    value: Any

    def __str__(self) -> str:
        return f"{self.path}: invalid bbox, {self.cause}: {self.value!r}"


@dataclass(kw_only=True)
class NestingTooDeepError(DecodeError):
    """
    Objects are nested deeper than the configured limit.

    GeometryCollections may contain GeometryCollections without any limit imposed
    by the format. To guard against adversarial input, the parser gives up
    when exceeding ``max_depth`` nested objects.

    Attributes:
        max_depth: the configured limit
    """

    max_depth: int

    def __str__(self) -> str:
        return f"{self.path}: objects nested deeper than {self.max_depth} levels"


@dataclass(kw_only=True)
class BridgeError(GeoJsonError):
    """
    Base exception for geometries that cannot be converted to or from Shapely geometries.

    Attributes:
        kind: the type of the geometry that failed to convert
    """

    kind: str


@dataclass(kw_only=True)
class UnsupportedGeometryError(BridgeError):
    """
    A geometry cannot be expressed on the other side of the bridge.

    Examples are positions with more than three values, which Shapely cannot represent,
    a ``LineString`` with a single position, which Shapely rejects, or an empty Shapely
    ``Point``, which has no position at all.

    Attributes:
        reason: why the geometry is unsupported
    """

    reason: str

    def __str__(self) -> str:
        return f"cannot convert {self.kind}: {self.reason}"


@dataclass(kw_only=True)
class MixedGeometryCollectionError(BridgeError):
    """
    A ``GeometryCollection`` cannot be expressed as a single homogeneous multi-part geometry.

    Attributes:
        kinds: the types of the geometries found in the collection
    """

    kinds: list[str]

    def __str__(self) -> str:
        if not self.kinds:
            return f"cannot convert empty {self.kind} to a multi-part geometry"
        return f"cannot convert {self.kind} with mixed geometry types: {', '.join(self.kinds)}"


def is_decode_error(err: GeoJsonError | None) -> TypeGuard[DecodeError]:
    """``True`` if this is a ``DecodeError``."""
    return isinstance(err, DecodeError)


def is_bridge_error(err: GeoJsonError | None) -> TypeGuard[BridgeError]:
    """``True`` if this is a ``BridgeError``."""
    return isinstance(err, BridgeError)


def is_bbox_error(err: GeoJsonError | None) -> TypeGuard[BboxError]:
    """``True`` if this is a ``BboxError``."""
    return isinstance(err, BboxError)


def is_depth_error(err: GeoJsonError | None) -> TypeGuard[CoordinateDepthError]:
    """``True`` if this is a ``CoordinateDepthError``."""
    return isinstance(err, CoordinateDepthError)


def is_missing_type(err: GeoJsonError | None) -> TypeGuard[MissingMemberError]:
    """``True`` if this is a ``MissingMemberError`` for the ``type`` member."""
    return isinstance(err, MissingMemberError) and err.member == "type"
