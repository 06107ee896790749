"""Basic definitions shared by all GeoJSON objects."""

import json
import math
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from numbers import Real
from typing import Any, Final, Literal, TypeAlias


__docformat__ = "google"
__all__ = (
    "ABSENT",
    "Absent",
    "Bbox",
    "GeoJsonDict",
    "Position",
    "SpatialDict",
    "Spatial",
)


GeoJsonDict: TypeAlias = dict[str, Any]
"""A dictionary representing a GeoJSON object."""

Position: TypeAlias = tuple[float, ...]
"""
A coordinate tuple with at least two values.

The first two values are longitude and latitude (or easting and northing),
in that order. The optional third value is the altitude. Any further values
are preserved, but not interpreted.

References:
    - https://tools.ietf.org/html/rfc7946#section-3.1.1
"""

Bbox: TypeAlias = tuple[float, ...]
"""
The bounding box of a GeoJSON object.

For two-dimensional coordinates, this tuple is ``(min_x, min_y, max_x, max_y)``.
In general, it holds all minimum values followed by all maximum values,
so that its length is twice the number of dimensions.

References:
    - https://tools.ietf.org/html/rfc7946#section-5
"""


class Absent(Enum):
    """
    Marks a member that is missing from a GeoJSON object.

    Some members are allowed to be ``null`` or to be left out entirely, and we keep
    track of which one it was to preserve the object when serializing it again.
    """

    ABSENT = "ABSENT"

    def __repr__(self) -> str:
        return self.value

    def __bool__(self) -> bool:
        return False


ABSENT: Final[Literal[Absent.ABSENT]] = Absent.ABSENT
"""The single ``Absent`` value."""


@dataclass(kw_only=True, slots=True)
class SpatialDict:
    """
    Mapping of spatial objects with the ``__geo_interface__`` property.

    Objects of this class have the ``__geo_interface__`` property following a protocol
    [proposed](https://gist.github.com/sgillies/2217756) by Sean Gillies, which can make
    it easier to use spatial data in other Python software. An example of this is the ``shape()``
    function that builds Shapely geometries from any object with the ``__geo_interface__`` property.

    Attributes:
        __geo_interface__: this is the proposed property that contains the spatial data
    """

    __geo_interface__: dict


class Spatial(ABC):
    """
    Base class for GeoJSON objects.

    Geometries, features and feature collections extend this class and implement the
    ``geojson`` property, which maps them back to plain JSON values.

    GeoJSON objects compare by value, but are not hashable, since their foreign members
    and feature properties are dictionaries. These dictionaries are private copies
    of what was passed on construction, and must not be modified in place.
    """

    __slots__ = ("__validated__",)  # we use that field in tests

    @property
    @abstractmethod
    def geojson(self) -> GeoJsonDict:
        """
        A mapping of this object, using the GeoJSON format.

        The result only consists of ``dict``, ``list``, ``str``, ``float``, ``int``, ``bool``
        and ``None`` values, and can be passed to ``json.dumps()`` as is.
        Foreign members are merged back into the mapping next to the standard members.
        Each call builds a new mapping that shares no mutable values with this object.

        References:
            - https://tools.ietf.org/html/rfc7946#section-3
        """
        raise NotImplementedError

    @property
    def __geo_interface__(self) -> GeoJsonDict:
        """Same as ``geojson``, for consumers of the ``__geo_interface__`` protocol."""
        return self.geojson

    @property
    def geo_interfaces(self) -> Iterator[SpatialDict]:
        """A mapping of this object to ``SpatialDict``s that implement ``__geo_interface__``."""
        geojson = self.geojson
        match geojson["type"]:
            case "FeatureCollection":
                for feature in geojson["features"]:
                    yield SpatialDict(__geo_interface__=feature)
            case _:
                yield SpatialDict(__geo_interface__=geojson)

    def __str__(self) -> str:
        return json.dumps(self.geojson, separators=(",", ":"), allow_nan=False)


def _finite(value: Any, name: str) -> float:
    """Convert a number to a finite float, or raise ``ValueError``."""
    if isinstance(value, bool) or not isinstance(value, Real):
        msg = f"'{name}' must only contain numbers, found {value!r}"
        raise ValueError(msg)
    try:
        number = float(value)
    except OverflowError as err:
        msg = f"'{name}' must only contain finite numbers, found {value!r}"
        raise ValueError(msg) from err
    if not math.isfinite(number):
        msg = f"'{name}' must only contain finite numbers, found {value!r}"
        raise ValueError(msg)
    return number


def _is_array(value: Any) -> bool:
    return isinstance(value, Iterable) and not isinstance(value, str | bytes | Mapping)


def _position(value: Any, name: str) -> Position:
    if not _is_array(value):
        msg = f"'{name}' must contain positions, found {value!r}"
        raise ValueError(msg)
    position = tuple(_finite(v, name) for v in value)
    if len(position) < 2:
        msg = f"'{name}' must contain positions with at least 2 values, found {position!r}"
        raise ValueError(msg)
    return position


def _positions(value: Any, depth: int, name: str) -> Any:
    """Normalize coordinates nested ``depth`` levels deep to tuples of floats."""
    if depth == 1:
        return _position(value, name)
    if not _is_array(value):
        msg = f"'{name}' must be nested {depth} levels deep, found {value!r}"
        raise ValueError(msg)
    return tuple(_positions(v, depth - 1, name) for v in value)


def _bbox(value: Any) -> Bbox | None:
    if value is None:
        return None
    if not _is_array(value):
        msg = f"'bbox' must be a sequence of numbers, found {value!r}"
        raise ValueError(msg)
    bbox = tuple(_finite(v, "bbox") for v in value)
    if len(bbox) < 4 or len(bbox) % 2 != 0:
        msg = f"'bbox' must have an even number of at least 4 values, found {len(bbox)}"
        raise ValueError(msg)
    return bbox


def _foreign_members(value: Any, reserved: frozenset[str], owner: str) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        msg = f"'foreign_members' must be a mapping, found {value!r}"
        raise ValueError(msg)
    if clash := reserved.intersection(value):
        msg = f"'foreign_members' of {owner} must not contain {sorted(clash)}"
        raise ValueError(msg)
    return _json_object(value, "foreign_members")


def _json_object(value: Mapping[str, Any], name: str) -> dict[str, Any]:
    """
    Deep copy of a mapping that only contains JSON values.

    Tuples are copied to lists, and numbers to plain ``int`` and ``float`` values,
    so that the copy looks exactly like its JSON text after decoding.

    Raises:
        ValueError: if the mapping contains anything but JSON values
    """
    try:
        return _json_value(value, name)
    except RecursionError as err:
        msg = f"'{name}' are nested too deeply"
        raise ValueError(msg) from err


def _json_value(value: Any, name: str) -> Any:
    match value:
        case None | bool() | str():
            return value
        case int():
            return int(value)
        case float():
            if not math.isfinite(value):
                msg = f"'{name}' must only contain finite numbers, found {value!r}"
                raise ValueError(msg)
            return float(value)
        case Mapping():
            obj: dict[str, Any] = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    msg = f"'{name}' must only contain string keys, found {key!r}"
                    raise ValueError(msg)
                obj[key] = _json_value(item, name)
            return obj
        case list() | tuple():
            return [_json_value(item, name) for item in value]
        case _:
            msg = f"'{name}' must only contain JSON values, found {value!r}"
            raise ValueError(msg)


def _as_lists(coordinates: tuple) -> list:
    """Turn nested coordinate tuples into nested lists."""
    return [_as_lists(c) if isinstance(c, tuple) else c for c in coordinates]
