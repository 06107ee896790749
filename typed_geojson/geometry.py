"""Typed GeoJSON geometries."""

import copy
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any, ClassVar, TypeAlias

from typed_geojson.spatial import (
    Bbox,
    GeoJsonDict,
    Position,
    Spatial,
    _as_lists,
    _bbox,
    _foreign_members,
    _is_array,
    _positions,
)


__docformat__ = "google"
__all__ = (
    "Geometry",
    "GeometryBase",
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
    "GEOMETRY_TYPES",
)


GEOMETRY_TYPES: tuple[str, ...] = (
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
)
"""The ``type`` discriminants of all geometries."""


@dataclass(frozen=True, kw_only=True, slots=True)
class GeometryBase(Spatial):
    """
    Base class for the seven GeoJSON geometries.

    Geometries are immutable. Their coordinates are normalized on construction:
    any nested sequences of numbers are accepted, and stored as nested tuples
    of floats. Use ``dataclasses.replace()`` to derive a modified geometry.

    Attributes:
        bbox: The bounding box of the geometry, or ``None``.
        foreign_members: Any other members of the GeoJSON object, which are
                         not part of the format, but are preserved nonetheless.
                         Their values must be JSON values, and are deep-copied.

    Raises:
        ValueError: if any of the fields cannot make up a valid geometry
    """

    bbox: Bbox | None = None
    foreign_members: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        match self:
            case GeometryCollection():
                reserved = frozenset({"type", "bbox", "geometries"})
                object.__setattr__(self, "geometries", _geometries(self.geometries))
            case (
                Point()
                | MultiPoint()
                | LineString()
                | MultiLineString()
                | Polygon()
                | MultiPolygon()
            ):
                reserved = frozenset({"type", "bbox", "coordinates"})
                coordinates = _positions(self.coordinates, self.depth, "coordinates")
                object.__setattr__(self, "coordinates", coordinates)
            case _:
                msg = f"{type(self).__name__} is not a GeoJSON geometry"
                raise TypeError(msg)

        object.__setattr__(self, "bbox", _bbox(self.bbox))
        object.__setattr__(
            self, "foreign_members", _foreign_members(self.foreign_members, reserved, self.type)
        )

    @property
    def type(self) -> str:
        """The geometry's type, f.e. ``"Point"``."""
        match self:
            case Point():
                return "Point"
            case MultiPoint():
                return "MultiPoint"
            case LineString():
                return "LineString"
            case MultiLineString():
                return "MultiLineString"
            case Polygon():
                return "Polygon"
            case MultiPolygon():
                return "MultiPolygon"
            case GeometryCollection():
                return "GeometryCollection"
            case _:
                raise AssertionError

    @property
    def positions(self) -> Iterator[Position]:
        """
        All positions of this geometry, including those of nested geometries.

        Nested collections are walked without recursion, so that there is
        no limit on how deep they may be nested.
        """
        pending: list[Iterator[GeometryBase]] = [iter((self,))]

        while pending:
            geometry = next(pending[-1], None)
            if geometry is None:
                pending.pop()
                continue

            match geometry:
                case GeometryCollection():
                    pending.append(iter(geometry.geometries))
                case Point():
                    yield geometry.coordinates
                case MultiPoint() | LineString():
                    yield from geometry.coordinates
                case MultiLineString() | Polygon():
                    for line in geometry.coordinates:
                        yield from line
                case MultiPolygon():
                    for polygon in geometry.coordinates:
                        for ring in polygon:
                            yield from ring
                case _:
                    raise AssertionError

    @property
    def geojson(self) -> GeoJsonDict:
        """A mapping of this geometry, using the GeoJSON format."""
        obj: GeoJsonDict = {"type": self.type}

        if self.bbox is not None:
            obj["bbox"] = list(self.bbox)

        match self:
            case GeometryCollection():
                obj["geometries"] = [geometry.geojson for geometry in self.geometries]
            case Point():
                obj["coordinates"] = list(self.coordinates)
            case MultiPoint() | LineString() | MultiLineString() | Polygon() | MultiPolygon():
                obj["coordinates"] = _as_lists(self.coordinates)
            case _:
                raise AssertionError

        obj.update(copy.deepcopy(self.foreign_members))
        return obj


@dataclass(frozen=True, kw_only=True, slots=True)
class Point(GeometryBase):
    """
    A single position.

    Attributes:
        coordinates: a position

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.1.2
    """

    __hash__ = None  # type: ignore[assignment]

    depth: ClassVar[int] = 1

    coordinates: Position


@dataclass(frozen=True, kw_only=True, slots=True)
class MultiPoint(GeometryBase):
    """
    Any number of positions.

    Attributes:
        coordinates: a sequence of positions

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.1.3
    """

    __hash__ = None  # type: ignore[assignment]

    depth: ClassVar[int] = 2

    coordinates: tuple[Position, ...]


@dataclass(frozen=True, kw_only=True, slots=True)
class LineString(GeometryBase):
    """
    A curve with linear interpolation between its positions.

    The format requires two or more positions, which is not enforced here.

    Attributes:
        coordinates: a sequence of positions

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.1.4
    """

    __hash__ = None  # type: ignore[assignment]

    depth: ClassVar[int] = 2

    coordinates: tuple[Position, ...]


@dataclass(frozen=True, kw_only=True, slots=True)
class MultiLineString(GeometryBase):
    """
    Any number of line strings.

    Attributes:
        coordinates: a sequence of ``LineString`` coordinates

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.1.5
    """

    __hash__ = None  # type: ignore[assignment]

    depth: ClassVar[int] = 3

    coordinates: tuple[tuple[Position, ...], ...]


@dataclass(frozen=True, kw_only=True, slots=True)
class Polygon(GeometryBase):
    """
    A surface bounded by linear rings.

    The first ring is the exterior ring, any others are holes. The format requires
    closed rings with four or more positions, and a counterclockwise exterior ring.
    Neither is enforced here.

    Attributes:
        coordinates: a sequence of linear rings

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.1.6
    """

    __hash__ = None  # type: ignore[assignment]

    depth: ClassVar[int] = 3

    coordinates: tuple[tuple[Position, ...], ...]

    @property
    def exterior(self) -> tuple[Position, ...] | None:
        """The exterior ring, or ``None`` if this polygon is empty."""
        return self.coordinates[0] if self.coordinates else None

    @property
    def interiors(self) -> tuple[tuple[Position, ...], ...]:
        """The rings of all holes."""
        return self.coordinates[1:]


@dataclass(frozen=True, kw_only=True, slots=True)
class MultiPolygon(GeometryBase):
    """
    Any number of polygons.

    Attributes:
        coordinates: a sequence of ``Polygon`` coordinates

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.1.7
    """

    __hash__ = None  # type: ignore[assignment]

    depth: ClassVar[int] = 4

    coordinates: tuple[tuple[tuple[Position, ...], ...], ...]


@dataclass(frozen=True, kw_only=True, slots=True)
class GeometryCollection(GeometryBase):
    """
    A heterogeneous collection of geometries.

    Collections may contain other collections, although the format discourages this.

    Attributes:
        geometries: the member geometries, in order

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.1.8
    """

    __hash__ = None  # type: ignore[assignment]

    geometries: tuple["Geometry", ...]

    def __iter__(self) -> Iterator["Geometry"]:
        return iter(self.geometries)

    def __len__(self) -> int:
        return len(self.geometries)


Geometry: TypeAlias = (
    Point | MultiPoint | LineString | MultiLineString | Polygon | MultiPolygon | GeometryCollection
)
"""Any of the seven GeoJSON geometries."""


def _geometries(value: Any) -> tuple[Geometry, ...]:
    if not _is_array(value):
        msg = f"'geometries' must be a sequence of geometries, found {value!r}"
        raise ValueError(msg)
    geometries = tuple(value)
    for geometry in geometries:
        if not isinstance(geometry, GeometryBase):
            msg = f"'geometries' must only contain geometries, found {geometry!r}"
            raise ValueError(msg)
    return geometries
