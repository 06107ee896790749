"""
Conversion between typed GeoJSON geometries and Shapely geometries.

Shapely geometries are the de facto standard for working with planar geometries in Python:
they give access to area and distance computations, predicates like ``intersects()``,
set-theoretic operations, and many more. Converting copies all coordinates, so both
sides are fully independent afterwards.

Note that Shapely operates on the Cartesian plane: distances between geometries with
longitude/latitude coordinates are not geodetic distances.
"""

import logging
from collections.abc import Iterable, Iterator

from typed_geojson.error import MixedGeometryCollectionError, UnsupportedGeometryError
from typed_geojson.geometry import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from typed_geojson.spatial import Position

import shapely
from shapely.errors import ShapelyError
from shapely.geometry.base import BaseGeometry


__docformat__ = "google"
__all__ = (
    "to_shapely",
    "from_shapely",
    "to_shapely_multipart",
)


_logger = logging.getLogger(__name__)


def to_shapely(geometry: Geometry) -> BaseGeometry:
    """
    Build the Shapely geometry that is equivalent to the given GeoJSON geometry.

    Each GeoJSON geometry maps to the Shapely geometry of the same name.
    Nested and heterogeneous geometry collections are supported.
    Bounding boxes and foreign members are not carried over.

    Raises:
        UnsupportedGeometryError: if any position has more than three values,
                                  if a multi-part geometry has an empty part, which
                                  Shapely would silently drop, or if Shapely rejects
                                  the shape, f.e. a ``LineString`` with a single position
    """
    if any(len(position) > 3 for position in geometry.positions):
        raise UnsupportedGeometryError(
            kind=geometry.type,
            reason="positions with more than 3 values cannot be represented",
        )

    _logger.debug(f"convert {geometry.type} to shapely")

    try:
        return _to_shapely(geometry)
    except (ValueError, ShapelyError) as err:
        _logger.debug(f"shapely rejected {geometry.type}: {err}")
        raise UnsupportedGeometryError(kind=geometry.type, reason=str(err)) from err
    except RecursionError as err:
        _logger.debug(f"gave up on converting {geometry.type}: {err}")
        raise UnsupportedGeometryError(
            kind=geometry.type,
            reason="geometry collections are nested too deeply",
        ) from err


def _to_shapely(geometry: Geometry) -> BaseGeometry:
    match geometry:
        case Point():
            return shapely.Point(geometry.coordinates)
        case MultiPoint():
            return shapely.MultiPoint(geometry.coordinates)
        case LineString():
            return shapely.LineString(geometry.coordinates)
        case MultiLineString():
            _check_parts(geometry)
            return shapely.MultiLineString(geometry.coordinates)
        case Polygon():
            return _shapely_polygon(geometry.coordinates)
        case MultiPolygon():
            _check_parts(geometry)
            return shapely.MultiPolygon([_shapely_polygon(rings) for rings in geometry.coordinates])
        case GeometryCollection():
            return shapely.GeometryCollection([_to_shapely(g) for g in geometry.geometries])
        case _:
            raise AssertionError(geometry)


def _check_parts(geometry: MultiLineString | MultiPolygon) -> None:
    # Shapely drops empty parts of multi-part geometries
    if not all(geometry.coordinates):
        msg = f"{geometry.type} with empty parts cannot be represented"
        raise ValueError(msg)


def _shapely_polygon(rings: tuple[tuple[Position, ...], ...]) -> shapely.Polygon:
    if not rings:
        return shapely.Polygon()
    shell, *holes = rings
    return shapely.Polygon(shell=shell, holes=holes)


def from_shapely(geometry: BaseGeometry) -> Geometry:
    """
    Build the GeoJSON geometry that is equivalent to the given Shapely geometry.

    Each Shapely geometry maps to the GeoJSON geometry of the same name,
    except for ``LinearRing``, which does not exist in GeoJSON, and maps to ``LineString``.
    Empty Shapely geometries map to geometries with empty coordinates.

    Raises:
        UnsupportedGeometryError: if the input is or contains an empty ``Point``,
                                  which has no position
    """
    _logger.debug(f"convert {type(geometry).__name__} from shapely")

    match geometry:
        case shapely.Point():
            return Point(coordinates=_point_position(geometry))
        case shapely.LinearRing() | shapely.LineString():
            return LineString(coordinates=tuple(geometry.coords))
        case shapely.Polygon():
            return Polygon(coordinates=_rings(geometry))
        case shapely.MultiPoint():
            return MultiPoint(coordinates=tuple(_point_position(p) for p in geometry.geoms))
        case shapely.MultiLineString():
            return MultiLineString(coordinates=tuple(tuple(ls.coords) for ls in geometry.geoms))
        case shapely.MultiPolygon():
            return MultiPolygon(coordinates=tuple(_rings(poly) for poly in geometry.geoms))
        case shapely.GeometryCollection():
            return GeometryCollection(
                geometries=tuple(from_shapely(member) for member in geometry.geoms)
            )
        case _:
            raise UnsupportedGeometryError(
                kind=type(geometry).__name__,
                reason="not a Shapely geometry",
            )


def _point_position(point: shapely.Point) -> Position:
    if point.is_empty:
        raise UnsupportedGeometryError(kind="Point", reason="an empty point has no position")
    return tuple(point.coords[0])


def _rings(polygon: shapely.Polygon) -> tuple[tuple[Position, ...], ...]:
    if polygon.is_empty:
        return ()
    exterior = tuple(polygon.exterior.coords)
    interiors = (tuple(ring.coords) for ring in polygon.interiors)
    return (exterior, *interiors)


_FAMILIES = {
    "Point": "MultiPoint",
    "MultiPoint": "MultiPoint",
    "LineString": "MultiLineString",
    "MultiLineString": "MultiLineString",
    "Polygon": "MultiPolygon",
    "MultiPolygon": "MultiPolygon",
}
"""The multi-part geometry type that can hold parts of a given geometry type."""


def to_shapely_multipart(
    collection: GeometryCollection,
) -> shapely.MultiPoint | shapely.MultiLineString | shapely.MultiPolygon:
    """
    Flatten a geometry collection to a single homogeneous Shapely multi-part geometry.

    This is useful for collections that only group geometries of the same kind,
    like several polygons, which many Shapely functions handle better as a ``MultiPolygon``
    than as a ``GeometryCollection``. Nested collections are flattened.

    Raises:
        MixedGeometryCollectionError: if the collection is empty, or if it contains
                                      geometries that do not fit into the same
                                      multi-part geometry, f.e. a point and a polygon
        UnsupportedGeometryError: if Shapely rejects the combined shape
    """
    leaves = list(_flatten(collection))
    kinds = sorted({leaf.type for leaf in leaves})
    families = {_FAMILIES[kind] for kind in kinds}

    if len(families) != 1:
        raise MixedGeometryCollectionError(kind=collection.type, kinds=kinds)

    (family,) = families
    _logger.debug(f"flatten {len(leaves)} geometries into {family}")

    multipart: Geometry
    match family:
        case "MultiPoint":
            multipart = MultiPoint(coordinates=tuple(_parts(leaves)))
        case "MultiLineString":
            multipart = MultiLineString(coordinates=tuple(_parts(leaves)))
        case "MultiPolygon":
            multipart = MultiPolygon(coordinates=tuple(_parts(leaves)))
        case _:
            raise AssertionError(family)

    return to_shapely(multipart)  # type: ignore[return-value]


def _flatten(collection: GeometryCollection) -> Iterator[Geometry]:
    """Flattens nested geometry collections, in order."""
    pending = [iter(collection.geometries)]
    while pending:
        geometry = next(pending[-1], None)
        if geometry is None:
            pending.pop()
        elif isinstance(geometry, GeometryCollection):
            pending.append(iter(geometry.geometries))
        else:
            yield geometry


def _parts(geometries: Iterable[Geometry]) -> Iterator[tuple]:
    """The coordinates of each single-part geometry, splitting up multi-part geometries."""
    for geometry in geometries:
        match geometry:
            case Point() | LineString() | Polygon():
                yield geometry.coordinates
            case MultiPoint() | MultiLineString() | MultiPolygon():
                yield from geometry.coordinates
            case _:
                raise AssertionError(geometry)
