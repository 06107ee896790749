import json

from typed_geojson import ABSENT, Feature, FeatureCollection, GeometryCollection
from typed_geojson.codec import loads, parse, serialize
from typed_geojson.geometry import GeometryBase
from typed_geojson.spatial import Spatial

import geojson
import shapely.geometry


def verify_geojson(obj: Spatial) -> None:
    """Assert that an object survives serializing, and is accepted by other GeoJSON consumers."""
    msg = repr(obj)

    if _already_validated(obj):
        return

    assert isinstance(obj, Spatial), msg

    mapping = serialize(obj)
    assert mapping["type"] == obj.type, msg
    assert parse(mapping) == obj, msg

    text = json.dumps(mapping, allow_nan=False)
    assert loads(text) == obj, msg
    assert geojson.loads(text), msg  # valid GeoJSON

    match obj:
        case GeometryCollection():
            for geometry in obj.geometries:
                verify_geojson(geometry)
        case GeometryBase():
            verify_geometry(obj)
        case Feature():
            if obj.geometry is not None and obj.geometry is not ABSENT:
                verify_geojson(obj.geometry)
        case FeatureCollection():
            for feature in obj.features:
                verify_geojson(feature)

    # "Feature" is unsupported by shapely before 2.1.0, and so are empty coordinates
    if isinstance(obj, GeometryBase) and _is_shapely_compatible(obj):
        try:
            for spatial_dict in obj.geo_interfaces:
                _ = shapely.geometry.shape(spatial_dict)
        except BaseException as err:
            raise AssertionError(f"{msg}: bad __geo_interface__: {err}") from err

    assert str(obj), msg  # just test this doesn't raise
    assert repr(obj), msg  # just test this doesn't raise


def verify_geometry(geometry: GeometryBase) -> None:
    msg = repr(geometry)

    for position in geometry.positions:
        assert isinstance(position, tuple), msg
        assert len(position) >= 2, msg
        assert all(isinstance(value, float) for value in position), msg

    if geometry.bbox is not None:
        assert len(geometry.bbox) >= 4, msg
        assert len(geometry.bbox) % 2 == 0, msg


def _is_shapely_compatible(geometry: GeometryBase) -> bool:
    positions = list(geometry.positions)
    return bool(positions) and all(len(position) <= 3 for position in positions)


def _already_validated(obj: Spatial) -> bool:
    if getattr(obj, "__validated__", False):
        return True
    object.__setattr__(obj, "__validated__", True)
    return False
