"""Conversion between untyped JSON values and typed GeoJSON objects."""

import json
import logging
import math
from collections.abc import Mapping
from typing import Any, cast

from typed_geojson._env import MAX_DEPTH
from typed_geojson.error import (
    BboxError,
    BboxErrorCause,
    CoordinateDepthError,
    DecodeError,
    ExpectedArrayError,
    InvalidFeatureIdError,
    InvalidPropertiesError,
    InvalidTypeError,
    MalformedJsonError,
    MissingMemberError,
    NestingTooDeepError,
    NonJsonValueError,
    NotAnObjectError,
    NumericConversionError,
    ShortPositionError,
)
from typed_geojson.feature import Feature, FeatureCollection, GeoJson
from typed_geojson.geometry import (
    GEOMETRY_TYPES,
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from typed_geojson.spatial import ABSENT, Absent, Bbox, GeoJsonDict, Position


__docformat__ = "google"
__all__ = (
    "parse",
    "parse_geometry",
    "parse_feature",
    "parse_feature_collection",
    "serialize",
    "loads",
    "dumps",
    "DOCUMENT_TYPES",
)


DOCUMENT_TYPES: tuple[str, ...] = (*GEOMETRY_TYPES, "Feature", "FeatureCollection")
"""The ``type`` discriminants of all GeoJSON objects."""

_GEOMETRY_CLASSES = {
    "Point": Point,
    "MultiPoint": MultiPoint,
    "LineString": LineString,
    "MultiLineString": MultiLineString,
    "Polygon": Polygon,
    "MultiPolygon": MultiPolygon,
}

_GEOMETRY_MEMBERS = frozenset({"type", "bbox", "coordinates"})
_GEOMETRY_COLLECTION_MEMBERS = frozenset({"type", "bbox", "geometries"})
_FEATURE_MEMBERS = frozenset({"type", "bbox", "geometry", "properties", "id"})
_FEATURE_COLLECTION_MEMBERS = frozenset({"type", "bbox", "features"})

_NULL_LOGGER = logging.getLogger(__name__)
_NULL_LOGGER.addHandler(logging.NullHandler())


def parse(
    value: Any,
    *,
    max_depth: int = MAX_DEPTH,
    logger: logging.Logger = _NULL_LOGGER,
) -> GeoJson:
    """
    Produce a typed GeoJSON object from an untyped JSON value.

    The input is what ``json.loads()`` produces: nested ``dict``, ``list``, ``str``,
    ``int``, ``float``, ``bool`` and ``None`` values. Parsing is all-or-nothing:
    the first violation of the format's grammar is raised, and no partial result
    is returned.

    Members that are not part of the format are kept as ``foreign_members``.

    Args:
        value: the JSON value to parse
        max_depth: The maximum number of nested objects. A feature collection
                   containing features with points has a depth of three, and every
                   nested geometry collection adds one. Objects and arrays in
                   properties and foreign members count as well, coordinates do not.
        logger: The logger to use for all logging output related to this call.

    Returns:
        a geometry, feature, or feature collection

    Raises:
        DecodeError: if the value is not valid GeoJSON
        ValueError: if ``max_depth`` is not an integer > 0
    """
    return _parse(value, DOCUMENT_TYPES, max_depth, logger)


def parse_geometry(
    value: Any,
    *,
    max_depth: int = MAX_DEPTH,
    logger: logging.Logger = _NULL_LOGGER,
) -> Geometry:
    """
    Same as ``parse()``, but only accepts geometries.

    Raises:
        InvalidTypeError: if the value is a feature or feature collection
    """
    return cast(Geometry, _parse(value, GEOMETRY_TYPES, max_depth, logger))


def parse_feature(
    value: Any,
    *,
    max_depth: int = MAX_DEPTH,
    logger: logging.Logger = _NULL_LOGGER,
) -> Feature:
    """
    Same as ``parse()``, but only accepts features.

    Raises:
        InvalidTypeError: if the value is a geometry or feature collection
    """
    return cast(Feature, _parse(value, ("Feature",), max_depth, logger))


def parse_feature_collection(
    value: Any,
    *,
    max_depth: int = MAX_DEPTH,
    logger: logging.Logger = _NULL_LOGGER,
) -> FeatureCollection:
    """
    Same as ``parse()``, but only accepts feature collections.

    Raises:
        InvalidTypeError: if the value is a geometry or feature
    """
    return cast(FeatureCollection, _parse(value, ("FeatureCollection",), max_depth, logger))


def serialize(obj: GeoJson) -> GeoJsonDict:
    """
    Map a typed GeoJSON object to an untyped JSON value.

    This is the inverse of ``parse()``: for any object ``obj``,
    ``parse(serialize(obj)) == obj``. The order of foreign members
    relative to the standard members is not preserved.

    The result shares no mutable values with ``obj``, so it can be modified freely.

    Raises:
        TypeError: if ``obj`` is not a GeoJSON object
        ValueError: if ``obj`` nests geometry collections beyond the interpreter's
                    recursion limit, which is only possible for objects built in code
    """
    match obj:
        case (
            Point()
            | MultiPoint()
            | LineString()
            | MultiLineString()
            | Polygon()
            | MultiPolygon()
            | GeometryCollection()
            | Feature()
            | FeatureCollection()
        ):
            try:
                return obj.geojson
            except RecursionError as err:
                msg = f"{obj.type} is nested too deeply to serialize"
                raise ValueError(msg) from err
        case _:
            msg = f"expected a GeoJSON object, not {type(obj).__name__}"
            raise TypeError(msg)


def loads(
    text: str | bytes,
    *,
    max_depth: int = MAX_DEPTH,
    logger: logging.Logger = _NULL_LOGGER,
) -> GeoJson:
    """
    Parse GeoJSON text.

    Unlike ``json.loads()`` with its default settings, this rejects the ``NaN``,
    ``Infinity`` and ``-Infinity`` constants, which are not valid JSON.

    Raises:
        MalformedJsonError: if the text is not valid JSON
        DecodeError: if the text is valid JSON, but not valid GeoJSON
    """
    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as err:
        logger.debug(f"failed to decode JSON: {err}")
        raise MalformedJsonError(cause=err) from err

    return parse(value, max_depth=max_depth, logger=logger)


def dumps(obj: GeoJson, **kwargs: Any) -> str:
    """
    Serialize a typed GeoJSON object to text.

    Args:
        obj: the object to serialize
        **kwargs: passed on to ``json.dumps()``, f.e. ``indent``

    Raises:
        TypeError: if ``obj`` is not a GeoJSON object
        ValueError: if ``obj`` is nested too deeply, see ``serialize()``
    """
    value = serialize(obj)
    try:
        return json.dumps(value, allow_nan=False, **kwargs)
    except RecursionError as err:
        msg = f"{obj.type} is nested too deeply to serialize"
        raise ValueError(msg) from err


def _reject_constant(name: str) -> Any:
    msg = f"{name} is not a valid JSON number"
    raise ValueError(msg)


def _parse(
    value: Any,
    allowed: tuple[str, ...],
    max_depth: int,
    logger: logging.Logger,
) -> GeoJson:
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
        msg = "'max_depth' must be an integer > 0"
        raise ValueError(msg)

    parser = _Parser(max_depth=max_depth, logger=logger)

    try:
        return parser.document(value, allowed, path="$", depth=1)
    except DecodeError as err:
        logger.debug(f"failed to parse GeoJSON: {err}")
        raise
    except RecursionError as err:
        # only reachable with a 'max_depth' beyond the interpreter's recursion limit
        logger.debug(f"gave up on parsing GeoJSON: {err}")
        raise NestingTooDeepError(path="$", max_depth=max_depth) from err


class _Parser:
    __slots__ = (
        "logger",
        "max_depth",
    )

    def __init__(self, max_depth: int, logger: logging.Logger) -> None:
        self.max_depth = max_depth
        self.logger = logger

    def document(self, value: Any, allowed: tuple[str, ...], path: str, depth: int) -> GeoJson:
        """Parse any object whose ``type`` is one of ``allowed``."""
        obj = self._object(value, path, depth)
        kind = self._type(obj, allowed, path)

        self.logger.debug(f"parse {kind} at {path}")

        match kind:
            case "Feature":
                return self._feature(obj, path, depth)
            case "FeatureCollection":
                return self._feature_collection(obj, path, depth)
            case "GeometryCollection":
                return self._geometry_collection(obj, path, depth)
            case _:
                return self._geometry(obj, kind, path, depth)

    def _object(self, value: Any, path: str, depth: int) -> Mapping[str, Any]:
        if not isinstance(value, Mapping):
            raise NotAnObjectError(path=path, found=_json_type(value))
        if depth > self.max_depth:
            raise NestingTooDeepError(path=path, max_depth=self.max_depth)
        return value

    def _type(self, obj: Mapping[str, Any], allowed: tuple[str, ...], path: str) -> str:
        if "type" not in obj:
            raise MissingMemberError(path=path, member="type")
        kind = obj["type"]
        if not isinstance(kind, str) or kind not in allowed:
            raise InvalidTypeError(path=f"{path}.type", found=kind, expected=allowed)
        return kind

    def _geometry(self, obj: Mapping[str, Any], kind: str, path: str, depth: int) -> Geometry:
        cls = _GEOMETRY_CLASSES[kind]

        if "coordinates" not in obj:
            raise MissingMemberError(path=path, member="coordinates")

        coordinates = self._coordinates(
            obj["coordinates"],
            kind=kind,
            expected_depth=cls.depth,
            depth=cls.depth,
            path=f"{path}.coordinates",
        )

        return cls(
            coordinates=coordinates,
            bbox=self._bbox(obj, path),
            foreign_members=self._foreign_members(obj, _GEOMETRY_MEMBERS, path, depth),
        )

    def _geometry_collection(
        self, obj: Mapping[str, Any], path: str, depth: int
    ) -> GeometryCollection:
        items = self._array(obj, "geometries", path)
        geometries = [
            cast(
                Geometry,
                self.document(item, GEOMETRY_TYPES, f"{path}.geometries[{i}]", depth + 1),
            )
            for i, item in enumerate(items)
        ]
        return GeometryCollection(
            geometries=tuple(geometries),
            bbox=self._bbox(obj, path),
            foreign_members=self._foreign_members(obj, _GEOMETRY_COLLECTION_MEMBERS, path, depth),
        )

    def _feature(self, obj: Mapping[str, Any], path: str, depth: int) -> Feature:
        geometry: Geometry | None | Absent = ABSENT
        if "geometry" in obj and obj["geometry"] is None:
            geometry = None
        elif "geometry" in obj:
            geometry = cast(
                Geometry,
                self.document(obj["geometry"], GEOMETRY_TYPES, f"{path}.geometry", depth + 1),
            )

        properties: dict[str, Any] | None | Absent = ABSENT
        if "properties" in obj:
            value = obj["properties"]
            if value is None:
                properties = None
            elif isinstance(value, Mapping):
                self._json_value(value, f"{path}.properties", depth + 1)
                properties = dict(value)
            else:
                raise InvalidPropertiesError(path=f"{path}.properties", found=_json_type(value))

        return Feature(
            geometry=geometry,
            properties=properties,
            id=self._id(obj, path),
            bbox=self._bbox(obj, path),
            foreign_members=self._foreign_members(obj, _FEATURE_MEMBERS, path, depth),
        )

    def _feature_collection(
        self, obj: Mapping[str, Any], path: str, depth: int
    ) -> FeatureCollection:
        items = self._array(obj, "features", path)
        features = [
            cast(Feature, self.document(item, ("Feature",), f"{path}.features[{i}]", depth + 1))
            for i, item in enumerate(items)
        ]
        return FeatureCollection(
            features=tuple(features),
            bbox=self._bbox(obj, path),
            foreign_members=self._foreign_members(obj, _FEATURE_COLLECTION_MEMBERS, path, depth),
        )

    def _array(self, obj: Mapping[str, Any], member: str, path: str) -> list | tuple:
        if member not in obj:
            raise MissingMemberError(path=path, member=member)
        value = obj[member]
        if not isinstance(value, list | tuple):
            raise ExpectedArrayError(
                path=f"{path}.{member}", member=member, found=_json_type(value)
            )
        return value

    def _id(self, obj: Mapping[str, Any], path: str) -> str | int | float | None:
        if "id" not in obj:
            return None
        value = obj["id"]
        if isinstance(value, str):
            return value
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise InvalidFeatureIdError(path=f"{path}.id", value=value)
        if isinstance(value, float) and not math.isfinite(value):
            raise InvalidFeatureIdError(path=f"{path}.id", value=value)
        return value

    def _bbox(self, obj: Mapping[str, Any], path: str) -> Bbox | None:
        if "bbox" not in obj:
            return None

        value = obj["bbox"]
        path = f"{path}.bbox"

        if not isinstance(value, list | tuple):
            raise BboxError(path=path, cause=BboxErrorCause.EXPECTED_ARRAY, value=value)

        for i, item in enumerate(value):
            if isinstance(item, bool) or not isinstance(item, int | float):
                raise BboxError(path=f"{path}[{i}]", cause=BboxErrorCause.NON_NUMERIC, value=item)

        bbox = tuple(self._number(item, f"{path}[{i}]") for i, item in enumerate(value))

        if len(bbox) % 2 != 0:
            raise BboxError(path=path, cause=BboxErrorCause.ODD_LENGTH, value=value)
        if len(bbox) < 4:
            raise BboxError(path=path, cause=BboxErrorCause.TOO_SHORT, value=value)

        return bbox

    def _coordinates(
        self,
        value: Any,
        *,
        kind: str,
        expected_depth: int,
        depth: int,
        path: str,
    ) -> Any:
        """
        Convert coordinates that are expected to be nested ``depth`` arrays deep.

        ``expected_depth`` is the total depth for the geometry ``kind``, used
        only for error reporting.
        """
        if not isinstance(value, list | tuple):
            raise CoordinateDepthError(
                path=path, kind=kind, expected_depth=expected_depth, found=_json_type(value)
            )

        if depth == 1:
            return self._position(value, kind=kind, expected_depth=expected_depth, path=path)

        return tuple(
            self._coordinates(
                item,
                kind=kind,
                expected_depth=expected_depth,
                depth=depth - 1,
                path=f"{path}[{i}]",
            )
            for i, item in enumerate(value)
        )

    def _position(
        self,
        value: list | tuple,
        *,
        kind: str,
        expected_depth: int,
        path: str,
    ) -> Position:
        for i, item in enumerate(value):
            if isinstance(item, list | tuple):
                raise CoordinateDepthError(
                    path=f"{path}[{i}]", kind=kind, expected_depth=expected_depth, found="array"
                )

        position = tuple(self._number(item, f"{path}[{i}]") for i, item in enumerate(value))

        if len(position) < 2:
            raise ShortPositionError(path=path, length=len(position))

        return position

    def _number(self, value: Any, path: str) -> float:
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise NumericConversionError(path=path, value=value)
        try:
            number = float(value)
        except OverflowError as err:
            raise NumericConversionError(path=path, value=value) from err
        if not math.isfinite(number):
            raise NumericConversionError(path=path, value=value)
        return number

    def _foreign_members(
        self, obj: Mapping[str, Any], reserved: frozenset[str], path: str, depth: int
    ) -> dict[str, Any]:
        members: dict[str, Any] = {}
        for key, value in obj.items():
            if key in reserved:
                continue
            if not isinstance(key, str):
                raise NonJsonValueError(path=path, value=key)
            self._json_value(value, f"{path}.{key}", depth + 1)
            members[key] = value
        return members

    def _json_value(self, value: Any, path: str, depth: int) -> None:
        """
        Check that a property or foreign member is made up of JSON values only.

        Objects and arrays nested in these values count towards ``max_depth``.
        """
        match value:
            case None | bool() | str() | int():
                pass
            case float():
                if not math.isfinite(value):
                    raise NumericConversionError(path=path, value=value)
            case Mapping():
                if depth > self.max_depth:
                    raise NestingTooDeepError(path=path, max_depth=self.max_depth)
                for key, item in value.items():
                    if not isinstance(key, str):
                        raise NonJsonValueError(path=path, value=key)
                    self._json_value(item, f"{path}.{key}", depth + 1)
            case list() | tuple():
                if depth > self.max_depth:
                    raise NestingTooDeepError(path=path, max_depth=self.max_depth)
                for i, item in enumerate(value):
                    self._json_value(item, f"{path}[{i}]", depth + 1)
            case _:
                raise NonJsonValueError(path=path, value=value)


def _json_type(value: Any) -> str:
    """Name the JSON type of a value, for error messages."""
    match value:
        case None:
            return "null"
        case bool():
            return "boolean"
        case int() | float():
            return "number"
        case str():
            return "string"
        case list() | tuple():
            return "array"
        case Mapping():
            return "object"
        case _:
            return type(value).__name__
