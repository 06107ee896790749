"""Typed GeoJSON features and feature collections."""

import copy
import math
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeAlias

from typed_geojson.geometry import Geometry, GeometryBase
from typed_geojson.spatial import (
    ABSENT,
    Absent,
    Bbox,
    GeoJsonDict,
    Spatial,
    _bbox,
    _foreign_members,
    _is_array,
    _json_object,
)


__docformat__ = "google"
__all__ = (
    "Feature",
    "FeatureCollection",
    "FeatureId",
    "GeoJson",
)


FeatureId: TypeAlias = str | int | float
"""
A feature identifier is either a string or a number.

References:
    - https://tools.ietf.org/html/rfc7946#section-3.2
"""

_FEATURE_MEMBERS = frozenset({"type", "bbox", "geometry", "properties", "id"})
_FEATURE_COLLECTION_MEMBERS = frozenset({"type", "bbox", "features"})


@dataclass(frozen=True, kw_only=True, slots=True)
class Feature(Spatial):
    """
    A spatially bounded thing.

    The ``geometry`` and ``properties`` members of a feature may either be ``null``,
    or be left out of the GeoJSON object. Parsed features preserve this distinction
    by using ``ABSENT`` for missing members, which are left out again when serializing.
    Features constructed in code default to ``None``, which serializes to ``null``
    as the format requires.

    Attributes:
        geometry: The feature's geometry, ``None`` for an unlocated feature,
                  or ``ABSENT`` if the member is missing.
        properties: Any JSON object, ``None``, or ``ABSENT`` if the member is missing.
                    Note that an empty dictionary is distinct from ``None``.
                    The object is deep-copied, with tuples turned into lists.
        id: A string or number that identifies this feature, or ``None``.
        bbox: The bounding box of the feature, or ``None``.
        foreign_members: Any other members of the GeoJSON object, which are
                         not part of the format, but are preserved nonetheless.

    Raises:
        ValueError: if any of the fields cannot make up a valid feature

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.2
    """

    __hash__ = None  # type: ignore[assignment]

    geometry: Geometry | None | Absent = None
    properties: dict[str, Any] | None | Absent = None
    id: FeatureId | None = None
    bbox: Bbox | None = None
    foreign_members: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not (
            self.geometry is None
            or self.geometry is ABSENT
            or isinstance(self.geometry, GeometryBase)
        ):
            msg = f"'geometry' must be a geometry, None, or ABSENT, found {self.geometry!r}"
            raise ValueError(msg)

        if isinstance(self.properties, Mapping):
            properties = _json_object(self.properties, "properties")
            object.__setattr__(self, "properties", properties)
        elif not (self.properties is None or self.properties is ABSENT):
            msg = f"'properties' must be a mapping, None, or ABSENT, found {self.properties!r}"
            raise ValueError(msg)

        if not (self.id is None or _is_feature_id(self.id)):
            msg = f"'id' must be a string or a finite number, found {self.id!r}"
            raise ValueError(msg)

        object.__setattr__(self, "bbox", _bbox(self.bbox))
        object.__setattr__(
            self,
            "foreign_members",
            _foreign_members(self.foreign_members, _FEATURE_MEMBERS, "Feature"),
        )

    @property
    def type(self) -> str:
        """Always ``"Feature"``."""
        return "Feature"

    def prop(self, key: str, default: Any = None) -> Any:
        """
        Get the property value for the given key.

        Returns ``default`` if there is no ``key`` property.
        """
        if not self.properties:
            return default
        return self.properties.get(key, default)

    @property
    def geojson(self) -> GeoJsonDict:
        """A mapping of this feature, using the GeoJSON format."""
        obj: GeoJsonDict = {"type": "Feature"}

        if self.bbox is not None:
            obj["bbox"] = list(self.bbox)

        if self.geometry is not ABSENT:
            obj["geometry"] = self.geometry.geojson if self.geometry is not None else None

        if self.properties is not ABSENT:
            obj["properties"] = copy.deepcopy(self.properties)

        if self.id is not None:
            obj["id"] = self.id

        obj.update(copy.deepcopy(self.foreign_members))
        return obj


@dataclass(frozen=True, kw_only=True, slots=True)
class FeatureCollection(Spatial):
    """
    An ordered collection of features.

    Attributes:
        features: the member features, in order
        bbox: The bounding box of the collection, or ``None``.
        foreign_members: Any other members of the GeoJSON object, which are
                         not part of the format, but are preserved nonetheless.

    Raises:
        ValueError: if any of the fields cannot make up a valid feature collection

    References:
        - https://tools.ietf.org/html/rfc7946#section-3.3
    """

    __hash__ = None  # type: ignore[assignment]

    features: tuple[Feature, ...]
    bbox: Bbox | None = None
    foreign_members: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not _is_array(self.features):
            msg = f"'features' must be a sequence of features, found {self.features!r}"
            raise ValueError(msg)

        features = tuple(self.features)
        for feature in features:
            if not isinstance(feature, Feature):
                msg = f"'features' must only contain features, found {feature!r}"
                raise ValueError(msg)

        object.__setattr__(self, "features", features)
        object.__setattr__(self, "bbox", _bbox(self.bbox))
        foreign_members = _foreign_members(
            self.foreign_members, _FEATURE_COLLECTION_MEMBERS, "FeatureCollection"
        )
        object.__setattr__(self, "foreign_members", foreign_members)

    @property
    def type(self) -> str:
        """Always ``"FeatureCollection"``."""
        return "FeatureCollection"

    @property
    def geojson(self) -> GeoJsonDict:
        """A mapping of this collection, using the GeoJSON format."""
        obj: GeoJsonDict = {"type": "FeatureCollection"}

        if self.bbox is not None:
            obj["bbox"] = list(self.bbox)

        obj["features"] = [feature.geojson for feature in self.features]
        obj.update(copy.deepcopy(self.foreign_members))
        return obj

    def __iter__(self) -> Iterator[Feature]:
        return iter(self.features)

    def __len__(self) -> int:
        return len(self.features)


GeoJson: TypeAlias = Geometry | Feature | FeatureCollection
"""
A GeoJSON document.

References:
    - https://tools.ietf.org/html/rfc7946#section-2
"""


def _is_feature_id(value: Any) -> bool:
    if isinstance(value, str):
        return True
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    if isinstance(value, int):
        return True
    return math.isfinite(value)
