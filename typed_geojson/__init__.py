"""
Typed GeoJSON objects, with a strict codec and a bridge to Shapely.

```python
from typed_geojson import loads, dumps
from typed_geojson.bridge import to_shapely

feature = loads('{"type": "Feature", "geometry": {"type": "Point", "coordinates": [1, 2]}}')
point = to_shapely(feature.geometry)
print(dumps(feature))
```

References:
    - https://tools.ietf.org/html/rfc7946
"""

import importlib.metadata


__version__: str = importlib.metadata.version("typed-geojson")

# we add this to all modules for pdoc;
# see https://pdoc.dev/docs/pdoc.html#use-numpydoc-or-google-docstrings
__docformat__ = "google"

# we also use __all__ in all modules for pdoc; this lets us control the order
__all__ = (
    "__version__",
    "ABSENT",
    "Feature",
    "FeatureCollection",
    "GeoJson",
    "GeoJsonError",
    "Geometry",
    "GeometryCollection",
    "LineString",
    "MultiLineString",
    "MultiPoint",
    "MultiPolygon",
    "Point",
    "Polygon",
    "dumps",
    "loads",
    "parse",
    "serialize",
    "bridge",
    "codec",
    "error",
    "feature",
    "geometry",
    "spatial",
)

from .codec import dumps, loads, parse, serialize
from .error import GeoJsonError
from .feature import Feature, FeatureCollection, GeoJson
from .geometry import (
    Geometry,
    GeometryCollection,
    LineString,
    MultiLineString,
    MultiPoint,
    MultiPolygon,
    Point,
    Polygon,
)
from .spatial import ABSENT
