import logging
import os
from collections.abc import Mapping
from typing import Final


__docformat__ = "google"
__all__ = ("MAX_DEPTH",)


DEFAULT_MAX_DEPTH: Final[int] = 64

_logger = logging.getLogger(__name__)


def _max_depth(environ: Mapping[str, str]) -> int:
    value = environ.get("TYPED_GEOJSON_MAX_DEPTH")
    if value is None:
        return DEFAULT_MAX_DEPTH

    try:
        max_depth = int(value)
    except ValueError:
        max_depth = 0

    if max_depth < 1:
        _logger.warning(
            f"ignoring TYPED_GEOJSON_MAX_DEPTH={value!r}, expected an integer > 0,"
            f" using {DEFAULT_MAX_DEPTH} instead"
        )
        return DEFAULT_MAX_DEPTH

    return max_depth


MAX_DEPTH: Final[int] = _max_depth(os.environ)
