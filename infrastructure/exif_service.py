"""EXIF metadata extraction for the current photo.

Reads GPS position, GPS image direction and the digitized timestamp with
Pillow (HEIC through pillow-heif when installed). Extraction is best-effort
and never raises: a missing or malformed tag simply leaves the matching field
empty.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import math
from typing import Any

from PIL import Image
from loguru import logger

from core.models import Coordinate, PhotoMetadata

try:  # pragma: no cover - optional dependency
    from pillow_heif import register_heif_opener  # type: ignore

    register_heif_opener()
    PIL_HEIF_AVAILABLE = True
except ImportError:  # pragma: no cover - optional dependency
    PIL_HEIF_AVAILABLE = False

# IFD pointers
EXIF_IFD = 0x8769
GPS_IFD = 0x8825

# GPS IFD tags
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4
GPS_IMG_DIRECTION = 17

# Exif IFD tags
DATETIME_DIGITIZED = 0x9004


def _clean_str(value: Any) -> str:
    """Decode bytes and strip NUL padding from an EXIF ASCII value."""
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    return str(value).strip().strip("\x00").strip()


def _to_float(value: Any) -> float | None:
    """Convert an EXIF number or rational to float; None if unusable."""
    try:
        if isinstance(value, Sequence) and len(value) == 2 and not isinstance(value, str):
            # (numerator, denominator) pairs from older writers
            num, den = value
            result = float(num) / float(den)
        else:
            result = float(value)
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def to_decimal_degrees(value: Any) -> float | None:
    """Convert an EXIF coordinate to decimal degrees.

    Accepts a (degrees, minutes, seconds) triple or a single decimal value.
    """
    if isinstance(value, (str, bytes)):
        return None
    if isinstance(value, Sequence):
        parts = [_to_float(v) for v in value]
        if not parts or any(p is None for p in parts):
            return None
        degrees = parts[0] or 0.0
        minutes = parts[1] if len(parts) > 1 else 0.0
        seconds = parts[2] if len(parts) > 2 else 0.0
        return degrees + (minutes or 0.0) / 60.0 + (seconds or 0.0) / 3600.0
    return _to_float(value)


def coordinate_from_gps(gps: Mapping[int, Any]) -> Coordinate | None:
    """Build a signed coordinate; all four GPS position tags are required."""
    lat_val = gps.get(GPS_LATITUDE)
    lat_ref = gps.get(GPS_LATITUDE_REF)
    lon_val = gps.get(GPS_LONGITUDE)
    lon_ref = gps.get(GPS_LONGITUDE_REF)
    if lat_val is None or lat_ref is None or lon_val is None or lon_ref is None:
        return None

    lat = to_decimal_degrees(lat_val)
    lon = to_decimal_degrees(lon_val)
    if lat is None or lon is None:
        return None
    if _clean_str(lat_ref).upper() == "S":
        lat = -lat
    if _clean_str(lon_ref).upper() == "W":
        lon = -lon
    return Coordinate(latitude=lat, longitude=lon)


def metadata_from_exif(exif: Any) -> PhotoMetadata:
    """Build `PhotoMetadata` from a Pillow `Image.Exif`-like object.

    `exif` must provide `get(tag)` and `get_ifd(pointer)`.
    """
    gps: Mapping[int, Any] = exif.get_ifd(GPS_IFD) or {}
    coordinate = coordinate_from_gps(gps)

    direction = None
    raw_direction = gps.get(GPS_IMG_DIRECTION)
    if raw_direction is not None:
        direction = _to_float(raw_direction)

    datetime = ""
    exif_ifd: Mapping[int, Any] = exif.get_ifd(EXIF_IFD) or {}
    raw_dt = exif_ifd.get(DATETIME_DIGITIZED)
    if raw_dt is not None:
        datetime = _clean_str(raw_dt)

    return PhotoMetadata(coordinate=coordinate, direction=direction, datetime=datetime)


class ExifMetadataExtractor:
    """Extract location, heading and digitized time from image files."""

    def extract(self, photo_path: str) -> PhotoMetadata:
        """Return metadata for `photo_path`; empty metadata on any failure."""
        try:
            with Image.open(photo_path) as im:
                exif = im.getexif()
                if not exif:
                    return PhotoMetadata()
                return metadata_from_exif(exif)
        except (
            OSError,
            ValueError,
            TypeError,
            KeyError,
            AttributeError,
            SyntaxError,
            Image.DecompressionBombError,
        ) as ex:
            logger.debug("EXIF read failed for {}: {}", photo_path, ex)
            return PhotoMetadata()
