"""Builds the photo session from settings, without touching Qt."""

from __future__ import annotations

from app.viewmodels.session_vm import PhotoSessionVM
from core.models import DEFAULT_MAP_CENTER, DEFAULT_MAP_SPAN, Coordinate, MapSpan
from core.services.text_history import DEFAULT_HISTORY_LIMIT, TextHistory
from infrastructure.annotation_repository import SidecarAnnotationRepository
from infrastructure.exif_service import ExifMetadataExtractor
from infrastructure.settings import JsonSettings


def build_session(settings: JsonSettings) -> PhotoSessionVM:
    """Wire the session with its file-backed collaborators from `settings`."""
    lat, lon = settings.get_float_pair(
        "map.default_center", (DEFAULT_MAP_CENTER.latitude, DEFAULT_MAP_CENTER.longitude)
    )
    lat_delta, lon_delta = settings.get_float_pair(
        "map.default_span", (DEFAULT_MAP_SPAN.latitude_delta, DEFAULT_MAP_SPAN.longitude_delta)
    )
    return PhotoSessionVM(
        extractor=ExifMetadataExtractor(),
        store=SidecarAnnotationRepository(),
        history=TextHistory(settings.get_int("history.limit", DEFAULT_HISTORY_LIMIT)),
        default_center=Coordinate(latitude=lat, longitude=lon),
        default_span=MapSpan(latitude_delta=lat_delta, longitude_delta=lon_delta),
    )
