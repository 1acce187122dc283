from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from ..config import Settings
from .contracts import DirectionsProvider, GeocodeProvider
from .fake_providers import FakeDirectionsProvider, FakeGeocodeProvider
from .real_providers import MapboxDirectionsProvider, MapboxGeocodeProvider


@dataclass
class ProviderSet:
    geocode: GeocodeProvider
    directions: DirectionsProvider


def _build_prod(settings: Settings) -> ProviderSet:
    return ProviderSet(
        geocode=MapboxGeocodeProvider(settings.mapbox_access_token, timeout=settings.http_timeout_s),
        directions=MapboxDirectionsProvider(settings.mapbox_access_token, timeout=settings.http_timeout_s),
    )


def _build_fake() -> ProviderSet:
    return ProviderSet(
        geocode=FakeGeocodeProvider(),
        directions=FakeDirectionsProvider(),
    )


_provider_cache: Optional[ProviderSet] = None


def load_providers(mode: Optional[str] = None) -> ProviderSet:
    global _provider_cache
    active_mode = (mode or os.environ.get("USERLOCATION_MODE", "prod")).lower()
    if _provider_cache and mode is None:
        return _provider_cache
    if active_mode in {"demo", "test"}:
        _provider_cache = _build_fake()
    else:
        _provider_cache = _build_prod(Settings.from_env())
    return _provider_cache


def get_providers() -> ProviderSet:
    return load_providers()


def reload_providers(mode: Optional[str] = None) -> ProviderSet:
    global _provider_cache
    _provider_cache = None
    return load_providers(mode)
