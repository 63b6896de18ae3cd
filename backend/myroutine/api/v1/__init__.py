"""API v1 blueprint package bundling versioned routes."""

from __future__ import annotations

from flask import Blueprint

API_VERSION = "v1"

# Import blueprints *only here* to keep imports localized and avoid cycles.
from .catalog import days_bp, muscle_groups_bp  # noqa: E402
from .exercises import bp as exercises_bp  # noqa: E402
from .health import bp as health_bp  # noqa: E402
from .photos import bp as photos_bp  # noqa: E402
from .routines import bp as routines_bp  # noqa: E402
from .sets import bp as sets_bp  # noqa: E402
from .users import bp as users_bp  # noqa: E402

# Each tuple: (blueprint, url_prefix_relative_to_version)
REGISTRY: list[tuple[Blueprint, str]] = [
    (health_bp, ""),  # -> /api/v1
    (users_bp, "/user"),  # -> /api/v1/user
    (exercises_bp, "/exercise"),
    (routines_bp, "/routine"),
    (sets_bp, "/set"),
    (photos_bp, "/photo"),
    (days_bp, "/day"),
    (muscle_groups_bp, "/muscle_group"),
]
