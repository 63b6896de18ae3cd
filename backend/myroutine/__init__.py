"""Expose the application factory at package level.

Provide convenient access to :func:`myroutine.factory.create_app` so callers
(gunicorn, ``flask --app``) can use ``myroutine:create_app()`` directly.
"""

from __future__ import annotations

from .factory import create_app

__all__ = ["create_app"]
