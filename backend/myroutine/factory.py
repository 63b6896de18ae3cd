"""Application factory wiring Flask extensions, collaborators and blueprints."""

from __future__ import annotations

from flask import Flask

from myroutine.core.config import BaseConfig, get_config
from myroutine.core.logger import configure_logging, init_app as init_logging


def create_app(
    config: str | type[BaseConfig] | object | None = None,
    *,
    instance_relative_config: bool = True,
    instance_config_filename: str = "config.py",
) -> Flask:
    """Build and configure the Flask application.

    Parameters
    ----------
    config:
        Configuration object or import path. Defaults to the class selected by
        ``APP_ENV`` (see :func:`myroutine.core.config.get_config`).
    instance_relative_config:
        Load an optional ``instance/config.py`` on top of ``config``.
    instance_config_filename:
        File name looked up in the instance folder.
    """

    app = Flask(__name__, instance_relative_config=instance_relative_config)

    app.config.from_object(get_config() if config is None else config)
    if instance_relative_config and instance_config_filename:
        app.config.from_pyfile(instance_config_filename, silent=True)

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    from myroutine.core import proxy

    proxy.init_app(app)

    from myroutine.core import extensions

    extensions.init_app(app)

    init_logging(app)

    from myroutine.core import cors

    cors.init_app(app)

    from myroutine.api import init_app as init_api

    init_api(app)

    from myroutine.core import errors

    errors.init_app(app)

    from myroutine import cli as app_cli

    app_cli.init_app(app)

    return app
