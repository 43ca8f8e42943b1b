"""Process-wide settings for decoratex.

Nothing here runs at import time: until :func:`configure` is called,
:func:`active_settings` returns code defaults without reading env vars
or files.
"""

from __future__ import annotations

import logging
from typing import Any

from decoratex.config.logging import configure_logging
from decoratex.config.settings import DecoratexSettings
from decoratex.services.telemetry import disable_telemetry, enable_telemetry

logger = logging.getLogger(__name__)

_DEFAULTS = DecoratexSettings.model_construct()
_active: DecoratexSettings | None = None


def configure(settings: DecoratexSettings | None = None, **overrides: Any) -> DecoratexSettings:
    """Apply *settings* (or freshly loaded ones) and make them active.

    Configures logging, switches telemetry for the current context, and
    sets the default redefinition policy for models declared afterwards.
    *overrides* are forwarded to :meth:`DecoratexSettings.load` when
    *settings* is None.
    """
    global _active

    if settings is None:
        settings = DecoratexSettings.load(**overrides)
    elif overrides:
        raise TypeError("pass either a settings object or overrides, not both")

    configure_logging(
        verbose=settings.logging.verbose,
        log_json=settings.logging.json_lines,
    )
    if settings.telemetry.enabled:
        enable_telemetry()
    else:
        disable_telemetry()

    _active = settings
    logger.debug("decoratex configured from %s", settings.config_path or "defaults")
    return settings


def active_settings() -> DecoratexSettings:
    """The settings last passed to :func:`configure`, or code defaults."""
    return _active if _active is not None else _DEFAULTS


def reset() -> None:
    """Forget configured settings (tests use this between cases)."""
    global _active
    _active = None
