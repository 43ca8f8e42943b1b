"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, decoratex.toml only contains
overrides. An empty (or absent) file is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from decoratex.domain.registry import RedefinitionPolicy

# --- decoratex.toml sections ---


class LoggingConfig(BaseModel):
    """[logging] section.

    ``json`` in TOML maps to ``json_lines`` (``json`` is taken by pydantic).
    """

    model_config = {"frozen": True, "populate_by_name": True}

    verbose: bool = False
    json_lines: bool = Field(default=False, alias="json")


class RegistryConfig(BaseModel):
    """[registry] section.

    ``redefinition`` is the default policy for models declared after
    :func:`decoratex.configure` runs.
    """

    model_config = {"frozen": True}

    redefinition: RedefinitionPolicy = RedefinitionPolicy.MOVE_TO_END


class TelemetryConfig(BaseModel):
    """[telemetry] section."""

    model_config = {"frozen": True}

    enabled: bool = False
