"""Service layer: the decoration engine and its telemetry."""
