"""Monitoring Lab API: product endpoints with response caching and telemetry."""

__version__ = "1.0.0"
