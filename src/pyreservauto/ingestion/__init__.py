"""Ingestion helpers for normalizing remote payloads."""

from pyreservauto.ingestion.normalize import finite_float, safe_float, safe_str, strip_unit

__all__ = ["finite_float", "safe_float", "safe_str", "strip_unit"]
