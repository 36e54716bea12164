"""Utility functions for logging request shapes without their payloads."""

from typing import Any


def preview(text: str, limit: int = 50) -> str:
    """Return the first ``limit`` characters, marking truncation."""
    return text if len(text) <= limit else f"{text[:limit]}..."


def describe_shape(payload: Any) -> str:
    """Describe the shape of a JSON payload (type and keys, never values)."""
    if isinstance(payload, dict):
        return f"object keys={sorted(str(k) for k in payload)}"
    if isinstance(payload, list):
        return f"array len={len(payload)}"
    if isinstance(payload, str):
        return f"string len={len(payload)}"
    return type(payload).__name__
