"""Utility helpers for gitvault."""

from __future__ import annotations

from gitvault.utils.atomic import atomic_write_json, atomic_write_text
from gitvault.utils.secrets import scrub_secrets

__all__ = [
    "atomic_write_json",
    "atomic_write_text",
    "scrub_secrets",
]
