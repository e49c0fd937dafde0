"""Serialization helpers for core models."""

from .serialization import serialize_profile, deserialize_profile

__all__ = ["serialize_profile", "deserialize_profile"]
