"""Helpers shared across the pet store services."""

from .db import ConnectionDescriptor, DriverKind, resolve

__all__ = ["ConnectionDescriptor", "DriverKind", "resolve"]
