"""Exception types raised by pysysinfo."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pysysinfo.include import Category


class SysInfoError(Exception):
    """Base class for all pysysinfo errors."""


class EnumerationError(SysInfoError):
    """A process table or interface list could not be listed at all.

    The underlying exception is chained as ``__cause__``.
    """

    def __init__(self, category: Category, message: str) -> None:
        super().__init__(message)
        self.category = category


class SnapshotDecodeError(SysInfoError):
    """Serialized snapshot data could not be decoded."""
