"""Immutable warning accumulator passed between optimizer stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable


@dataclass(frozen=True)
class Diagnostics:
    """Ordered, immutable collection of non-fatal warnings.

    Each stage (strip generation, packing, orchestration) returns its own
    Diagnostics and callers combine them with ``merge``. Nothing is mutated in
    place.

    Attributes:
        warnings: Warning messages in the order they were raised.
    """

    warnings: tuple[str, ...] = ()

    @classmethod
    def of(cls, *messages: str) -> Diagnostics:
        return cls(warnings=tuple(messages))

    def with_warning(self, message: str) -> Diagnostics:
        """Return a copy with one more warning appended."""
        return Diagnostics(warnings=self.warnings + (message,))

    def merge(self, *others: Diagnostics) -> Diagnostics:
        """Return a copy with the warnings of ``others`` appended in order."""
        combined = self.warnings
        for other in others:
            combined = combined + other.warnings
        return Diagnostics(warnings=combined)

    def prefixed(self, prefix: str) -> Diagnostics:
        """Return a copy with every warning prefixed by ``[prefix]``."""
        return Diagnostics(warnings=tuple(f"[{prefix}] {w}" for w in self.warnings))

    @classmethod
    def combine(cls, items: Iterable[Diagnostics]) -> Diagnostics:
        return cls().merge(*items)

    def __bool__(self) -> bool:
        return bool(self.warnings)

    def __len__(self) -> int:
        return len(self.warnings)
