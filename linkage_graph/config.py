"""Keyed value store shared by every segment during a resolution run."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, TypeVar

from .types import NAMESPACES, MissingValueError, Point, Reference

K = TypeVar("K")
V = TypeVar("V")


def get_required(mapping: Mapping[K, V], key: K) -> V:
    """Return ``mapping[key]`` or raise :class:`MissingValueError`."""

    value = mapping.get(key)
    if value is None:
        raise MissingValueError(key)
    return value


@dataclass
class Config:
    """Points, lengths and angles known so far, keyed by reference."""

    points: Dict[Reference, Point] = field(default_factory=dict)
    lengths: Dict[Reference, float] = field(default_factory=dict)
    angles: Dict[Reference, float] = field(default_factory=dict)

    def _table(self, namespace: str) -> Dict[Reference, object]:
        if namespace not in NAMESPACES:
            raise ValueError(f"unknown namespace {namespace!r}; expected one of {NAMESPACES}")
        return getattr(self, namespace)

    def get(self, namespace: str, ref: Reference) -> Optional[object]:
        return self._table(namespace).get(ref)

    def set(self, namespace: str, ref: Reference, value: object) -> None:
        self._table(namespace)[ref] = value

    def has(self, namespace: str, ref: Reference) -> bool:
        return self._table(namespace).get(ref) is not None

    def require(self, namespace: str, ref: Reference) -> object:
        value = self._table(namespace).get(ref)
        if value is None:
            raise MissingValueError(ref, namespace)
        return value

    def point(self, ref: Reference) -> Point:
        return self.require("points", ref)  # type: ignore[return-value]

    def length(self, ref: Reference) -> float:
        return float(self.require("lengths", ref))  # type: ignore[arg-type]

    def angle(self, ref: Reference) -> float:
        return float(self.require("angles", ref))  # type: ignore[arg-type]


__all__ = ["Config", "get_required"]
