"""Configuration for resolution runs."""

from __future__ import annotations

import copy
from dataclasses import dataclass
from typing import Optional


@dataclass
class ForwardOptions:
    """Knobs accepted by :func:`linkage_graph.engine.forward_linkage`.

    ``check_geometry`` rejects triangles the link lengths cannot close instead
    of letting NaN coordinates propagate. ``max_sweeps`` caps the number of
    driver sweeps; ``None`` means ``len(segments) + 1``.
    """

    check_geometry: bool = True
    validate: bool = True
    max_sweeps: Optional[int] = None


_FORWARD_OPTIONS = ForwardOptions()


def get_forward_options() -> ForwardOptions:
    return copy.deepcopy(_FORWARD_OPTIONS)


def set_forward_options(options: ForwardOptions) -> None:
    global _FORWARD_OPTIONS
    _FORWARD_OPTIONS = copy.deepcopy(options)


def resolve_options(options: Optional[ForwardOptions]) -> ForwardOptions:
    return options if options is not None else get_forward_options()


__all__ = [
    "ForwardOptions",
    "get_forward_options",
    "set_forward_options",
    "resolve_options",
]
