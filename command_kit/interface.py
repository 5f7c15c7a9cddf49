"""Capability contracts the engine consumes.

These are structural protocols: a variant only has to provide the methods,
it does not subclass anything. Failures are reported by raising.
"""
from __future__ import annotations

from typing import Hashable, Optional, Protocol

from .action_parser import ActionGroup
from .tree import Tree


class Interface(Protocol):
    """A UI substrate exposing a tree of actionable elements."""

    def click(self, selector: Hashable) -> None:
        ...

    def type_text(self, selector: Hashable, text: str) -> None:
        """Type ``text`` into the element; focusing it is the variant's job."""
        ...

    def compute_tree(self) -> Tree:
        """Return an already filtered tree; should be as fast as possible."""
        ...


class Model(Protocol):
    """A single-turn language model; no memory between calls."""

    def prompt(self, text: str) -> str:
        ...


class TripRecorder(Protocol):
    def record_trip(
        self,
        *,
        command: str,
        trip: int,
        prompt: str,
        model_output: Optional[str],
        group: Optional[ActionGroup],
        error: Optional[str],
    ) -> None:
        ...
