"""Immutable element tree snapshots, their text rendering and id virtualization."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, List, Optional, Tuple

# Virtual ids shown to the model are spaced by this factor, so that any id
# which is not a multiple of it is known to be invented.
VIRTUAL_ID_FACTOR = 3


@dataclass(frozen=True)
class Node:
    """A node in the element tree.

    ``selector`` is the interface-specific handle for the element and is never
    shown to the model. ``state`` holds things like the current contents of an
    input.

    Nodes compare by value but are not hashable, since ``properties`` is a
    dict.
    """
    __hash__ = None  # type: ignore[assignment]

    selector: Hashable
    name: Optional[str] = None
    description: Optional[str] = None
    role: Optional[str] = None
    state: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)
    children: Tuple["Node", ...] = ()

    def to_text(self, positions: Dict[Any, int], indent_level: int = 0) -> str:
        """Render this node (and its children) for model consumption."""
        if self.selector not in positions:
            raise ValueError(f"selector {self.selector!r} is missing from the tree's selector list")
        vid = positions[self.selector] * VIRTUAL_ID_FACTOR
        name = self.name if self.name is not None else "<null>"
        line = "\t" * indent_level + f'- [{vid}] "{name}"'
        if self.role is not None:
            line += f" ({self.role})"
        if self.description is not None:
            line += f" ({self.description})"
        if self.properties:
            line += " {" + ", ".join(f"{k}: {v}" for k, v in self.properties.items()) + "}"
        if self.state is not None:
            line += f" with state {self.state}"

        lines = [line]
        for child in self.children:
            lines.append(child.to_text(positions, indent_level + 1))
        return "\n".join(lines)


@dataclass(frozen=True)
class Tree:
    """One snapshot of an interface's element tree.

    ``selectors`` lists every selector in the tree in discovery order; it is
    the basis of id virtualization, so virtual ids are only meaningful within
    the snapshot that produced them.
    """
    roots: Tuple[Node, ...] = ()
    selectors: Tuple[Hashable, ...] = ()

    def _positions(self) -> Dict[Any, int]:
        positions: Dict[Any, int] = {}
        for idx, selector in enumerate(self.selectors):
            positions.setdefault(selector, idx)
        return positions

    def virtual_id(self, selector: Hashable) -> Optional[int]:
        idx = self._positions().get(selector)
        return None if idx is None else idx * VIRTUAL_ID_FACTOR

    def resolve(self, virtual_id: int) -> Optional[Hashable]:
        """Return the selector behind ``virtual_id``, or None if it is invented."""
        if virtual_id < 0 or virtual_id % VIRTUAL_ID_FACTOR != 0:
            return None
        idx = virtual_id // VIRTUAL_ID_FACTOR
        if idx >= len(self.selectors):
            return None
        return self.selectors[idx]

    def id_map(self) -> Dict[int, Hashable]:
        return {vid: self.selectors[vid // VIRTUAL_ID_FACTOR]
                for vid in range(0, len(self.selectors) * VIRTUAL_ID_FACTOR, VIRTUAL_ID_FACTOR)}

    def to_text(self) -> str:
        positions = self._positions()
        lines: List[str] = [root.to_text(positions) for root in self.roots]
        return "\n".join(lines)
