"""Rebuild a nested, filtered element tree from flat records with parent references."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Hashable, Iterable, List, Optional

from .errors import TreeReconstitutionTimeout
from .tree import Node, Tree

# Cap on passes over the unresolved records; also stops parent cycles.
MAX_ITERATIONS = 50


@dataclass(frozen=True)
class NodePayload:
    selector: Hashable
    name: Optional[str] = None
    description: Optional[str] = None
    role: Optional[str] = None
    state: Optional[str] = None
    properties: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TreeRecord:
    """A flat record as reported by a platform.

    ``remove`` is decided by the platform's relevance rules; removed records
    are spliced out and their children are attached to the nearest kept
    ancestor (or the top level).
    """
    id: str
    parent_id: Optional[str]
    remove: bool
    node: NodePayload


@dataclass
class _Draft:
    payload: NodePayload
    children: List["_Draft"] = field(default_factory=list)

    def freeze(self) -> Node:
        p = self.payload
        return Node(
            selector=p.selector,
            name=p.name,
            description=p.description,
            role=p.role,
            state=p.state,
            properties=dict(p.properties),
            children=tuple(child.freeze() for child in self.children),
        )


def _children_at(roots: List[_Draft], location: List[int]) -> List[_Draft]:
    """Return the child list addressed by ``location`` (the roots for an empty path)."""
    children = roots
    for idx in location:
        children = children[idx].children
    return children


def reconstitute_tree(records: Iterable[TreeRecord], *, max_iterations: int = MAX_ITERATIONS) -> Tree:
    pending: List[Optional[TreeRecord]] = list(records)
    roots: List[_Draft] = []
    selectors: List[Hashable] = []
    # record id -> path of child indexes where that record's children go
    locations: Dict[str, List[int]] = {}

    iterations = 0
    while any(r is not None for r in pending) and iterations < max_iterations:
        for i, record in enumerate(pending):
            if record is None:
                continue
            if record.parent_id is None:
                parent_loc: List[int] = []
            elif record.parent_id in locations:
                parent_loc = locations[record.parent_id]
            else:
                # parent not placed yet, try again next pass
                continue

            if record.remove:
                own_loc = parent_loc
            else:
                siblings = _children_at(roots, parent_loc)
                siblings.append(_Draft(record.node))
                selectors.append(record.node.selector)
                own_loc = parent_loc + [len(siblings) - 1]
            locations[record.id] = own_loc
            pending[i] = None
        iterations += 1

    if any(r is not None for r in pending):
        raise TreeReconstitutionTimeout(iterations=max_iterations)

    return Tree(roots=tuple(d.freeze() for d in roots), selectors=tuple(selectors))
