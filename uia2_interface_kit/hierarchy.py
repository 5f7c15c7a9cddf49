"""Flatten a uiautomator hierarchy dump into tree records."""
from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from command_kit.reconstitute import NodePayload, TreeRecord

_BOUNDS_RE = re.compile(r"\[(-?\d+),(-?\d+)\]\[(-?\d+),(-?\d+)\]")

# A node is worth showing the model only if it can be acted upon.
_ACTIONABLE_FLAGS = ("clickable", "long-clickable", "checkable", "focusable")
# Boolean attributes passed through as properties when set.
_STATE_FLAGS = ("checked", "selected", "focused", "password", "scrollable")


@dataclass(frozen=True)
class ElementSelector:
    """Address of an element within one hierarchy dump."""
    path: str
    bounds: Tuple[int, int, int, int]

    @property
    def center(self) -> Tuple[int, int]:
        left, top, right, bottom = self.bounds
        return (left + right) // 2, (top + bottom) // 2


def parse_bounds(raw: Optional[str]) -> Tuple[int, int, int, int]:
    """'[0,63][1080,210]' -> (0, 63, 1080, 210); missing/garbled -> zeros."""
    m = _BOUNDS_RE.search(raw or "")
    if not m:
        return (0, 0, 0, 0)
    return tuple(int(g) for g in m.groups())  # type: ignore[return-value]


def _flag(elem: ET.Element, name: str) -> bool:
    return elem.get(name, "false").lower() == "true"


def _payload(elem: ET.Element, path: str) -> NodePayload:
    text = elem.get("text") or None
    desc = elem.get("content-desc") or None
    cls = elem.get("class") or ""
    editable = "EditText" in cls

    properties: Dict[str, str] = {}
    resource_id = elem.get("resource-id")
    if resource_id:
        properties["id"] = resource_id.split("/")[-1]
    for flag in _STATE_FLAGS:
        if _flag(elem, flag):
            properties[flag] = "true"

    if editable:
        # Typed contents are state, not a label.
        name, state = desc, text
        description = None
    else:
        name, state = (text or desc), None
        description = desc if text and desc and desc != text else None

    return NodePayload(
        selector=ElementSelector(path=path, bounds=parse_bounds(elem.get("bounds"))),
        name=name,
        description=description,
        role=cls.rsplit(".", 1)[-1] or None,
        state=state,
        properties=properties,
    )


def parse_hierarchy(xml: str) -> List[TreeRecord]:
    """Return one record per <node>, in document order, with parent references."""
    root = ET.fromstring(xml)
    records: List[TreeRecord] = []

    def walk(elem: ET.Element, parent_path: Optional[str]) -> None:
        for idx, child in enumerate(c for c in elem if c.tag == "node"):
            path = f"{parent_path}.{idx}" if parent_path is not None else str(idx)
            records.append(
                TreeRecord(
                    id=path,
                    parent_id=parent_path,
                    remove=not any(_flag(child, f) for f in _ACTIONABLE_FLAGS),
                    node=_payload(child, path),
                )
            )
            walk(child, path)

    walk(root, None)
    return records
