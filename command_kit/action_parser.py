"""Parse the model's plain-text action plan into typed actions."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Sequence, Union

from .errors import (
    ActionsAfterFinish,
    MissingDescription,
    MissingId,
    MissingTextInType,
    NonIntegerId,
    TextInTypeNotSingleQuoted,
)

# ---------- data structures ----------
@dataclass(frozen=True)
class Click:
    id: int


@dataclass(frozen=True)
class Type:
    id: int
    text: str


Action = Union[Click, Type]


@dataclass
class ActionGroup:
    actions: List[Action] = field(default_factory=list)
    description: str = ""
    # Assume we're done unless the plan says to wait.
    complete: bool = True


# ---------- helpers ----------
_FENCE = "```"
_ID_RE = re.compile(r"[0-9]+")


def extract_fenced_lines(response: str) -> List[str]:
    """Return the lines strictly inside the first fenced block of ``response``.

    The opening fence may carry an info string (```` ```text ````); the closing
    fence must be bare. Everything outside the block is discarded.
    """
    lines: List[str] = []
    in_fence = False
    for line in response.splitlines():
        stripped = line.strip()
        if in_fence and stripped == _FENCE:
            break
        elif in_fence:
            lines.append(line)
        elif stripped.startswith(_FENCE):
            in_fence = True
    return lines


def _parse_id(ty: str, parts: List[str]) -> int:
    if len(parts) < 2:
        raise MissingId(ty)
    raw = parts[1]
    # Some models wrap ids in brackets, as they appear in the tree text.
    inner = raw[1:-1] if raw.startswith("[") and raw.endswith("]") else raw
    if not _ID_RE.fullmatch(inner):
        raise NonIntegerId(raw)
    return int(inner)


def _description(parts: List[str]) -> str:
    description = " ".join(parts[1:]).strip()
    if not description:
        raise MissingDescription()
    return description


# ---------- main parser ----------
def parse_action_lines(lines: Sequence[str]) -> ActionGroup:
    """
    Parse lines of the form:
      CLICK <id>
      FILL <id> '<text>'
      WAIT <description>
      FINISH <description>
    Unknown leading tokens are skipped. A WAIT only counts when the model
    wrote something after it; a trailing WAIT is ignored.
    """
    group = ActionGroup()

    for idx, line in enumerate(lines):
        has_more = idx + 1 < len(lines)
        parts = line.split(None, 2)
        if not parts:
            continue
        ty = parts[0]

        if ty == "CLICK":
            group.actions.append(Click(id=_parse_id(ty, parts)))

        elif ty == "FILL":
            action_id = _parse_id(ty, parts)
            if len(parts) < 3:
                raise MissingTextInType()
            text = parts[2]
            if len(text) < 2 or not (text.startswith("'") and text.endswith("'")):
                raise TextInTypeNotSingleQuoted(text)
            group.actions.append(Type(id=action_id, text=text[1:-1]))

        elif ty == "WAIT":
            # Whatever follows a waitpoint was written against a tree the model
            # hasn't seen yet; it is dropped and re-planned next trip.
            if has_more:
                group.description = _description(parts)
                group.complete = False
                break

        elif ty == "FINISH":
            group.description = _description(parts)
            group.complete = True
            if has_more:
                raise ActionsAfterFinish(lines[idx + 1])

    return group
