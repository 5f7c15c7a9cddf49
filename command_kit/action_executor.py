# action_executor.py
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Sequence

from .action_parser import Action, Click, Type
from .errors import IdNotFound, InterfaceError
from .interface import Interface
from .tree import Tree

LogFn = Callable[[str], None]


class ActionExecutor:
    """
    Turns parsed actions into interface calls:
      -> virtual id -> selector (through the tree of the current trip)
      -> click / type_text on the interface
    Stops at the first failure; nothing already executed is rolled back.
    """
    def __init__(self, interface: Interface, *, log_fn: Optional[LogFn] = print) -> None:
        self.interface = interface
        self.log = log_fn

    def _selector(self, tree: Tree, action_id: int):
        selector = tree.resolve(action_id)
        if selector is None:
            raise IdNotFound(action_id)
        return selector

    def execute_one(self, action: Action, tree: Tree) -> Dict[str, Any]:
        selector = self._selector(tree, action.id)
        try:
            if isinstance(action, Click):
                self.interface.click(selector)
                return {"ok": True, "name": "click", "detail": f"[{action.id}]"}
            elif isinstance(action, Type):
                self.interface.type_text(selector, action.text)
                return {"ok": True, "name": "type", "detail": f"[{action.id}] {action.text!r}"}
        except Exception as exc:
            raise InterfaceError(exc) from exc
        raise ValueError(f"unknown action: {action!r}")

    def execute(self, actions: Sequence[Action], tree: Tree) -> List[Dict[str, Any]]:
        results: List[Dict[str, Any]] = []
        for i, action in enumerate(actions, 1):
            res = self.execute_one(action, tree)
            res["index"] = i
            results.append(res)
            if self.log:
                self.log(f"[✓][{i}] {res['name']}: {res['detail']}")
        return results
