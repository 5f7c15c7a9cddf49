# interface.py
from __future__ import annotations

import time
from typing import TYPE_CHECKING, Callable, Optional

from command_kit.reconstitute import reconstitute_tree
from command_kit.tree import Tree

from .hierarchy import ElementSelector, parse_hierarchy

if TYPE_CHECKING:
    from .device import DeviceAdapter

LogFn = Callable[[str], None]


class Uia2Interface:
    """
    Interface variant for Android devices driven by uiautomator2:
      compute_tree -> dump hierarchy -> flat records -> reconstitute_tree
      click        -> tap the centre of the element bounds
      type_text    -> tap to focus, then type through the device fallback chain
    With dry_run, actions are only logged.
    """
    def __init__(
        self,
        device: DeviceAdapter,
        *,
        dry_run: bool = True,
        settle_ms: int = 120,
        log_fn: Optional[LogFn] = print,
    ) -> None:
        self.device = device
        self.dry_run = dry_run
        self.settle_ms = max(0, int(settle_ms))
        self.log = log_fn

    def _settle(self) -> None:
        if self.settle_ms:
            time.sleep(self.settle_ms / 1000.0)

    def click(self, selector: ElementSelector) -> None:
        x, y = selector.center
        if self.dry_run:
            if self.log:
                self.log(f"[DRY-RUN] click {selector.path} at ({x}, {y})")
            return
        self.device.click(x, y)
        self._settle()

    def type_text(self, selector: ElementSelector, text: str) -> None:
        if self.dry_run:
            if self.log:
                self.log(f"[DRY-RUN] type {text!r} into {selector.path}")
            return
        x, y = selector.center
        self.device.click(x, y)
        self._settle()
        res = self.device.type_text(text)
        if not res.get("ok", False):
            raise RuntimeError(f"Typing into {selector.path} failed: {res.get('error', 'unknown error')}")
        self._settle()

    def compute_tree(self) -> Tree:
        return reconstitute_tree(parse_hierarchy(self.device.dump_hierarchy()))
