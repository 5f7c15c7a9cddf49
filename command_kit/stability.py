"""Wait for an interface's element tree to settle after a trip's actions."""
from __future__ import annotations

import time
from typing import Callable, Optional

from .errors import InterfaceError, NoTreeUpdate, TreeStabilisationTimeout
from .interface import Interface
from .tree import Tree

LogFn = Callable[[str], None]


class StabilityMonitor:
    """
    Polls the tree until it has changed at least once and then stayed the same
    for ``stability_threshold_ms``, giving up after ``stability_timeout_ms``.
    Durations become iteration counts (integer division by the poll interval),
    so time spent computing each tree is not counted.
    """

    def __init__(
        self,
        interface: Interface,
        *,
        poll_interval_ms: int,
        stability_threshold_ms: int,
        stability_timeout_ms: int,
        sleep_fn: Callable[[float], None] = time.sleep,
        log_fn: Optional[LogFn] = None,
    ) -> None:
        if poll_interval_ms <= 0:
            raise ValueError("poll_interval_ms must be positive")
        if stability_threshold_ms <= poll_interval_ms:
            raise ValueError("stability threshold must be greater than poll interval")
        if stability_timeout_ms <= poll_interval_ms:
            raise ValueError("stability timeout must be greater than poll interval")
        self.interface = interface
        self.poll_interval_ms = poll_interval_ms
        self.stability_threshold_ms = stability_threshold_ms
        self.stability_timeout_ms = stability_timeout_ms
        self._sleep = sleep_fn
        self.log = log_fn

    def _poll(self) -> Tree:
        try:
            return self.interface.compute_tree()
        except Exception as exc:
            raise InterfaceError(exc) from exc

    def wait_for_stable_tree(self, reference: Tree) -> Tree:
        """Return the settled tree, or raise if it never changed or never settled.

        A trip that ended at a waitpoint implies the interface should change;
        if it never does, failing is better than letting the model repeat the
        same actions.
        """
        iters_stable = self.stability_threshold_ms // self.poll_interval_ms
        iters_timeout = self.stability_timeout_ms // self.poll_interval_ms

        last_tree = reference
        change_recorded = False
        total_iters = 0
        stable_iters = 0
        while total_iters < iters_timeout and stable_iters < iters_stable:
            curr_tree = self._poll()
            if curr_tree != last_tree:
                change_recorded = True
                stable_iters = 0
            elif change_recorded:
                stable_iters += 1

            last_tree = curr_tree
            total_iters += 1
            self._sleep(self.poll_interval_ms / 1000.0)

        if not change_recorded:
            raise NoTreeUpdate(timeout_ms=self.stability_timeout_ms)
        if stable_iters < iters_stable:
            raise TreeStabilisationTimeout(timeout_ms=self.stability_timeout_ms)

        if self.log:
            self.log(f"    ...tree stable after {total_iters} polls")
        return last_tree
