"""Execute natural-language commands against an interface, using a model as planner."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, List, Optional

from .action_executor import ActionExecutor
from .action_parser import ActionGroup, extract_fenced_lines, parse_action_lines
from .errors import CommandNotFinished, InterfaceError, ModelError
from .interface import Interface, Model, TripRecorder
from .prompts import PROMPT_TEMPLATE, render_prompt
from .stability import StabilityMonitor
from .tree import Tree

LogFn = Callable[[str], None]


@dataclass(frozen=True)
class ExecutorOpts:
    # Upper bound on prompts sent to the model for one command.
    max_round_trips: int = 3
    # Pause between tree polls; long enough for the interface to keep up.
    tree_poll_interval_ms: int = 50
    # How long the tree must stay unchanged (after a change) to count as stable.
    stability_threshold_ms: int = 250
    # How long to wait for stability before aborting the command midway.
    stability_timeout_ms: int = 10_000

    def __post_init__(self) -> None:
        if self.tree_poll_interval_ms <= 0:
            raise ValueError("tree_poll_interval_ms must be positive")
        if self.stability_threshold_ms <= self.tree_poll_interval_ms:
            raise ValueError("stability threshold must be greater than tree poll interval")
        if self.stability_timeout_ms <= self.tree_poll_interval_ms:
            raise ValueError("stability timeout must be greater than tree poll interval")


class Executor:
    """Runs one command at a time through bounded prompt -> plan -> act trips."""

    def __init__(
        self,
        interface: Interface,
        model: Model,
        opts: Optional[ExecutorOpts] = None,
        *,
        prompt_template: str = PROMPT_TEMPLATE,
        log_fn: Optional[LogFn] = print,
        recorder: Optional[TripRecorder] = None,
        sleep_fn: Callable[[float], None] = time.sleep,
    ) -> None:
        self.interface = interface
        self.model = model
        self.opts = opts or ExecutorOpts()
        self.prompt_template = prompt_template
        self.log = log_fn
        self.recorder = recorder
        self.action_executor = ActionExecutor(interface, log_fn=log_fn)
        self.monitor = StabilityMonitor(
            interface,
            poll_interval_ms=self.opts.tree_poll_interval_ms,
            stability_threshold_ms=self.opts.stability_threshold_ms,
            stability_timeout_ms=self.opts.stability_timeout_ms,
            sleep_fn=sleep_fn,
            log_fn=log_fn,
        )

    def _initial_tree(self) -> Tree:
        try:
            return self.interface.compute_tree()
        except Exception as exc:
            raise InterfaceError(exc) from exc

    def _ask_model(self, prompt: str) -> str:
        try:
            return self.model.prompt(prompt)
        except Exception as exc:
            raise ModelError(exc) from exc

    def _record(self, **kwargs) -> None:
        if not self.recorder:
            return
        try:
            self.recorder.record_trip(**kwargs)
        except Exception as exc:
            if self.log:
                self.log(f"[RUNS] Failed to record trip: {exc}")

    def _trip(self, command: str, trip: int, tree: Tree, previous_actions: List[str]) -> ActionGroup:
        prompt = render_prompt(
            self.prompt_template,
            tree_text=tree.to_text(),
            user_command=command,
            previous_actions=previous_actions,
        )
        text: Optional[str] = None
        group: Optional[ActionGroup] = None
        try:
            text = self._ask_model(prompt)
            if self.log:
                self.log("\n[MODEL OUTPUT]\n" + text)
            group = parse_action_lines(extract_fenced_lines(text))
            self.action_executor.execute(group.actions, tree)
        except Exception as exc:
            self._record(command=command, trip=trip, prompt=prompt, model_output=text,
                         group=group, error=f"{type(exc).__name__}: {exc}")
            raise
        self._record(command=command, trip=trip, prompt=prompt, model_output=text,
                     group=group, error=None)
        return group

    def execute_command(self, command: str) -> str:
        """Execute ``command`` and return the model's description of every trip.

        The description is whatever the model said it did; it may or may not be
        accurate. Any failure aborts the command with a typed ExecutionError;
        actions already performed are not undone.
        """
        previous_actions: List[str] = []
        tree: Optional[Tree] = None

        num_trips = 0
        while num_trips < self.opts.max_round_trips:
            if self.log:
                self.log(f"\n===== TRIP {num_trips + 1} / {self.opts.max_round_trips} =====")
            if tree is None:
                # Nothing to diff against on the first trip; take the tree as-is.
                tree = self._initial_tree()
            else:
                tree = self.monitor.wait_for_stable_tree(tree)

            group = self._trip(command, num_trips, tree, previous_actions)
            # Only credited once every action in the trip went through.
            previous_actions.append(group.description)

            if group.complete:
                if self.log:
                    self.log("[DONE] command finished.")
                return "\n".join(previous_actions)
            num_trips += 1

        raise CommandNotFinished(num_trips=num_trips)
