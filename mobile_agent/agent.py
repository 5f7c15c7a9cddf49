from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Union

from command_kit.executor import Executor, ExecutorOpts
from uia2_interface_kit.device import DeviceAdapter
from uia2_interface_kit.interface import Uia2Interface

from .model_strategies import DEFAULT_BASE_URL, DEFAULT_MODEL, OpenRouterModel
from .run_recorder import RunRecorder


LogFn = Callable[[str], None]


@dataclass(frozen=True)
class MobileAgent:
    device: DeviceAdapter
    interface: Uia2Interface
    model: OpenRouterModel
    executor: Executor

    def run(self, command: str) -> str:
        return self.executor.execute_command(command)


def build_mobile_agent(
    *,
    serial: Optional[str] = None,
    dry_run: bool = True,
    model: str = DEFAULT_MODEL,
    api_key: Optional[str] = None,
    base_url: str = DEFAULT_BASE_URL,
    site_url: Optional[str] = None,
    site_name: Optional[str] = None,
    timeout: Optional[float] = None,
    temperature: float = 0.3,
    max_tokens: Optional[int] = None,
    max_round_trips: int = 3,
    poll_interval_ms: int = 50,
    stability_threshold_ms: int = 250,
    stability_timeout_ms: int = 10_000,
    settle_ms: int = 120,
    run_dir: Optional[Union[str, Path]] = None,
    log_fn: LogFn = print,
) -> MobileAgent:
    opts = ExecutorOpts(
        max_round_trips=max_round_trips,
        tree_poll_interval_ms=poll_interval_ms,
        stability_threshold_ms=stability_threshold_ms,
        stability_timeout_ms=stability_timeout_ms,
    )

    try:
        device = DeviceAdapter(serial=serial)
    except Exception as exc:
        raise RuntimeError(
            "Failed to connect to device. Ensure adb is installed, the device is online, "
            "and USB debugging is enabled."
        ) from exc

    interface = Uia2Interface(device, dry_run=dry_run, settle_ms=settle_ms, log_fn=log_fn)
    try:
        interface.compute_tree()
    except Exception as exc:
        raise RuntimeError(
            "Failed to read the UI hierarchy from device. Check adb connectivity and device authorization."
        ) from exc

    llm = OpenRouterModel(
        api_key=api_key,
        base_url=base_url,
        timeout=timeout,
        model=model,
        temperature=temperature,
        max_tokens=max_tokens,
        site_url=site_url,
        site_name=site_name,
    )

    recorder = None
    if run_dir:
        recorder = RunRecorder(
            Path(run_dir),
            metadata={
                "model": model,
                "serial": serial,
                "dry_run": dry_run,
                "temperature": temperature,
                "max_round_trips": max_round_trips,
                "poll_interval_ms": poll_interval_ms,
                "stability_threshold_ms": stability_threshold_ms,
                "stability_timeout_ms": stability_timeout_ms,
            },
            log_fn=log_fn,
            screenshot_fn=device.screenshot,
        )

    executor = Executor(interface, llm, opts, log_fn=log_fn, recorder=recorder)
    return MobileAgent(device=device, interface=interface, model=llm, executor=executor)
