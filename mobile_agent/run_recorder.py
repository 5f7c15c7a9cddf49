from __future__ import annotations

from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict, Optional
import json

from PIL import Image

from command_kit.action_parser import ActionGroup


LogFn = Callable[[str], None]
ScreenshotFn = Callable[[], Image.Image]


class RunRecorder:
    """Writes one JSON file (and optionally a screenshot) per trip of a command."""

    def __init__(
        self,
        run_dir: Path,
        *,
        metadata: Optional[Dict[str, Any]] = None,
        log_fn: Optional[LogFn] = None,
        screenshot_fn: Optional[ScreenshotFn] = None,
    ) -> None:
        self.run_dir = Path(run_dir)
        self.trips_dir = self.run_dir / "trips"
        self._count = 0
        self._log = log_fn
        self._screenshot = screenshot_fn

        self.run_dir.mkdir(parents=True, exist_ok=True)
        self.trips_dir.mkdir(parents=True, exist_ok=True)
        if metadata:
            self._write_json(self.run_dir / "metadata.json", metadata)

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
        self._count += 1
        trip_id = f"trip_{self._count:03d}"
        json_path = self.trips_dir / f"{trip_id}.json"

        try:
            if self._screenshot:
                image = self._screenshot()
                image.save(self.trips_dir / f"{trip_id}.png")
            payload: Dict[str, Any] = {
                "command": command,
                "trip": trip,
                "prompt": prompt,
                "model_output": model_output,
                "parsed_actions": _group_to_dict(group) if group else None,
                "error": error,
            }
            self._write_json(json_path, payload)
        except Exception as exc:
            if self._log:
                self._log(f"[RUNS] Failed to write trip artifacts: {exc}")

    def _write_json(self, path: Path, payload: Dict[str, Any]) -> None:
        path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def _group_to_dict(group: ActionGroup) -> Dict[str, Any]:
    return {
        "actions": [{"type": type(a).__name__.lower(), **asdict(a)} for a in group.actions],
        "description": group.description,
        "complete": group.complete,
    }
