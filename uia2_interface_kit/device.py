# device.py
from __future__ import annotations

import re
from typing import Any, Dict, Optional

import uiautomator2 as u2
from PIL import Image


class DeviceAdapter:
    def __init__(self, serial: Optional[str] = None, implicit_wait: float = 10.0):
        """
        implicit_wait: global uiautomator2 implicit wait (seconds) for element lookups.
        """
        self.d = u2.connect(serial) if serial else u2.connect()
        # Minimal health check where supported
        try:
            if hasattr(self.d, "healthcheck"):
                self.d.healthcheck()
        except Exception:
            pass
        try:
            self.d.implicitly_wait(implicit_wait)
        except Exception:
            pass

    @property
    def serial(self) -> Optional[str]:
        return getattr(self.d, "serial", None)

    # ---------- raw gestures ----------
    def click(self, x: float, y: float) -> None:
        self.d.click(x, y)

    # ---------- observation ----------
    def dump_hierarchy(self) -> str:
        """Return the current window hierarchy as uiautomator XML."""
        return self.d.dump_hierarchy(compressed=False)

    def screenshot(self) -> Image.Image:
        return self.d.screenshot()

    # ---------- text input (fallback chain) ----------
    def _enable_fast_ime(self) -> None:
        if hasattr(self.d, "set_input_ime"):
            self.d.set_input_ime(True)
        else:
            try:
                self.d.set_fastinput_ime(True)
            except Exception:
                pass

    def type_text(self, content: str) -> Dict[str, Any]:
        """
        Returns: {"ok": True/False, "method": "send_keys"/"set_text"/"adb"/"none", "error"?: str}
        On the ADB path, newlines in ``content`` are sent as KEYCODE_ENTER.
        """
        self._enable_fast_ime()

        # 1) send_keys
        try:
            self.d.send_keys(content, clear=True)
            return {"ok": True, "method": "send_keys"}
        except Exception:
            pass

        # 2) set_text on the focused element
        try:
            focused = self.d(focused=True)
            if focused.exists:
                focused.set_text(content)
                return {"ok": True, "method": "set_text"}
        except Exception:
            pass

        # 3) adb input, line by line, ENTER between lines
        try:
            parts = re.split(r"\r?\n", content)
            for i, part in enumerate(parts):
                if part:
                    safe = part.replace(" ", "%s")
                    self.d.shell(f'input text "{safe}"')
                if i < len(parts) - 1:
                    self.d.shell("input keyevent 66")
            return {"ok": True, "method": "adb"}
        except Exception as e:
            return {"ok": False, "method": "none", "error": str(e)}
