from __future__ import annotations

"""
Simple Peripheral Manager.

Keeps the named devices attached to the host and validates that a name
resolves to a monitor-capable device before the monitor sink writes to it.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from cclog.infra.terminal import BufferSurface

logger = logging.getLogger(__name__)

MONITOR_TYPE = "monitor"

# Methods a device must expose to be driven as a monitor
_MONITOR_METHODS = ("set_text_scale", "get_text_color", "set_text_color", "print_line")


class PeripheralRegistry:
    """
    Name -> device mapping with monitor validation.
    """

    def __init__(self, devices: Optional[Dict[str, Any]] = None) -> None:
        self._devices: Dict[str, Any] = dict(devices or {})

    def mount(self, name: str, device: Any) -> None:
        self._devices[name] = device
        logger.info("PPM: Mounted %s on %s", peripheral_type(device), name)

    def unmount(self, name: str) -> None:
        if self._devices.pop(name, None) is not None:
            logger.info("PPM: Unmounted %s", name)

    def get(self, name: str) -> Optional[Any]:
        return self._devices.get(name)

    def names(self) -> List[str]:
        return list(self._devices)

    def validate_monitor(self, name: str) -> Tuple[bool, Any]:
        """
        Check that a name resolves to a usable monitor.

        Args:
            name: Device name / side.

        Returns:
            Tuple[bool, Any]: (True, device) or (False, error message).
        """
        device = self._devices.get(name)
        if device is None:
            return False, f"peripheral not present on {name}"

        kind = peripheral_type(device)
        if kind != MONITOR_TYPE:
            return False, f"not a monitor, found: {kind}"

        missing = [m for m in _MONITOR_METHODS if not callable(getattr(device, m, None))]
        if missing:
            return False, f"failed function check: {', '.join(missing)}"

        return True, device


def peripheral_type(device: Any) -> str:
    return str(getattr(device, "peripheral_type", "unknown"))


class BufferMonitor(BufferSurface):
    """
    In-memory monitor device.
    """

    peripheral_type = MONITOR_TYPE

    def __init__(self) -> None:
        super().__init__()
        self.text_scale = 1.0

    def set_text_scale(self, scale: float) -> None:
        self.text_scale = float(scale)
