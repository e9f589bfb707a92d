"""In-process memory of the results tab each recent scan was left on."""
from __future__ import annotations

from collections import OrderedDict
from typing import Dict, Optional

DEFAULT_CAPACITY = 10


class TabMemory:
    """Insertion-ordered store of the last ``capacity`` scans' active tabs.

    Storing a tab for a scan already present moves it to the newest position;
    the oldest scan is evicted once the store is over capacity. Nothing is
    persisted.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("TabMemory capacity must be at least 1")
        self.capacity = capacity
        self._tabs: "OrderedDict[str, str]" = OrderedDict()

    def get(self, scan_id: str) -> Optional[str]:
        return self._tabs.get(scan_id)

    def store(self, scan_id: str, tab: str) -> None:
        value = getattr(tab, "value", tab)
        self._tabs.pop(scan_id, None)
        self._tabs[scan_id] = str(value)
        while len(self._tabs) > self.capacity:
            self._tabs.popitem(last=False)

    def forget(self, scan_id: str) -> None:
        self._tabs.pop(scan_id, None)

    def clear(self) -> None:
        self._tabs.clear()

    def snapshot(self) -> Dict[str, str]:
        return dict(self._tabs)

    def __contains__(self, scan_id: object) -> bool:
        return scan_id in self._tabs

    def __len__(self) -> int:
        return len(self._tabs)


__all__ = ["DEFAULT_CAPACITY", "TabMemory"]
