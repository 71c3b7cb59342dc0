from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class DashboardContext:
    payload: Dict[str, Any]

    def get(self, key, default=None):
        return self.payload.get(key, default)

    def __getitem__(self, key):
        return self.payload[key]

    @property
    def snapshot(self) -> Dict[str, Any]:
        return (self.payload.get("dashboard") or {}).get("snapshot") or {}

    @property
    def stats(self) -> Dict[str, Any]:
        return self.snapshot.get("stats") or {}

    @property
    def last_error(self):
        return (self.payload.get("dashboard") or {}).get("last_error")
