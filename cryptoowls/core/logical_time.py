"""
Logical time values embedded in transactions as a {secs, nanos} pair.
"""

import time
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Union

NANOS_PER_SECOND = 1_000_000_000
DISPLAY_FORMAT = "%d.%m.%Y, %H:%M:%S"


@dataclass(frozen=True)
class SystemTime:
    secs: int
    nanos: int = 0

    @classmethod
    def now(cls) -> 'SystemTime':
        """Current wall-clock time at millisecond resolution."""
        return cls.from_millis(int(time.time() * 1000))

    @classmethod
    def from_millis(cls, millis: int) -> 'SystemTime':
        secs = millis // 1000
        nanos = (millis - secs * 1000) * 1_000_000
        return cls(secs=secs, nanos=nanos)

    @classmethod
    def from_mapping(cls, value: Mapping[str, Any]) -> 'SystemTime':
        """Accept the wire form {"secs": "...", "nanos": ...}."""
        return cls(secs=int(value["secs"]), nanos=int(value["nanos"]))

    def to_dict(self) -> Dict[str, Any]:
        # u64 seconds travel as a decimal string on the wire
        return {"secs": str(self.secs), "nanos": self.nanos}


def format_system_time(value: Union[SystemTime, Mapping[str, Any]], tz: Optional[Any] = None) -> str:
    """Render a logical time as DD.MM.YYYY, HH:mm:ss (local time unless tz is given)."""
    if not isinstance(value, SystemTime):
        value = SystemTime.from_mapping(value)
    return datetime.fromtimestamp(value.secs, tz=tz).strftime(DISPLAY_FORMAT)
