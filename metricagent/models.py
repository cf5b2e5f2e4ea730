"""Metric records exchanged between the collector and the sender."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

GAUGE = "gauge"
COUNTER = "counter"


@dataclass
class Metric:
    """A single gauge or counter sample."""

    mtype: str
    name: str
    value: float = 0.0
    delta: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Return the wire representation used in report batches."""
        return {
            "MType": self.mtype,
            "Name": self.name,
            "Value": self.value,
            "Delta": self.delta,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Metric":
        """Build a metric from its wire representation; missing fields are zero."""
        return cls(
            mtype=str(data.get("MType", "")),
            name=str(data.get("Name", "")),
            value=float(data.get("Value", 0.0)),
            delta=int(data.get("Delta", 0)),
        )