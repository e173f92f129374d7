"""Result containers for an RFM run.

Everything here reduces to plain dicts/lists/str/int/float through
``RFMResult.to_dict`` so a result can be exported or stored as a JSON blob
and read back with ``RFMResult.from_dict``.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any

import pandas as pd


@dataclass(frozen=True)
class ClientScore:
    """One client's raw RFM values, quintile scores and category."""

    client_id: str
    last_activity: datetime
    recency_days: int
    transaction_count: int
    total_amount: float
    score_r: int
    score_f: int
    score_m: int
    score_fm: int
    category: str

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["last_activity"] = self.last_activity.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ClientScore:
        values = {f.name: data[f.name] for f in fields(cls)}
        last = values["last_activity"]
        if isinstance(last, str):
            values["last_activity"] = datetime.fromisoformat(last)
        return cls(**values)


@dataclass(frozen=True)
class CategoryCount:
    category: str
    count: int
    color: str


@dataclass(frozen=True)
class HeatmapCell:
    r: int
    fm: int
    category: str
    count: int
    color: str


@dataclass(frozen=True)
class RFMResult:
    """Scored clients (discovery order) plus category and heatmap aggregates."""

    clients: list[ClientScore] = field(default_factory=list)
    category_counts: list[CategoryCount] = field(default_factory=list)
    heatmap: list[HeatmapCell] = field(default_factory=list)

    @property
    def client_count(self) -> int:
        return len(self.clients)

    def to_dict(self) -> dict[str, Any]:
        return {
            "clients": [c.to_dict() for c in self.clients],
            "categoryCounts": [asdict(c) for c in self.category_counts],
            "heatmap": [asdict(c) for c in self.heatmap],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RFMResult:
        return cls(
            clients=[ClientScore.from_dict(c) for c in data.get("clients", [])],
            category_counts=[CategoryCount(**c) for c in data.get("categoryCounts", [])],
            heatmap=[HeatmapCell(**c) for c in data.get("heatmap", [])],
        )

    def clients_frame(self) -> pd.DataFrame:
        """Clients as a DataFrame, one row per client in discovery order."""
        columns = [f.name for f in fields(ClientScore)]
        return pd.DataFrame([asdict(c) for c in self.clients], columns=columns)
