"""
In-process metrics for the query endpoint.

Counters and histograms keyed by name and optional labels, exported as a
JSON-serializable snapshot.
"""

import asyncio
from typing import Any, Dict, Optional, Tuple

MetricKey = Tuple[str, Tuple[Tuple[str, str], ...]]


class MetricsRegistry:
    _instance = None

    def __init__(self):
        self._counters: Dict[MetricKey, float] = {}
        self._histograms: Dict[MetricKey, Dict[str, float]] = {}
        self._lock = asyncio.Lock()

    @classmethod
    def instance(cls) -> "MetricsRegistry":
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None

    @staticmethod
    def _key(name: str, labels: Optional[Dict[str, Any]]) -> MetricKey:
        return name, tuple(sorted((str(k), str(v)) for k, v in (labels or {}).items()))

    async def inc(self, name: str, value: float = 1.0, labels: Optional[Dict[str, Any]] = None) -> None:
        key = self._key(name, labels)
        async with self._lock:
            self._counters[key] = self._counters.get(key, 0.0) + value

    async def observe(self, name: str, observation: float, labels: Optional[Dict[str, Any]] = None) -> None:
        key = self._key(name, labels)
        async with self._lock:
            hist = self._histograms.setdefault(
                key, {"count": 0.0, "sum": 0.0, "min": observation, "max": observation}
            )
            hist["count"] += 1
            hist["sum"] += observation
            hist["min"] = min(hist["min"], observation)
            hist["max"] = max(hist["max"], observation)

    async def export(self) -> Dict[str, Any]:
        async with self._lock:
            counters = [
                {"name": name, "labels": dict(labels), "value": value}
                for (name, labels), value in sorted(self._counters.items())
            ]
            histograms = []
            for (name, labels), hist in sorted(self._histograms.items()):
                histograms.append({
                    "name": name,
                    "labels": dict(labels),
                    **hist,
                    "avg": hist["sum"] / hist["count"] if hist["count"] else 0.0,
                })
            return {"counters": counters, "histograms": histograms}


async def inc(name: str, value: float = 1.0, labels: Optional[Dict[str, Any]] = None) -> None:
    await MetricsRegistry.instance().inc(name, value, labels)


async def observe(name: str, observation: float, labels: Optional[Dict[str, Any]] = None) -> None:
    await MetricsRegistry.instance().observe(name, observation, labels)


async def get_metrics() -> Dict[str, Any]:
    return await MetricsRegistry.instance().export()
