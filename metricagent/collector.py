"""Periodic collection of interpreter runtime metrics."""

from __future__ import annotations

import gc
import os
import sys
import threading
import time
from queue import Full, Queue

from metricagent.models import GAUGE, Metric

try:
    import resource
except ImportError:  # not available on every platform
    resource = None  # type: ignore[assignment]

_PUT_POLL = 0.05


def _gauge(name: str, value: float) -> Metric:
    return Metric(GAUGE, name, float(value))


def collect_metrics() -> list[Metric]:
    """Take a snapshot of the interpreter's memory, GC and CPU statistics."""
    gc_stats = gc.get_stats()
    pending = gc.get_count()
    cpu = os.times()
    values = {
        "HeapObjects": sys.getallocatedblocks(),
        "NumGC": sum(gen["collections"] for gen in gc_stats),
        "GCCollected": sum(gen["collected"] for gen in gc_stats),
        "GCUncollectable": sum(gen["uncollectable"] for gen in gc_stats),
        "GCGen0Pending": pending[0],
        "GCGen1Pending": pending[1],
        "GCGen2Pending": pending[2],
        "NumThreads": threading.active_count(),
        "CPUUser": cpu.user,
        "CPUSystem": cpu.system,
    }
    if resource is not None:
        values["MaxRSS"] = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    return [_gauge(name, value) for name, value in values.items()]


class Collector:
    """Polls runtime metrics at a fixed interval and puts them on a queue."""

    def __init__(self, poll_interval: float) -> None:
        if poll_interval <= 0:
            raise ValueError("poll interval must be positive")
        self.poll_interval = poll_interval
        self._poll_count = 0
        self._lock = threading.Lock()

    @property
    def poll_count(self) -> int:
        """Number of completed polls."""
        with self._lock:
            return self._poll_count

    def run(self, queue: "Queue[Metric | None]", stop: threading.Event) -> None:
        """Poll until ``stop`` is set, blocking on a full queue only while running."""
        next_tick = time.monotonic() + self.poll_interval
        while not stop.wait(max(0.0, next_tick - time.monotonic())):
            now = time.monotonic()
            next_tick += self.poll_interval
            if next_tick <= now:
                next_tick = now + self.poll_interval
            if not self._publish(queue, stop):
                return
            with self._lock:
                self._poll_count += 1

    def _publish(self, queue: "Queue[Metric | None]", stop: threading.Event) -> bool:
        for metric in collect_metrics():
            while True:
                if stop.is_set():
                    return False
                try:
                    queue.put(metric, timeout=_PUT_POLL)
                    break
                except Full:
                    continue
        return True