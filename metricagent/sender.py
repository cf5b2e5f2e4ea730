"""Batching and delivery of metrics to a remote endpoint."""

from __future__ import annotations

import gzip
import json
import logging
import threading
import time
import urllib.error
import urllib.request
from queue import Empty, Queue
from typing import Iterable

from metricagent.models import Metric

log = logging.getLogger(__name__)

_GET_POLL = 0.05


class SendError(Exception):
    """A batch could not be delivered."""


class Sender:
    """Buffers metrics from a queue and posts them as gzipped JSON batches.

    A ``None`` item on the queue marks the end of the stream.
    """

    def __init__(self, endpoint: str, report_interval: float, timeout: float = 5.0) -> None:
        if report_interval <= 0:
            raise ValueError("report interval must be positive")
        self.endpoint = endpoint
        self.report_interval = report_interval
        self.timeout = timeout

    def run(self, queue: "Queue[Metric | None]", stop: threading.Event) -> None:
        """Collect and report batches until the stream ends or ``stop`` is set."""
        buffer: list[Metric] = []
        next_tick = time.monotonic() + self.report_interval
        while True:
            if stop.is_set():
                self._flush(buffer, "failed to send final batch")
                return
            now = time.monotonic()
            if now >= next_tick:
                next_tick += self.report_interval
                if next_tick <= now:
                    next_tick = now + self.report_interval
                if buffer:
                    self._flush(buffer, "failed to send batch")
                    buffer = []
                continue
            try:
                item = queue.get(timeout=min(next_tick - now, _GET_POLL))
            except Empty:
                continue
            if item is None:
                self._flush(buffer, "failed to send batch after channel close")
                return
            buffer.append(item)

    def _flush(self, buffer: list[Metric], failure: str) -> None:
        if not buffer:
            return
        try:
            self.send_batch(buffer)
        except SendError as exc:
            log.error("[sender] %s: %s", failure, exc)

    def send_batch(self, metrics: Iterable[Metric]) -> None:
        """Post one batch; raise SendError unless the server answers 200."""
        batch = list(metrics)
        payload = gzip.compress(json.dumps([m.to_dict() for m in batch]).encode("utf-8"))
        try:
            request = urllib.request.Request(
                self.endpoint,
                data=payload,
                method="POST",
                headers={"Content-Type": "application/json", "Content-Encoding": "gzip"},
            )
        except ValueError as exc:
            raise SendError(f"failed to create request: {exc}") from exc

        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status = response.status
        except urllib.error.HTTPError as exc:
            status = exc.code
            exc.close()
        except (urllib.error.URLError, OSError, ValueError) as exc:
            raise SendError(f"failed to send request: {exc}") from exc

        if status != 200:
            raise SendError(f"unexpected status code: {status}")
        log.info("Successfully sent batch of %d metrics to %s", len(batch), self.endpoint)