"""Runs the collector and sender together until shutdown or failure."""

from __future__ import annotations

import argparse
import logging
import signal
import threading
from contextlib import contextmanager
from queue import Empty, Full, Queue
from typing import Iterator, Optional

from metricagent.collector import Collector
from metricagent.config import Config, load_config
from metricagent.models import Metric
from metricagent.sender import Sender

log = logging.getLogger(__name__)

_QUEUE_SIZE = 100
_WAIT_POLL = 0.1


@contextmanager
def _signals_set(event: threading.Event) -> Iterator[None]:
    """Set ``event`` on SIGINT or SIGTERM while inside the block (main thread only)."""
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    wanted = [signal.SIGINT] + ([signal.SIGTERM] if hasattr(signal, "SIGTERM") else [])
    previous = {sig: signal.signal(sig, lambda *_: event.set()) for sig in wanted}
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


class App:
    """The metric agent: polls runtime metrics and reports them in batches."""

    def __init__(self, config: Config) -> None:
        self.config = config

    def run(self, stop: Optional[threading.Event] = None) -> None:
        """Run until ``stop`` is set or a signal arrives; re-raise a worker's error."""
        external = stop if stop is not None else threading.Event()
        halt = threading.Event()
        metrics: "Queue[Metric | None]" = Queue(maxsize=_QUEUE_SIZE)
        errors: "Queue[BaseException]" = Queue(maxsize=2)

        collector = Collector(self.config.poll_interval)
        sender = Sender(self.config.server_addr, self.config.report_interval)

        def run_sender() -> None:
            log.info("Sender started")
            try:
                sender.run(metrics, halt)
            except Exception as exc:  # reported to the waiting caller
                errors.put(exc)

        sender_thread = threading.Thread(target=run_sender, name="sender", daemon=True)

        def run_collector() -> None:
            log.info("Collector started")
            try:
                collector.run(metrics, halt)
            except Exception as exc:  # reported to the waiting caller
                errors.put(exc)
            finally:
                self._close_stream(metrics, sender_thread)

        collector_thread = threading.Thread(target=run_collector, name="collector", daemon=True)

        with _signals_set(external):
            collector_thread.start()
            sender_thread.start()
            try:
                while True:
                    if external.is_set():
                        log.info("Agent shutdown initiated")
                        return
                    try:
                        raise errors.get(timeout=_WAIT_POLL)
                    except Empty:
                        continue
            finally:
                halt.set()
                collector_thread.join(timeout=sender.timeout + 1)
                sender_thread.join(timeout=sender.timeout + 1)

    @staticmethod
    def _close_stream(metrics: "Queue[Metric | None]", sender_thread: threading.Thread) -> None:
        while True:
            try:
                metrics.put(None, timeout=_WAIT_POLL)
                return
            except Full:
                if not sender_thread.is_alive():
                    return


def main(argv: Optional[list[str]] = None) -> int:
    """Start the agent from environment settings; return the exit status."""
    argparse.ArgumentParser(
        prog="metric-agent",
        description="Collect runtime metrics and report them to a server. "
        "Configured through SERVER_ADDRESS, POLL_INTERVAL and REPORT_INTERVAL.",
    ).parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    try:
        App(load_config()).run()
    except Exception as exc:
        log.error("error: %s", exc)
        return 1
    return 0