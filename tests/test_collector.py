import threading
import time
from queue import Empty, Queue

import pytest

from metricagent.collector import Collector, collect_metrics


def _drain(queue):
    result = []
    while True:
        try:
            result.append(queue.get_nowait())
        except Empty:
            return result


@pytest.mark.parametrize(
    "poll_interval, stop_after, wait, expect_min",
    [
        (0.05, 0.2, 0.06, 1),
        (0.05, 0.2, 0.16, 2),
        (3600.0, 0.05, 0.01, 0),
    ],
    ids=["once", "multiple", "stop-on-cancel"],
)
def test_collector_run(poll_interval, stop_after, wait, expect_min):
    collector = Collector(poll_interval)
    queue = Queue(maxsize=100)
    stop = threading.Event()
    timer = threading.Timer(stop_after, stop.set)
    worker = threading.Thread(target=collector.run, args=(queue, stop))
    timer.start()
    worker.start()
    try:
        time.sleep(wait)
        collected = _drain(queue)
        worker.join(timeout=2)
    finally:
        stop.set()
        timer.cancel()
    assert not worker.is_alive()
    assert len(collected) >= expect_min


def test_poll_count_tracks_polls():
    collector = Collector(0.02)
    queue = Queue()
    stop = threading.Event()
    timer = threading.Timer(0.15, stop.set)
    timer.start()
    collector.run(queue, stop)
    per_poll = len(collect_metrics())
    assert collector.poll_count >= 2
    assert len(_drain(queue)) == collector.poll_count * per_poll


def test_run_returns_when_queue_full_and_stopped():
    collector = Collector(0.01)
    queue = Queue(maxsize=1)
    stop = threading.Event()
    timer = threading.Timer(0.1, stop.set)
    timer.start()
    collector.run(queue, stop)
    assert queue.qsize() == 1
    assert collector.poll_count == 0


def test_collect_metrics_are_unique_gauges():
    metrics = collect_metrics()
    names = [m.name for m in metrics]
    assert len(names) == len(set(names))
    assert all(m.mtype == "gauge" for m in metrics)
    assert all(isinstance(m.value, float) for m in metrics)
    assert {"HeapObjects", "NumGC"} <= set(names)


@pytest.mark.parametrize("interval", [0, -1])
def test_non_positive_interval_rejected(interval):
    with pytest.raises(ValueError):
        Collector(interval)