import gzip
import json
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest

from metricagent.app import App, main
from metricagent.collector import collect_metrics
from metricagent.config import Config
from metricagent.models import Metric


@pytest.fixture
def server():
    batches = []

    class Handler(BaseHTTPRequestHandler):
        def do_POST(self):
            raw = self.rfile.read(int(self.headers.get("Content-Length", 0)))
            batches.append([Metric.from_dict(d) for d in json.loads(gzip.decompress(raw))])
            self.send_response(200)
            self.send_header("Content-Length", "0")
            self.end_headers()

        def log_message(self, *args):
            pass

    httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
    threading.Thread(target=httpd.serve_forever, daemon=True).start()
    yield f"http://127.0.0.1:{httpd.server_port}/update", batches
    httpd.shutdown()
    httpd.server_close()


def test_run_delivers_collected_metrics(server):
    url, batches = server
    stop = threading.Event()
    timer = threading.Timer(0.4, stop.set)
    timer.start()
    try:
        App(Config(url, 0.02, 0.1)).run(stop)
    finally:
        timer.cancel()
    expected_names = {m.name for m in collect_metrics()}
    delivered = [m for batch in batches for m in batch]
    assert batches
    assert {m.name for m in delivered} == expected_names
    assert all(m.mtype == "gauge" for m in delivered)


def test_run_returns_promptly_when_already_stopped(server):
    url, batches = server
    stop = threading.Event()
    stop.set()
    started = time.monotonic()
    result = App(Config(url, 3600.0, 3600.0)).run(stop)
    assert result is None
    assert time.monotonic() - started < 2
    assert batches == []


def test_run_raises_for_invalid_poll_interval(server):
    url, _ = server
    with pytest.raises(ValueError):
        App(Config(url, 0.0, 1.0)).run(threading.Event())


def test_run_raises_for_invalid_report_interval(server):
    url, _ = server
    with pytest.raises(ValueError):
        App(Config(url, 1.0, -1.0)).run(threading.Event())


def test_main_rejects_unknown_arguments():
    with pytest.raises(SystemExit) as info:
        main(["--unknown"])
    assert info.value.code == 2


def test_main_reports_failure_status(monkeypatch):
    monkeypatch.setenv("POLL_INTERVAL", "0")
    monkeypatch.setenv("REPORT_INTERVAL", "1")
    assert main([]) == 1