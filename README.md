# metricagent

A small monitoring agent. At a fixed poll interval it samples runtime
statistics of the running Python process as a set of gauges. At a fixed report
interval it sends the gauges it has gathered to an HTTP endpoint in one batch.
Each batch is a JSON array, compressed with gzip and sent in a `POST` request
with `Content-Type: application/json` and `Content-Encoding: gzip`.

## Installation

```
pip install .
```

## Running the agent

```
metric-agent
```

The agent runs until it receives `SIGINT` or `SIGTERM`. When it stops, it
sends any metrics still waiting in its buffer before it exits. If one of its
workers fails, the error is logged and the command exits with status 1.

### Configuration

The agent reads its settings from environment variables:

| Variable          | Default                        | Meaning                          |
|-------------------|--------------------------------|----------------------------------|
| `SERVER_ADDRESS`  | `http://localhost:8080/update` | Endpoint that receives batches   |
| `POLL_INTERVAL`   | `2`                            | Seconds between samples          |
| `REPORT_INTERVAL` | `10`                           | Seconds between batch sends      |

If an interval is not an integer (an optional sign followed by digits), the
default is used. An interval of zero or less is rejected when the agent starts.

```
SERVER_ADDRESS=http://localhost:9000/update POLL_INTERVAL=1 metric-agent
```

## Collected metrics

Every poll produces these gauges:

- `HeapObjects` — memory blocks currently allocated by the interpreter
- `NumGC`, `GCCollected`, `GCUncollectable` — garbage-collector totals over all generations
- `GCGen0Pending`, `GCGen1Pending`, `GCGen2Pending` — current collection counts per generation
- `NumThreads` — live threads
- `CPUUser`, `CPUSystem` — process CPU time in seconds
- `MaxRSS` — peak resident set size, on platforms that provide the `resource` module

## Wire format

Each metric in a batch is a JSON object:

```json
[{"MType": "gauge", "Name": "NumThreads", "Value": 3.0, "Delta": 0}]
```

If the request fails or the server answers with any status other than
`200 OK`, the agent logs the failure, drops that batch and keeps running.

## Using it as a library

```python
import threading

from metricagent.app import App
from metricagent.collector import collect_metrics
from metricagent.config import load_config

snapshot = collect_metrics()          # list of Metric gauges, sampled now

config = load_config({"POLL_INTERVAL": "1"})
stop = threading.Event()
App(config).run(stop)                 # blocks until stop is set, a signal arrives, or a worker fails
```

- `load_config(environ)` builds a `Config` from a mapping (the process
  environment when `environ` is `None`).
- `Metric` holds `mtype`, `name`, `value` and `delta`; `to_dict()` and
  `Metric.from_dict(data)` convert to and from the wire form.
- `Collector(poll_interval).run(queue, stop)` puts a fresh set of gauges on a
  `queue.Queue` at every poll until `stop` is set; `poll_count` tells how many
  polls have completed.
- `Sender(endpoint, report_interval, timeout=5.0).run(queue, stop)` gathers
  items from the queue and posts them at every report interval. A `None` item
  ends the stream: the remaining buffer is sent and `run` returns.
- `Sender.send_batch(metrics)` posts one batch straight away and raises
  `metricagent.sender.SendError` if the request fails or the status is not 200.

## What it does not do

The package only sends metrics; it has no server to receive or store them.
The collector emits gauges only, and failed batches are not retried.

## Tests

```
pip install ".[test]"
pytest
```