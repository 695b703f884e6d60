# promkit

Instrument a Python program with Prometheus metrics and serve them over HTTP.

promkit provides:

- counters, gauges, info metrics, histograms and summaries, the latter with
  streaming (CKMS) quantile estimates over a sliding time window
  (`promkit.metrics`, `promkit.quantiles`);
- metric families keyed by label sets (`promkit.family.Family`), kept in a
  registry (`promkit.registry.Registry`) and created with fluent builders
  (`promkit.builder`);
- a serializer for the Prometheus text exposition format
  (`promkit.text_serializer.TextSerializer`);
- an HTTP exposer (`promkit.exposer.Exposer`) that serves registries on one or
  more paths, with optional gzip compression and HTTP Basic authentication.

It has no dependencies outside the standard library.

## Installation

```
pip install promkit
```

## Recording metrics

```python
from promkit.builder import build_counter, build_histogram, build_info
from promkit.registry import Registry

registry = Registry()

packets = (
    build_counter()
    .name("observed_packets_total")
    .help("Number of observed packets")
    .register(registry)
)
tcp_rx = packets.add({"protocol": "tcp", "direction": "rx"})
tcp_rx.increment()
tcp_rx.increment(2.5)

latency = (
    build_histogram()
    .name("request_duration_seconds")
    .help("Request duration")
    .register(registry)
)
request_duration = latency.add({}, [0.1, 0.5, 1.0])
request_duration.observe(0.3)

build_info().name("versions").help("Static info").register(registry).add(
    {"version": "1.0"}
)
```

`Family.add(labels, ...)` returns the metric for that label set, creating it
with the remaining arguments if it does not exist yet: bucket boundaries for
a histogram, a list of `(quantile, error)` pairs for a summary.

Some rules the classes enforce:

- Metric and label names must follow the Prometheus naming rules; names
  starting with `__` are reserved, as are `le` for histograms and `quantile`
  for summaries. Invalid names raise `ValueError`.
- A family name used for one metric type cannot be used for another. With
  the default `InsertBehavior.MERGE`, registering the same name with the same
  constant labels returns the existing family; with `InsertBehavior.THROW` it
  raises `ValueError`.
- Histogram bucket boundaries must be strictly increasing.
- `Counter.increment` ignores negative values.
- `Summary` keeps its quantile window for 60 seconds in 5 age buckets by
  default (`max_age`, `age_buckets`).

## Rendering the exposition format

```python
from promkit.text_serializer import TextSerializer

print(TextSerializer().serialize(registry.collect()))
```

`TextSerializer.write(out, metrics)` writes to any text stream instead.
Info metrics are rendered as gauges with an `_info` suffix.

## Serving metrics

```python
from promkit.exposer import Exposer

with Exposer("127.0.0.1:8080") as exposer:
    exposer.register_collectable(registry, "/metrics")
    print(exposer.listening_ports())
    ...
```

The bind address is `host:port`; port `0` picks a free port. The server runs
in a background thread until `close()` is called or the `with` block ends.
Collectables are held by weak reference, so keep a reference to each registry
for as long as it should be served. Paths with nothing registered answer 404.

Each path also exposes a few metrics about itself:
`exposer_transferred_bytes_total`, `exposer_scrapes_total` and
`exposer_request_latencies` (in microseconds). Clients whose
`Accept-Encoding` mentions `gzip` receive a gzip-compressed body.

To require HTTP Basic authentication on a path:

```python
PASSWORD = "password"

def check(user, password):
    return user == "admin" and password == PASSWORD

exposer.register_auth(check, "Metrics", "/metrics")
```

Requests without valid credentials are answered with `401 Unauthorized` and a
`WWW-Authenticate` header naming the realm.

## What it does not do

promkit only serves metrics for scraping over HTTP in the text format. It does
not push metrics to a gateway, does not produce the protobuf exposition
format and does not serve HTTPS.

## Running the tests

```
pip install -e ".[test]"
pytest
```