import threading
from collections import defaultdict, deque
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST

P_REQUESTS = Counter('text_intelligence_requests_total', 'Text intelligence requests', ['outcome'])
P_PROVIDER_ERRORS = Counter('provider_errors_total', 'Failed provider calls', ['kind'])
H_LAT = Histogram('text_intelligence_latency_ms', 'Text intelligence latency ms', buckets=(100, 250, 500, 1000, 2000, 5000, 10000))

# always reported, zero until first seen
GATEWAY_COUNTERS = (
    'sessions_issued_total',
    'auth_failures_total',
    'validation_errors_total',
    'provider_errors_total',
    'text_intelligence_requests_total',
)
MAX_SAMPLES = 5000

_lock = threading.Lock()
_counts = defaultdict(int)
_latencies = defaultdict(lambda: deque(maxlen=MAX_SAMPLES))

def inc(name: str, amount: int = 1) -> None:
    with _lock:
        _counts[name] += amount

def observe_ms(name: str, duration_ms: float) -> None:
    with _lock:
        _latencies[name].append(duration_ms)

def _latency_summary(samples: list) -> dict:
    if not samples:
        return {'count': 0, 'p50': 0, 'p95': 0, 'max': 0}
    ordered = sorted(samples)
    last = len(ordered) - 1
    return {
        'count': len(ordered),
        'p50': ordered[int(0.5 * last)],
        'p95': ordered[int(0.95 * last)],
        'max': ordered[-1],
    }

def snapshot_metrics() -> dict:
    with _lock:
        counts = dict(_counts)
        latencies = {name: list(samples) for name, samples in _latencies.items()}
    counters = {name: counts.pop(name, 0) for name in GATEWAY_COUNTERS}
    counters.update(counts)
    return {
        'counters': counters,
        'latency_ms': {name: _latency_summary(samples) for name, samples in latencies.items()},
    }

def prometheus_payload() -> tuple[bytes, str]:
    return generate_latest(), CONTENT_TYPE_LATEST
