"""
Thread-safe in-memory metrics for the studio service.

Tracks:
  - Traffic: plan and preview request counters
  - Errors: failure counters by classification
  - Latency: duration samples for plan and preview calls

All data is ephemeral (resets on restart).
"""

import time
import threading
from typing import Dict, List
from collections import defaultdict

_lock = threading.Lock()

_counters: Dict[str, int] = defaultdict(int)

# ── Latency samples (last 100 per operation) ────────────────────────────────
_latency_samples: Dict[str, List[float]] = defaultdict(list)
MAX_SAMPLES = 100

# ── Error log (last 50 errors) ──────────────────────────────────────────────
_recent_errors: List[dict] = []
MAX_ERRORS = 50


def inc_counter(name: str, amount: int = 1):
    """Increment a counter (e.g. 'requests.plan', 'errors.transient')."""
    with _lock:
        _counters[name] += amount


def record_latency(operation: str, duration_ms: float):
    with _lock:
        samples = _latency_samples[operation]
        samples.append(duration_ms)
        if len(samples) > MAX_SAMPLES:
            _latency_samples[operation] = samples[-MAX_SAMPLES:]


def record_error(operation: str, error_type: str, message: str, shot_id: str = ""):
    with _lock:
        _recent_errors.append({
            "timestamp": time.time(),
            "operation": operation,
            "error_type": error_type,
            "message": message[:300],
            "shot_id": shot_id,
        })
        if len(_recent_errors) > MAX_ERRORS:
            _recent_errors.pop(0)


def get_snapshot() -> dict:
    """Return counters, latency percentiles and the last 10 errors."""
    with _lock:
        latency_stats = {}
        for operation, samples in _latency_samples.items():
            if not samples:
                continue
            sorted_s = sorted(samples)
            n = len(sorted_s)
            latency_stats[operation] = {
                "p50": sorted_s[n // 2],
                "p95": sorted_s[int(n * 0.95)] if n >= 20 else sorted_s[-1],
                "avg": sum(sorted_s) / n,
                "count": n,
            }

        return {
            "timestamp": time.time(),
            "counters": dict(_counters),
            "latency": latency_stats,
            "recent_errors": list(_recent_errors[-10:]),
        }


def reset():
    with _lock:
        _counters.clear()
        _latency_samples.clear()
        _recent_errors.clear()
