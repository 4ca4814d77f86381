from __future__ import annotations
from typing import Callable, Dict, List, Sequence
import time
import numpy as np

from .errors import NotFoundError
from .schemas import MatchResult

def benchmark_latency(
    find: Callable[[str], List[MatchResult]],
    ids: Sequence[str],
    n_requests: int = 50,
) -> Dict[str, float]:
    times = []
    for anchor_id in list(ids)[:n_requests]:
        t0 = time.perf_counter()
        try:
            _ = find(anchor_id)
        except NotFoundError:
            continue
        t1 = time.perf_counter()
        times.append((t1 - t0) * 1000.0)
    if not times:
        return {"n": 0.0, "p50_ms": 0.0, "p95_ms": 0.0, "mean_ms": 0.0}
    arr = np.asarray(times, dtype=float)
    return {
        "n": float(len(times)),
        "p50_ms": float(np.percentile(arr, 50)),
        "p95_ms": float(np.percentile(arr, 95)),
        "mean_ms": float(np.mean(arr)),
    }

def score_distribution(matches: Sequence[MatchResult]) -> Dict[str, float]:
    if not matches:
        return {"count": 0.0, "mean": 0.0, "p50": 0.0, "p90": 0.0, "max": 0.0}
    arr = np.asarray([m.match_score for m in matches], dtype=float)
    return {
        "count": float(arr.size),
        "mean": float(np.mean(arr)),
        "p50": float(np.percentile(arr, 50)),
        "p90": float(np.percentile(arr, 90)),
        "max": float(np.max(arr)),
    }
