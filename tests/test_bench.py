from campaign_match.bench import benchmark_latency, score_distribution
from campaign_match.errors import NotFoundError
from campaign_match.finder import MatchFinder

def test_score_distribution(store):
    matches = MatchFinder(store).find_matching_campaigns("inf_a")
    d = score_distribution(matches)
    assert d["count"] == 3.0
    assert d["max"] == 96.0
    assert d["p50"] == 96.0
    assert score_distribution([])["count"] == 0.0

def test_benchmark_skips_missing_ids(store):
    finder = MatchFinder(store)
    out = benchmark_latency(finder.find_matching_campaigns, ["inf_a", "ghost", "inf_b"], n_requests=10)
    assert out["n"] == 2.0
    assert out["p95_ms"] >= out["p50_ms"] >= 0.0

def test_benchmark_respects_n():
    calls = []
    def find(i):
        calls.append(i)
        if i == "x":
            raise NotFoundError("influencer", i)
        return []
    benchmark_latency(find, ["a", "b", "c"], n_requests=2)
    assert calls == ["a", "b"]
