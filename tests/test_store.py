import logging

import pytest
from opensearchpy import exceptions as os_exc

from campaign_match.config import IndexConfig
from campaign_match.errors import TransientFetchError
from campaign_match.store import InMemoryStore, OpenSearchStore


class FakeOpenSearch:
    def __init__(self, docs=None, hits=None, fail=False):
        self.docs = docs or {}
        self.hits = hits or {}
        self.fail = fail
        self.searches = []

    def _maybe_fail(self):
        if self.fail:
            raise os_exc.ConnectionError("N/A", "connection refused", None)

    def get(self, index, id):
        self._maybe_fail()
        if (index, id) not in self.docs:
            raise os_exc.NotFoundError(404, "not_found", {})
        return {"_id": id, "found": True, "_source": self.docs[(index, id)]}

    def search(self, index, body, size):
        self._maybe_fail()
        self.searches.append((index, body, size))
        term = body["query"]["bool"]["filter"][0]["term"]
        return {"hits": {"hits": self.hits.get((index,) + tuple(term.items())[0], [])}}

    def mget(self, index, body):
        self._maybe_fail()
        docs = []
        for i in body["ids"]:
            if (index, i) in self.docs:
                docs.append({"_id": i, "found": True, "_source": self.docs[(index, i)]})
            else:
                docs.append({"_id": i, "found": False})
        return {"docs": docs}


IDX = IndexConfig()


def test_get_returns_record_with_id():
    client = FakeOpenSearch(docs={(IDX.users, "u1"): {"role": "influencer", "profile": {"niches": ["Food"]}}})
    store = OpenSearchStore(client, IDX)
    rec = store.get_influencer("u1")
    assert rec["id"] == "u1"
    assert rec["profile"]["niches"] == ["Food"]


def test_get_missing_is_none():
    assert OpenSearchStore(FakeOpenSearch(), IDX).get_campaign("nope") is None


def test_backend_failure_is_transient():
    store = OpenSearchStore(FakeOpenSearch(fail=True), IDX)
    with pytest.raises(TransientFetchError) as ei:
        store.get_influencer("u1")
    assert isinstance(ei.value.__cause__, os_exc.ConnectionError)
    with pytest.raises(TransientFetchError):
        store.list_active_campaigns()
    with pytest.raises(TransientFetchError):
        store.get_users(["u1"])


def test_search_filters_and_size():
    hits = {
        (IDX.campaigns, "status", "active"): [
            {"_id": "c1", "_source": {"title": "A", "status": "active"}},
            {"_id": "c2", "_source": {"id": "c2", "title": "B", "status": "active"}},
        ],
    }
    client = FakeOpenSearch(hits=hits)
    rows = OpenSearchStore(client, IDX, max_candidates=500).list_active_campaigns()
    assert [r["id"] for r in rows] == ["c1", "c2"]
    index, body, size = client.searches[0]
    assert index == IDX.campaigns and size == 500
    assert body["query"]["bool"]["filter"] == [{"term": {"status": "active"}}]


def test_applied_ids():
    hits = {
        (IDX.applications, "influencer_id", "u1"): [
            {"_id": "a1", "_source": {"campaign_id": "c1"}},
            {"_id": "a2", "_source": {"campaign_id": "c2"}},
            {"_id": "a3", "_source": {}},
        ],
        (IDX.applications, "campaign_id", "c1"): [{"_id": "a1", "_source": {"influencer_id": "u1"}}],
    }
    store = OpenSearchStore(FakeOpenSearch(hits=hits), IDX)
    assert store.applied_campaign_ids("u1") == {"c1", "c2"}
    assert store.applied_influencer_ids("c1") == {"u1"}


def test_mget_skips_missing():
    client = FakeOpenSearch(docs={(IDX.campaigns, "c1"): {"title": "A"}})
    out = OpenSearchStore(client, IDX).get_campaigns(["c1", "c9"])
    assert list(out) == ["c1"]
    assert OpenSearchStore(client, IDX).get_campaigns([]) == {}


def test_in_memory_from_dir(tmp_path):
    (tmp_path / "users.jsonl").write_text('{"id": "u1", "role": "influencer"}\n\n{"id": "b1", "role": "brand"}\n')
    (tmp_path / "campaigns.jsonl").write_text('{"id": "c1", "status": "active"}\n{"id": "c2", "status": "draft"}\n')
    store = InMemoryStore.from_dir(str(tmp_path))
    assert [u["id"] for u in store.list_influencers()] == ["u1"]
    assert [c["id"] for c in store.list_active_campaigns()] == ["c1"]
    assert store.applied_campaign_ids("u1") == set()
    assert store.get_campaign("c2")["status"] == "draft"
    assert store.get_influencer("zz") is None


def test_partial_store_cannot_be_built():
    from campaign_match.store import MatchStore

    class OnlyGet(MatchStore):
        def get_influencer(self, influencer_id):
            return None

    with pytest.raises(TypeError):
        OnlyGet()


def test_truncated_candidate_pool_is_logged(caplog):
    class Capped(FakeOpenSearch):
        def search(self, index, body, size):
            res = super().search(index, body, size)
            res["hits"]["total"] = {"value": 25000, "relation": "eq"}
            return res

    hits = {(IDX.users, "role", "influencer"): [{"_id": "u1", "_source": {"role": "influencer"}}]}
    client = Capped(hits=hits)
    with caplog.at_level(logging.WARNING, logger="campaign_match.store"):
        rows = OpenSearchStore(client, IDX, max_candidates=1).list_influencers()
    assert [r["id"] for r in rows] == ["u1"]
    assert "25000" in caplog.text
    assert client.searches[0][1]["track_total_hits"] is True


def test_complete_pool_is_not_logged(caplog):
    hits = {(IDX.campaigns, "status", "active"): [{"_id": "c1", "_source": {}}]}
    with caplog.at_level(logging.WARNING, logger="campaign_match.store"):
        OpenSearchStore(FakeOpenSearch(hits=hits), IDX).list_active_campaigns()
    assert caplog.text == ""
