from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Set
from abc import ABC, abstractmethod
import json
import logging
import os
import time

from opensearchpy import OpenSearch
from opensearchpy import exceptions as os_exc

from .config import AppConfig, IndexConfig
from .errors import TransientFetchError

logger = logging.getLogger(__name__)

ACTIVE_STATUS = "active"
INFLUENCER_ROLE = "influencer"


def make_client(config: AppConfig) -> OpenSearch:
    osc = config.opensearch
    return OpenSearch(
        hosts=[{"host": osc.host, "port": osc.port}],
        http_auth=(osc.user, osc.password) if osc.password else None,
        use_ssl=osc.use_ssl,
        verify_certs=osc.verify_certs,
        ssl_show_warn=False,
        timeout=osc.timeout,
    )


class MatchStore(ABC):
    """Read-only data-store access used by the match finder.

    ``get_*`` return the raw record dict or ``None`` when it does not exist.
    Every method raises ``TransientFetchError`` when the backend read fails.
    """

    @abstractmethod
    def get_influencer(self, influencer_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def get_campaign(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        ...

    @abstractmethod
    def list_active_campaigns(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def list_influencers(self) -> List[Dict[str, Any]]:
        ...

    @abstractmethod
    def applied_campaign_ids(self, influencer_id: str) -> Set[str]:
        ...

    @abstractmethod
    def applied_influencer_ids(self, campaign_id: str) -> Set[str]:
        ...

    @abstractmethod
    def get_campaigns(self, ids: List[str]) -> Dict[str, Dict[str, Any]]:
        ...

    @abstractmethod
    def get_users(self, ids: List[str]) -> Dict[str, Dict[str, Any]]:
        ...


def _with_id(doc_id: Any, src: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    rec = dict(src or {})
    rec.setdefault("id", doc_id)
    return rec


class OpenSearchStore(MatchStore):
    def __init__(self, client: OpenSearch, indices: IndexConfig, max_candidates: int = 10000):
        self.client = client
        self.indices = indices
        self.max_candidates = int(max_candidates)

    def _get(self, index: str, doc_id: str) -> Optional[Dict[str, Any]]:
        try:
            res = self.client.get(index=index, id=doc_id)
        except os_exc.NotFoundError:
            return None
        except os_exc.OpenSearchException as exc:
            raise TransientFetchError(f"get {index}/{doc_id} failed: {exc}") from exc
        if not res.get("found", True):
            return None
        return _with_id(res.get("_id", doc_id), res.get("_source"))

    def _search(self, index: str, field: str, value: str, source: Any = True) -> List[Dict[str, Any]]:
        body = {
            "query": {"bool": {"filter": [{"term": {field: value}}]}},
            "_source": source,
            "track_total_hits": True,
        }
        t0 = time.perf_counter()
        try:
            res = self.client.search(index=index, body=body, size=self.max_candidates)
        except os_exc.OpenSearchException as exc:
            raise TransientFetchError(f"search {index} {field}={value} failed: {exc}") from exc
        hits_block = res.get("hits", {}) or {}
        hits = list(hits_block.get("hits", []) or [])
        total = hits_block.get("total")
        if isinstance(total, dict):
            total = total.get("value")
        if isinstance(total, int) and total > len(hits):
            logger.warning(
                "search %s %s=%s matched %d docs but only %d were returned (max_candidates=%d)",
                index, field, value, total, len(hits), self.max_candidates,
            )
        logger.debug(
            "search %s %s=%s -> %d hits in %.1fms",
            index, field, value, len(hits), (time.perf_counter() - t0) * 1000.0,
        )
        return [_with_id(h.get("_id"), h.get("_source")) for h in hits]

    def _mget(self, index: str, ids: List[str]) -> Dict[str, Dict[str, Any]]:
        if not ids:
            return {}
        try:
            res = self.client.mget(index=index, body={"ids": list(ids)})
        except os_exc.OpenSearchException as exc:
            raise TransientFetchError(f"mget {index} failed: {exc}") from exc
        out: Dict[str, Dict[str, Any]] = {}
        for d in res.get("docs") or []:
            if d.get("found"):
                rec = _with_id(d.get("_id"), d.get("_source"))
                out[str(rec["id"])] = rec
        return out

    def get_influencer(self, influencer_id: str) -> Optional[Dict[str, Any]]:
        return self._get(self.indices.users, influencer_id)

    def get_campaign(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        return self._get(self.indices.campaigns, campaign_id)

    def list_active_campaigns(self) -> List[Dict[str, Any]]:
        return self._search(self.indices.campaigns, "status", ACTIVE_STATUS)

    def list_influencers(self) -> List[Dict[str, Any]]:
        return self._search(self.indices.users, "role", INFLUENCER_ROLE)

    def applied_campaign_ids(self, influencer_id: str) -> Set[str]:
        rows = self._search(self.indices.applications, "influencer_id", influencer_id, source=["campaign_id"])
        return {str(r["campaign_id"]) for r in rows if r.get("campaign_id")}

    def applied_influencer_ids(self, campaign_id: str) -> Set[str]:
        rows = self._search(self.indices.applications, "campaign_id", campaign_id, source=["influencer_id"])
        return {str(r["influencer_id"]) for r in rows if r.get("influencer_id")}

    def get_campaigns(self, ids: List[str]) -> Dict[str, Dict[str, Any]]:
        return self._mget(self.indices.campaigns, ids)

    def get_users(self, ids: List[str]) -> Dict[str, Dict[str, Any]]:
        return self._mget(self.indices.users, ids)


class InMemoryStore(MatchStore):
    """Store backed by plain lists of records (JSONL fixtures, tests)."""

    def __init__(
        self,
        users: Iterable[Dict[str, Any]] = (),
        campaigns: Iterable[Dict[str, Any]] = (),
        applications: Iterable[Dict[str, Any]] = (),
    ):
        self.users = [dict(u) for u in users]
        self.campaigns = [dict(c) for c in campaigns]
        self.applications = [dict(a) for a in applications]

    @classmethod
    def from_dir(cls, path: str) -> "InMemoryStore":
        def _load(name: str) -> List[Dict[str, Any]]:
            p = os.path.join(path, name)
            return load_jsonl(p) if os.path.exists(p) else []

        return cls(_load("users.jsonl"), _load("campaigns.jsonl"), _load("applications.jsonl"))

    @staticmethod
    def _find(rows: List[Dict[str, Any]], rid: str) -> Optional[Dict[str, Any]]:
        for r in rows:
            if str(r.get("id")) == str(rid):
                return dict(r)
        return None

    def get_influencer(self, influencer_id: str) -> Optional[Dict[str, Any]]:
        return self._find(self.users, influencer_id)

    def get_campaign(self, campaign_id: str) -> Optional[Dict[str, Any]]:
        return self._find(self.campaigns, campaign_id)

    def list_active_campaigns(self) -> List[Dict[str, Any]]:
        return [dict(c) for c in self.campaigns if c.get("status") == ACTIVE_STATUS]

    def list_influencers(self) -> List[Dict[str, Any]]:
        return [dict(u) for u in self.users if u.get("role") == INFLUENCER_ROLE]

    def applied_campaign_ids(self, influencer_id: str) -> Set[str]:
        return {
            str(a["campaign_id"]) for a in self.applications
            if str(a.get("influencer_id")) == str(influencer_id) and a.get("campaign_id")
        }

    def applied_influencer_ids(self, campaign_id: str) -> Set[str]:
        return {
            str(a["influencer_id"]) for a in self.applications
            if str(a.get("campaign_id")) == str(campaign_id) and a.get("influencer_id")
        }

    def get_campaigns(self, ids: List[str]) -> Dict[str, Dict[str, Any]]:
        want = {str(i) for i in ids}
        return {str(c["id"]): dict(c) for c in self.campaigns if str(c.get("id")) in want}

    def get_users(self, ids: List[str]) -> Dict[str, Dict[str, Any]]:
        want = {str(i) for i in ids}
        return {str(u["id"]): dict(u) for u in self.users if str(u.get("id")) in want}


def load_jsonl(path: str) -> List[Dict[str, Any]]:
    rows: List[Dict[str, Any]] = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            line = line.strip()
            if line:
                rows.append(json.loads(line))
    return rows
