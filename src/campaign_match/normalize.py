from __future__ import annotations
import logging
import math
from typing import Any, Dict, Iterable, List, Optional

from .schemas import AudienceRange, CampaignDescriptor, EngagementMetrics, InfluencerProfile

logger = logging.getLogger(__name__)

def _safe_float(x: Any) -> Optional[float]:
    if x is None or isinstance(x, bool):
        return None
    try:
        f = float(x)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None

def _safe_int(x: Any) -> Optional[int]:
    f = _safe_float(x)
    return None if f is None else int(f)

def _clean_str(x: Any) -> Optional[str]:
    if x is None:
        return None
    s = str(x).strip()
    return s or None

def _tags(raw: Any) -> List[str]:
    if isinstance(raw, str):
        raw = [raw]
    elif not isinstance(raw, (list, tuple, set)):
        return []
    out: List[str] = []
    for x in raw or []:
        s = _clean_str(x)
        if s and s not in out:
            out.append(s)
    return out

def _require_id(record: Dict[str, Any], kind: str) -> str:
    rid = _clean_str(record.get("id"))
    if rid is None:
        raise ValueError(f"{kind} record has no id")
    return rid

def influencer_from_record(record: Dict[str, Any]) -> InfluencerProfile:
    """Build an InfluencerProfile from a user row with a joined ``profile`` object.

    Fields are read from ``record["profile"]`` when it exists, otherwise from the
    record itself. Unknown or malformed values become ``None`` ("absent").
    """
    prof = record.get("profile")
    if not isinstance(prof, dict):
        prof = record
    niches = prof.get("niches")
    if niches is None:
        niches = prof.get("niche")

    return InfluencerProfile(
        id=_require_id(record, "influencer"),
        niches=_tags(niches),
        location=_clean_str(prof.get("location")),
        audience_size=_safe_int(prof.get("audience_size")),
        engagement_rate=_safe_float(prof.get("engagement_rate")),
        metrics=EngagementMetrics(
            followers=_safe_float(prof.get("followers_count")),
            average_likes=_safe_float(prof.get("avg_likes")),
            average_comments=_safe_float(prof.get("avg_comments")),
        ),
    )

def campaign_from_record(record: Dict[str, Any]) -> CampaignDescriptor:
    tas = record.get("target_audience_size")
    audience = None
    if isinstance(tas, dict):
        audience = AudienceRange(min=_safe_int(tas.get("min")), max=_safe_int(tas.get("max")))

    return CampaignDescriptor(
        id=_require_id(record, "campaign"),
        title=str(record.get("title") or ""),
        target_niche=_tags(record.get("target_niche")),
        target_location=_clean_str(record.get("target_location")),
        target_audience_size=audience,
    )

def influencers_from_records(records: Iterable[Dict[str, Any]]) -> List[InfluencerProfile]:
    out: List[InfluencerProfile] = []
    for r in records:
        try:
            out.append(influencer_from_record(r))
        except ValueError as exc:
            logger.debug("skipping influencer record: %s", exc)
    return out

def campaigns_from_records(records: Iterable[Dict[str, Any]]) -> List[CampaignDescriptor]:
    out: List[CampaignDescriptor] = []
    for r in records:
        try:
            out.append(campaign_from_record(r))
        except ValueError as exc:
            logger.debug("skipping campaign record: %s", exc)
    return out
