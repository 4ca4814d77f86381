from __future__ import annotations
from typing import Any, Dict, Optional
import math

from .schemas import (
    AudienceRange,
    CampaignDescriptor,
    EngagementMetrics,
    InfluencerProfile,
    MatchDetails,
    MatchResult,
)

WEIGHTS = {
    "niche_score": 0.40,
    "location_score": 0.30,
    "audience_score": 0.20,
    "engagement_score": 0.10,
}

NEUTRAL = 0.5
ENGAGEMENT_CEILING = 0.05  # 5% engagement earns the full sub-score


def _clamp01(x: float) -> float:
    return 0.0 if x < 0 else 1.0 if x > 1 else float(x)


def niche_score(influencer_niches, campaign_niches) -> float:
    want = set(campaign_niches or [])
    have = set(influencer_niches or [])
    if not want or not have:
        return 0.0
    return len(want & have) / float(len(want))


def location_score(influencer_location: Optional[str], campaign_location: Optional[str]) -> float:
    if not influencer_location or not campaign_location:
        return NEUTRAL
    return 1.0 if influencer_location.lower() == campaign_location.lower() else 0.0


def _ramp(size: int, lo: int) -> float:
    if lo <= 0:
        return 0.0
    return max(0.0, size / float(lo))


def _decay(size: int, hi: int) -> float:
    if hi <= 0:
        return 0.0
    return max(0.0, 1.0 - (size - hi) / float(hi))


def audience_score(audience_size: Optional[int], target: Optional[AudienceRange]) -> float:
    # zero audience counts as unknown
    if target is None or not audience_size:
        return NEUTRAL
    lo, hi = target.min, target.max

    if lo is not None and hi is not None:
        if lo <= audience_size <= hi:
            s = 1.0
        elif audience_size < lo:
            s = _ramp(audience_size, lo)
        else:
            s = _decay(audience_size, hi)
    elif lo is not None:
        s = 1.0 if audience_size >= lo else _ramp(audience_size, lo)
    elif hi is not None:
        s = 1.0 if audience_size <= hi else _decay(audience_size, hi)
    else:
        s = NEUTRAL
    return _clamp01(s)


def engagement_score(engagement_rate: Optional[float], metrics: Optional[EngagementMetrics]) -> float:
    # zero rates and zero interaction counts count as unknown
    rate = engagement_rate or None
    if rate is None and metrics is not None:
        interactions = [metrics.average_likes, metrics.average_comments]
        if metrics.followers and any(interactions):
            rate = sum(v or 0.0 for v in interactions) / float(metrics.followers)
    if rate is None:
        return NEUTRAL
    return _clamp01(rate / ENGAGEMENT_CEILING)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def score_match(influencer: InfluencerProfile, campaign: CampaignDescriptor) -> MatchResult:
    """Score one influencer against one campaign.

    Pure and deterministic. Absent optional fields fall back to neutral
    sub-scores instead of raising.
    """
    details = MatchDetails(
        niche_score=_clamp01(niche_score(influencer.niches, campaign.target_niche)),
        location_score=location_score(influencer.location, campaign.target_location),
        audience_score=audience_score(influencer.audience_size, campaign.target_audience_size),
        engagement_score=engagement_score(influencer.engagement_rate, influencer.metrics),
    )
    weighted = sum(w * float(getattr(details, k)) for k, w in WEIGHTS.items())

    return MatchResult(
        campaign_id=campaign.id,
        influencer_id=influencer.id,
        campaign_title=campaign.title,
        match_score=_round_half_up(weighted * 100.0),
        match_details=details,
    )


def explain_match(result: MatchResult) -> Dict[str, Any]:
    feats = result.match_details.model_dump()
    contrib = {k: float(feats[k] * w) for k, w in WEIGHTS.items()}
    raw = float(sum(contrib.values()))
    pos = sorted([(k, v) for k, v in contrib.items() if v > 0], key=lambda x: x[1], reverse=True)[:3]
    return {
        "raw_score": raw,
        "features": feats,
        "contributions": contrib,
        "top_positive": pos,
    }
