from __future__ import annotations
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_WIRE = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

class EngagementMetrics(BaseModel):
    model_config = _WIRE

    followers: Optional[float] = None
    average_likes: Optional[float] = None
    average_comments: Optional[float] = None

class InfluencerProfile(BaseModel):
    model_config = _WIRE

    id: str
    niches: List[str] = Field(default_factory=list)
    location: Optional[str] = None
    audience_size: Optional[int] = None
    engagement_rate: Optional[float] = None
    metrics: EngagementMetrics = Field(default_factory=EngagementMetrics)

class AudienceRange(BaseModel):
    model_config = _WIRE

    min: Optional[int] = None
    max: Optional[int] = None

class CampaignDescriptor(BaseModel):
    model_config = _WIRE

    id: str
    title: str = ""
    target_niche: List[str] = Field(default_factory=list)
    target_location: Optional[str] = None
    target_audience_size: Optional[AudienceRange] = None

class MatchDetails(BaseModel):
    model_config = _WIRE

    niche_score: float
    location_score: float
    audience_score: float
    engagement_score: float

class MatchResult(BaseModel):
    model_config = _WIRE

    campaign_id: str
    influencer_id: str
    campaign_title: str = ""
    match_score: int
    match_details: MatchDetails
