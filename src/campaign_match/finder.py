"""
Match finder: ranks campaigns for an influencer, or influencers for a campaign.

Recommendations are supplementary content. A failed data-store read
(``TransientFetchError``) is logged and degrades to an empty list; only a
missing anchor entity (``NotFoundError``) reaches the caller.
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from .errors import NotFoundError, TransientFetchError
from .normalize import campaign_from_record, campaigns_from_records, influencer_from_record, influencers_from_records
from .schemas import MatchResult
from .scoring import score_match
from .store import MatchStore

logger = logging.getLogger(__name__)

DEFAULT_MIN_MATCH_SCORE = 60


def rank_matches(
    matches: List[MatchResult],
    min_match_score: int,
    tie_key: Callable[[MatchResult], str],
) -> List[MatchResult]:
    """Keep matches scoring at least ``min_match_score``; best first, ties by ascending id."""
    kept = [m for m in matches if m.match_score >= min_match_score]
    kept.sort(key=lambda m: (-m.match_score, tie_key(m)))
    return kept


class MatchFinder:
    def __init__(self, store: MatchStore, min_match_score: int = DEFAULT_MIN_MATCH_SCORE):
        self.store = store
        self.min_match_score = int(min_match_score)

    def _threshold(self, min_match_score: Optional[int]) -> int:
        return self.min_match_score if min_match_score is None else int(min_match_score)

    def find_matching_campaigns(self, influencer_id: str, min_match_score: Optional[int] = None) -> List[MatchResult]:
        """
        Active campaigns the influencer has not applied to, scored and ranked.

        Raises:
            NotFoundError: No influencer with this id.
        """
        threshold = self._threshold(min_match_score)
        try:
            record = self.store.get_influencer(influencer_id)
            if record is None:
                raise NotFoundError("influencer", influencer_id)
            influencer = influencer_from_record(record)

            campaign_records = self.store.list_active_campaigns()
            if not campaign_records:
                return []
            applied = self.store.applied_campaign_ids(influencer_id)
        except TransientFetchError as exc:
            logger.warning("Error finding matching campaigns for influencer %s: %s", influencer_id, exc)
            return []

        candidates = [c for c in campaigns_from_records(campaign_records) if c.id not in applied]
        matches = [score_match(influencer, c) for c in candidates]
        ranked = rank_matches(matches, threshold, tie_key=lambda m: m.campaign_id)
        logger.info(
            "influencer %s: %d candidates, %d excluded, %d matches >= %d",
            influencer_id, len(campaign_records), len(applied), len(ranked), threshold,
        )
        return ranked

    def find_matching_influencers(self, campaign_id: str, min_match_score: Optional[int] = None) -> List[MatchResult]:
        """
        Influencer-role users who have not applied to the campaign, scored and ranked.

        Raises:
            NotFoundError: No campaign with this id.
        """
        threshold = self._threshold(min_match_score)
        try:
            record = self.store.get_campaign(campaign_id)
            if record is None:
                raise NotFoundError("campaign", campaign_id)
            campaign = campaign_from_record(record)

            influencer_records = self.store.list_influencers()
            if not influencer_records:
                return []
            applied = self.store.applied_influencer_ids(campaign_id)
        except TransientFetchError as exc:
            logger.warning("Error finding matching influencers for campaign %s: %s", campaign_id, exc)
            return []

        candidates = [i for i in influencers_from_records(influencer_records) if i.id not in applied]
        matches = [score_match(i, campaign) for i in candidates]
        ranked = rank_matches(matches, threshold, tie_key=lambda m: m.influencer_id)
        logger.info(
            "campaign %s: %d candidates, %d excluded, %d matches >= %d",
            campaign_id, len(influencer_records), len(applied), len(ranked), threshold,
        )
        return ranked

    def _enrich(self, matches: List[MatchResult], key: str, fetch: Callable, attr: str) -> List[Dict[str, Any]]:
        ids = [getattr(m, attr) for m in matches]
        try:
            details = fetch(ids) if ids else {}
        except TransientFetchError as exc:
            logger.warning("Could not load %s details: %s", key, exc)
            details = {}
        out: List[Dict[str, Any]] = []
        for m in matches:
            row = m.model_dump(by_alias=True)
            row[key] = details.get(getattr(m, attr))
            out.append(row)
        return out

    def enrich_campaign_matches(self, matches: List[MatchResult]) -> List[Dict[str, Any]]:
        """Attach the full campaign record to each match (``None`` if unavailable)."""
        return self._enrich(matches, "campaign", self.store.get_campaigns, "campaign_id")

    def enrich_influencer_matches(self, matches: List[MatchResult]) -> List[Dict[str, Any]]:
        return self._enrich(matches, "influencer", self.store.get_users, "influencer_id")
