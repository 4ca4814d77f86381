import pytest

from campaign_match.store import InMemoryStore


def _influencer(uid, niches, location=None, audience_size=None, engagement_rate=None):
    return {
        "id": uid,
        "role": "influencer",
        "profile": {
            "niches": niches,
            "location": location,
            "audience_size": audience_size,
            "engagement_rate": engagement_rate,
        },
    }


def _campaign(cid, niches, location=None, tas=None, status="active", title=None):
    return {
        "id": cid,
        "title": title or f"Campaign {cid}",
        "status": status,
        "target_niche": niches,
        "target_location": location,
        "target_audience_size": tas,
    }


@pytest.fixture
def store():
    users = [
        _influencer("inf_a", ["Fashion"], "NYC", 2000, 0.03),
        _influencer("inf_b", ["Fashion", "Beauty"], "NYC", 3000, 0.05),
        _influencer("inf_c", ["Gaming"], "London", 50, 0.001),
        _influencer("inf_d", ["Fashion", "Beauty"], "NYC", 3000, 0.05),
        {"id": "brand_1", "role": "brand", "full_name": "Acme"},
    ]
    campaigns = [
        _campaign("cmp_1", ["Fashion", "Beauty"], "NYC", {"min": 1000, "max": 5000}),
        _campaign("cmp_2", ["Fashion"], "nyc", {"min": 1000}),
        _campaign("cmp_3", ["Gaming"], "Tokyo", {"max": 10}),
        _campaign("cmp_4", ["Fashion"], "NYC", None, status="draft"),
        _campaign("cmp_0", ["Fashion"], "NYC", {"min": 1000}),
    ]
    applications = [
        {"id": "app_1", "campaign_id": "cmp_2", "influencer_id": "inf_b", "status": "pending"},
        {"id": "app_2", "campaign_id": "cmp_1", "influencer_id": "inf_d", "status": "accepted"},
    ]
    return InMemoryStore(users, campaigns, applications)
