from __future__ import annotations
import argparse

from campaign_match.config import load_config
from campaign_match.store import make_client

USERS_MAPPING = {
    "properties": {
        "id": {"type": "keyword"},
        "role": {"type": "keyword"},
        "full_name": {"type": "keyword"},
        "profile": {
            "properties": {
                "niches": {"type": "keyword"},
                "location": {"type": "keyword"},
                "audience_size": {"type": "long"},
                "engagement_rate": {"type": "float"},
                "followers_count": {"type": "long"},
                "avg_likes": {"type": "float"},
                "avg_comments": {"type": "float"},
            }
        },
    }
}

CAMPAIGNS_MAPPING = {
    "properties": {
        "id": {"type": "keyword"},
        "brand_id": {"type": "keyword"},
        "title": {"type": "text", "fields": {"raw": {"type": "keyword"}}},
        "description": {"type": "text"},
        "status": {"type": "keyword"},
        "budget": {"type": "float"},
        "target_niche": {"type": "keyword"},
        "target_location": {"type": "keyword"},
        "target_audience_size": {"properties": {"min": {"type": "long"}, "max": {"type": "long"}}},
    }
}

APPLICATIONS_MAPPING = {
    "properties": {
        "id": {"type": "keyword"},
        "campaign_id": {"type": "keyword"},
        "influencer_id": {"type": "keyword"},
        "status": {"type": "keyword"},
    }
}

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=None)
    ap.add_argument("--recreate", action="store_true", help="Delete existing indices first.")
    args = ap.parse_args()

    config = load_config(args.config)
    client = make_client(config)
    idx = config.indices

    for index, mapping in (
        (idx.users, USERS_MAPPING),
        (idx.campaigns, CAMPAIGNS_MAPPING),
        (idx.applications, APPLICATIONS_MAPPING),
    ):
        if client.indices.exists(index=index):
            if not args.recreate:
                print("Exists, skipping", index)
                continue
            client.indices.delete(index=index)
        body = {
            "settings": {"index": {"number_of_shards": 1, "number_of_replicas": 0}},
            "mappings": mapping,
        }
        client.indices.create(index=index, body=body)
        print("Created index", index)

if __name__ == "__main__":
    main()
