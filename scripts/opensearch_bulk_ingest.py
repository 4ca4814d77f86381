from __future__ import annotations
import argparse
import os
from opensearchpy import helpers

from campaign_match.config import load_config
from campaign_match.store import load_jsonl, make_client

def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--config", default=None)
    ap.add_argument("--data-dir", default=".", help="Directory with users/campaigns/applications .jsonl")
    args = ap.parse_args()

    config = load_config(args.config)
    client = make_client(config)
    idx = config.indices

    files = {
        "users.jsonl": idx.users,
        "campaigns.jsonl": idx.campaigns,
        "applications.jsonl": idx.applications,
    }

    for name, index in files.items():
        path = os.path.join(args.data_dir, name)
        if not os.path.exists(path):
            print("Missing, skipping", path)
            continue

        def actions(rows=load_jsonl(path), index=index):
            for obj in rows:
                yield {"_index": index, "_id": str(obj["id"]), "_source": obj}

        ok, _ = helpers.bulk(client, actions(), chunk_size=1000, request_timeout=120)
        client.indices.refresh(index=index)
        print(f"Ingested {ok} docs into {index}")

if __name__ == "__main__":
    main()
