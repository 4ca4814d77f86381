import argparse
import json
import random
from pathlib import Path
from typing import Any, Dict, List, Tuple


def parse_args():
    ap = argparse.ArgumentParser()
    ap.add_argument("--n-influencers", type=int, default=2000)
    ap.add_argument("--n-brands", type=int, default=50)
    ap.add_argument("--n-campaigns", type=int, default=300)
    ap.add_argument("--apply-rate", type=float, default=0.01, help="Chance an influencer applied to a given active campaign.")
    ap.add_argument("--seed", type=int, default=7)
    ap.add_argument("--out-dir", type=str, default=".")
    return ap.parse_args()


# -----------------------------
# Content dictionaries
# -----------------------------

NICHES = [
    "Beauty", "Music", "Sports", "Tech", "Fitness", "Gaming", "Food", "Fashion", "Travel", "Comedy", "Lifestyle"
]

LOCATIONS = ["New York", "Los Angeles", "Chicago", "Miami", "Austin", "London", "Toronto", "Madrid"]

STATUSES: List[Tuple[str, float]] = [("active", 0.6), ("draft", 0.15), ("completed", 0.15), ("cancelled", 0.1)]


# -----------------------------
# Helpers
# -----------------------------

def pick_weighted(items: List[Tuple[str, float]]) -> str:
    r = random.random() * sum(w for _, w in items)
    acc = 0.0
    for v, w in items:
        acc += w
        if r <= acc:
            return v
    return items[-1][0]


def random_name() -> str:
    first = random.choice(["Alex", "Jordan", "Taylor", "Sam", "Casey", "Riley", "Jamie", "Morgan", "Avery", "Drew"])
    last = random.choice(["Lopez", "Smith", "Garcia", "Johnson", "Martinez", "Brown", "Davis", "Miller", "Wilson"])
    return f"{first} {last}"


def maybe(value: Any, p_missing: float) -> Any:
    return None if random.random() < p_missing else value


def make_influencer(i: int) -> Dict[str, Any]:
    followers = int(max(100, random.lognormvariate(9.0, 1.3)))
    likes = int(max(0, followers * random.uniform(0.005, 0.08)))
    comments = int(max(0, likes * random.uniform(0.01, 0.1)))
    has_rate = random.random() < 0.5
    profile = {
        "niches": random.sample(NICHES, k=random.randint(1, 3)),
        "location": maybe(random.choice(LOCATIONS), 0.2),
        "audience_size": maybe(followers, 0.1),
        "engagement_rate": round((likes + comments) / followers, 4) if has_rate else None,
        "followers_count": followers,
        "avg_likes": maybe(likes, 0.3),
        "avg_comments": maybe(comments, 0.3),
    }
    return {"id": f"inf_{i:06d}", "role": "influencer", "full_name": random_name(), "profile": profile}


def make_brand(i: int) -> Dict[str, Any]:
    return {"id": f"brand_{i:04d}", "role": "brand", "full_name": f"{random_name()} Co."}


def make_campaign(i: int, brand_ids: List[str]) -> Dict[str, Any]:
    niches = random.sample(NICHES, k=random.randint(1, 3))
    lo = random.choice([None, 1000, 5000, 10000, 50000])
    hi = random.choice([None, 20000, 100000, 500000])
    if lo is not None and hi is not None and lo > hi:
        lo, hi = hi, lo
    tas = {k: v for k, v in (("min", lo), ("max", hi)) if v is not None}
    return {
        "id": f"cmp_{i:05d}",
        "brand_id": random.choice(brand_ids),
        "title": f"{' & '.join(niches)} push #{i}",
        "description": f"Looking for {', '.join(niches).lower()} creators.",
        "status": pick_weighted(STATUSES),
        "budget": round(random.uniform(200, 20000), 2),
        "target_niche": niches,
        "target_location": maybe(random.choice(LOCATIONS), 0.4),
        "target_audience_size": tas or None,
    }


def write_jsonl(path: Path, rows: List[Dict[str, Any]]) -> None:
    with path.open("w", encoding="utf-8") as f:
        for r in rows:
            f.write(json.dumps(r, ensure_ascii=False) + "\n")


def main():
    args = parse_args()
    random.seed(args.seed)
    out = Path(args.out_dir)
    out.mkdir(parents=True, exist_ok=True)

    influencers = [make_influencer(i) for i in range(args.n_influencers)]
    brands = [make_brand(i) for i in range(args.n_brands)]
    campaigns = [make_campaign(i, [b["id"] for b in brands]) for i in range(args.n_campaigns)]

    applications: List[Dict[str, Any]] = []
    active = [c for c in campaigns if c["status"] == "active"]
    for inf in influencers:
        for c in active:
            if random.random() < args.apply_rate:
                applications.append({
                    "id": f"app_{len(applications):07d}",
                    "campaign_id": c["id"],
                    "influencer_id": inf["id"],
                    "status": pick_weighted([("pending", 0.6), ("accepted", 0.25), ("rejected", 0.15)]),
                })

    write_jsonl(out / "users.jsonl", influencers + brands)
    write_jsonl(out / "campaigns.jsonl", campaigns)
    write_jsonl(out / "applications.jsonl", applications)
    with (out / "influencer_ids.txt").open("w", encoding="utf-8") as f:
        f.write("\n".join(i["id"] for i in influencers) + "\n")

    print(f"Wrote {len(influencers)} influencers, {len(brands)} brands, "
          f"{len(campaigns)} campaigns ({len(active)} active), {len(applications)} applications to {out}")


if __name__ == "__main__":
    main()
