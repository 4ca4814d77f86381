from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List

from .bench import benchmark_latency, score_distribution
from .config import AppConfig, load_config
from .errors import NotFoundError
from .finder import MatchFinder
from .normalize import campaign_from_record, influencer_from_record
from .schemas import MatchResult
from .scoring import explain_match, score_match
from .store import InMemoryStore, MatchStore, OpenSearchStore, make_client

logger = logging.getLogger("campaign_match")


def _load_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _dump(obj: Any) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))


def make_store(args: argparse.Namespace, config: AppConfig) -> MatchStore:
    if args.data_dir:
        return InMemoryStore.from_dir(args.data_dir)
    return OpenSearchStore(make_client(config), config.indices, config.matching.max_candidates)


def make_finder(args: argparse.Namespace) -> MatchFinder:
    config = load_config(args.config)
    return MatchFinder(make_store(args, config), min_match_score=config.matching.min_match_score)


def _emit_matches(matches: List[MatchResult], rows: List[Dict[str, Any]], k: int) -> None:
    # limit is applied here, after ranking
    top = rows[:k] if k > 0 else rows
    _dump({"matches": top, "total": len(rows), "scores": score_distribution(matches)})


def cmd_campaigns(args: argparse.Namespace) -> int:
    finder = make_finder(args)
    try:
        matches = finder.find_matching_campaigns(args.influencer_id, args.min_score)
    except NotFoundError as exc:
        logger.error("%s", exc)
        return 1
    rows = finder.enrich_campaign_matches(matches) if args.details else [m.model_dump(by_alias=True) for m in matches]
    _emit_matches(matches, rows, args.k)
    return 0


def cmd_influencers(args: argparse.Namespace) -> int:
    finder = make_finder(args)
    try:
        matches = finder.find_matching_influencers(args.campaign_id, args.min_score)
    except NotFoundError as exc:
        logger.error("%s", exc)
        return 1
    rows = finder.enrich_influencer_matches(matches) if args.details else [m.model_dump(by_alias=True) for m in matches]
    _emit_matches(matches, rows, args.k)
    return 0


def cmd_score(args: argparse.Namespace) -> int:
    try:
        influencer = influencer_from_record(_load_json(args.influencer))
        campaign = campaign_from_record(_load_json(args.campaign))
    except ValueError as exc:
        logger.error("%s", exc)
        return 1
    res = score_match(influencer, campaign)
    out = res.model_dump(by_alias=True)
    out["explain"] = explain_match(res)
    _dump(out)
    return 0


def cmd_latency(args: argparse.Namespace) -> int:
    finder = make_finder(args)
    with open(args.ids, "r", encoding="utf-8") as f:
        ids = [line.strip() for line in f if line.strip()]
    if args.side == "campaigns":
        fn = lambda i: finder.find_matching_campaigns(i, args.min_score)
    else:
        fn = lambda i: finder.find_matching_influencers(i, args.min_score)
    _dump(benchmark_latency(fn, ids, args.n))
    return 0


def _add_common(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", default=None, help="Optional JSON config file.")
    p.add_argument("--data-dir", default=None, help="Read users/campaigns/applications JSONL from this dir instead of OpenSearch.")
    p.add_argument("--min-score", type=int, default=None, help="Minimum match score (default from config, 60).")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser("campaign-match")
    p.add_argument("--log-level", default="WARNING")
    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("campaigns", help="Rank active campaigns for an influencer.")
    c.add_argument("--influencer-id", required=True)
    c.add_argument("--k", type=int, default=0, help="Show only the top K (0 = all).")
    c.add_argument("--details", action="store_true", help="Attach campaign records.")
    _add_common(c)
    c.set_defaults(fn=cmd_campaigns)

    i = sub.add_parser("influencers", help="Rank influencers for a campaign.")
    i.add_argument("--campaign-id", required=True)
    i.add_argument("--k", type=int, default=0, help="Show only the top K (0 = all).")
    i.add_argument("--details", action="store_true", help="Attach influencer records.")
    _add_common(i)
    i.set_defaults(fn=cmd_influencers)

    s = sub.add_parser("score", help="Score one influencer record against one campaign record.")
    s.add_argument("--influencer", required=True)
    s.add_argument("--campaign", required=True)
    s.set_defaults(fn=cmd_score)

    l = sub.add_parser("latency", help="Benchmark finder latency over a file of anchor ids.")
    l.add_argument("--ids", required=True, help="One influencer or campaign id per line.")
    l.add_argument("--side", choices=["campaigns", "influencers"], default="campaigns")
    l.add_argument("--n", type=int, default=50)
    _add_common(l)
    l.set_defaults(fn=cmd_latency)

    return p


def main(argv=None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=str(args.log_level).upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    return int(args.fn(args))


if __name__ == "__main__":
    raise SystemExit(main())
