"""CLI for ranking CRM records against subject stores."""

import argparse

import pandas as pd
import structlog

from storematch.config import MatchConfig
from storematch.io import matches_to_frame, read_candidates, read_queries, write_matches
from storematch.logging import configure_logging
from storematch.matcher import StoreMatcher
from storematch.normalize import normalize_address
from storematch.types import MatchQuery


def _build_config(args: argparse.Namespace) -> MatchConfig:
    config = MatchConfig()
    top_n = getattr(args, "top_n", None)
    if top_n is not None:
        config.ranking.top_n = top_n
    return config


def cmd_rank(args: argparse.Namespace) -> None:
    log = structlog.get_logger()
    candidates = read_candidates(args.candidates)
    log.info("candidates_loaded", path=args.candidates, count=len(candidates))

    query = MatchQuery(
        target_street=args.street,
        target_store_name=args.name,
        city=args.city,
        state=args.state,
        postal_code=args.zip,
    )
    matcher = StoreMatcher(_build_config(args))
    matches = matcher.rank(query, candidates)

    if args.show or not args.output:
        _show_matches(query, matches_to_frame(matches))
    _print_stats(matcher)

    if args.output:
        write_matches(matches, args.output)
        print(f"\nSaved to: {args.output}")


def cmd_lookup(args: argparse.Namespace) -> None:
    """Auto-accept year built / square footage for every subject store."""
    log = structlog.get_logger()
    candidates = read_candidates(args.candidates)
    queries = read_queries(args.stores)
    log.info("lookup_start", stores=len(queries), candidates=len(candidates))

    matcher = StoreMatcher(_build_config(args))
    results = matcher.lookup_many(queries, candidates)

    rows = []
    for query, found in zip(queries, results):
        rows.append({
            "store_name": query.target_store_name,
            "street": query.target_street,
            "city": query.city,
            "state": query.state,
            "zip": query.postal_code,
            "matched_name": found.source_name if found else None,
            "combined_score": round(found.combined_score, 4) if found else None,
            "year_built": found.year_built if found else None,
            "square_footage": found.square_footage if found else None,
        })
    df_out = pd.DataFrame(rows)

    matched = sum(1 for r in results if r is not None)
    print("\n=== Lookup summary ===")
    print(f"  Stores:    {len(queries)}")
    print(f"  Matched:   {matched}")
    print(f"  Unmatched: {len(queries) - matched}")
    _print_stats(matcher)

    if args.output.lower().endswith(".xlsx"):
        df_out.to_excel(args.output, index=False)
    else:
        df_out.to_csv(args.output, index=False)
    print(f"\nSaved to: {args.output}")


def cmd_normalize(args: argparse.Namespace) -> None:
    for address in args.addresses:
        print(f"{address} -> {normalize_address(address)}")


def cmd_serve(args: argparse.Namespace) -> None:
    """Serve the lookup API over HTTP."""
    import uvicorn

    from storematch.server import create_app

    log = structlog.get_logger()
    candidates = read_candidates(args.candidates) if args.candidates else []
    log.info("serve_start", candidates=len(candidates), port=args.port)

    app = create_app(candidates=candidates, config=_build_config(args))
    uvicorn.run(app, host=args.host, port=args.port, log_level="warning")


def _show_matches(query: MatchQuery, df: pd.DataFrame) -> None:
    label = query.target_store_name or query.target_street
    if df.empty:
        print(f"\n=== No matches for {label} ===")
        return
    print(f"\n=== Matches for {label} ({len(df)}) ===")
    print(df.to_string(index=False))


def _print_stats(matcher: StoreMatcher) -> None:
    s = matcher.stats
    print("\n=== Stats ===")
    print(f"  Candidates scanned: {s.candidates}")
    print(f"  No street:          {s.no_street}")
    print(f"  Below thresholds:   {s.filtered_out}")
    print(f"  Returned:           {s.returned}")


def main(argv: list[str] | None = None) -> None:
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (default: LOG_LEVEL env var or INFO)",
    )

    parser = argparse.ArgumentParser(
        description="Self-storage store metadata lookup",
        parents=[parent_parser],
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    rank_parser = subparsers.add_parser("rank", parents=[parent_parser], help="Rank CRM records for one store")
    rank_parser.add_argument("--candidates", required=True, help="CRM export (.csv, .xlsx or .jsonl)")
    rank_parser.add_argument("--street", required=True, help="Subject store street address")
    rank_parser.add_argument("--name", help="Subject store name")
    rank_parser.add_argument("--city")
    rank_parser.add_argument("--state")
    rank_parser.add_argument("--zip")
    rank_parser.add_argument("--top-n", type=int, default=None, help="Maximum matches (default: 10)")
    rank_parser.add_argument("--output", help="Write matches to this file")
    rank_parser.add_argument("--show", action="store_true", help="Display matches on screen")
    rank_parser.set_defaults(func=cmd_rank)

    lookup_parser = subparsers.add_parser("lookup", parents=[parent_parser], help="Batch metadata lookup")
    lookup_parser.add_argument("--stores", required=True, help="Subject stores file")
    lookup_parser.add_argument("--candidates", required=True, help="CRM export (.csv, .xlsx or .jsonl)")
    lookup_parser.add_argument("--output", default="store_metadata.csv", help="Output file path")
    lookup_parser.set_defaults(func=cmd_lookup)

    normalize_parser = subparsers.add_parser("normalize", parents=[parent_parser], help="Normalize street addresses")
    normalize_parser.add_argument("addresses", nargs="+")
    normalize_parser.set_defaults(func=cmd_normalize)

    serve_parser = subparsers.add_parser("serve", parents=[parent_parser], help="Run the HTTP API")
    serve_parser.add_argument("--candidates", help="CRM export loaded at startup")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8765, help="Server port (default: 8765)")
    serve_parser.set_defaults(func=cmd_serve)

    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
