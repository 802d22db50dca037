#!/usr/bin/env python3
"""
Run matching once for a property or a client.

Usage:
    uv run python scripts/run_matching.py --property 6f1c0d2e-...
    uv run python scripts/run_matching.py --client 9a7b... --min-score 70
    uv run python scripts/run_matching.py --client 9a7b... --no-emit
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

load_dotenv()

from src.connections.postgres import close_postgres  # noqa: E402
from src.jobs.matching import MatchingService  # noqa: E402
from src.matching import BatchMatcher, EntityNotFoundError  # noqa: E402


async def main(args: argparse.Namespace) -> int:
    """Run one matching pass and print ranked results."""
    matcher = BatchMatcher(min_score=args.min_score)
    service = MatchingService(matcher=matcher, enable_emit=not args.no_emit)

    anchor = f"property {args.property}" if args.property else f"client {args.client}"
    print(f"\n{'=' * 60}")
    print(f"Matching {anchor} (min score {matcher.min_score})")
    print(f"{'=' * 60}\n")

    try:
        if args.property:
            batch, emitted = await service.find_matches_for_property(args.property)
        else:
            batch, emitted = await service.find_matches_for_client(args.client)
    except EntityNotFoundError as e:
        print(f"Error: {e}")
        return 1
    finally:
        await close_postgres()

    for rank, match in enumerate(batch.matches, start=1):
        print(
            f"{rank:>3}. score {match.score:>3}  "
            f"profile {match.purchase_profile_id}  property {match.property_id}"
        )
        for reason in match.reasons:
            print(f"       + {reason}")
        for concern in match.concerns:
            print(f"       ! {concern}")

    print(f"\nEvaluated {batch.evaluated} pairs, {len(batch.matches)} matches")
    for warning in batch.warnings:
        print(f"Skipped {warning.entity_type} {warning.entity_id}: {warning.message}")
    if emitted:
        print(f"Saved {emitted['saved']}/{emitted['total']}, {emitted['notified']} notifications")

    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run property / client matching once")
    anchor = parser.add_mutually_exclusive_group(required=True)
    anchor.add_argument("--property", help="Property ID to match against all profiles")
    anchor.add_argument("--client", help="Client ID to match against all properties")
    parser.add_argument("--min-score", type=int, default=None, help="Score threshold override")
    parser.add_argument("--no-emit", action="store_true", help="Do not save matches or notify")

    sys.exit(asyncio.run(main(parser.parse_args())))
