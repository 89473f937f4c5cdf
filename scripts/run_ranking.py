#!/usr/bin/env python3
"""Run one ranking pass over the active posts.

Meant to be scheduled (e.g. every 15 minutes). Each page is processed in
its own DI request scope, so each page commits in its own transaction and
a failure part way through keeps the pages already written. All pages of
a pass share the same ``now`` and diversity pool.

Usage:
    python scripts/run_ranking.py [--reconcile] [--max-pages N]
"""

import argparse
import asyncio
import sys

import logfire
from dishka import AsyncContainer

from tally.application.usecase.ranking import (
    RecomputeRanksRequest,
    RecomputeRanksUseCase,
)
from tally.config import Settings
from tally.util.di.container import create_container
from tally.util.logging import setup_logging
from tally.util.observability import configure_logfire


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Recompute post ranks")
    parser.add_argument(
        "--reconcile",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Repair vote counters before ranking (default: RANKING__RECONCILE_BEFORE_RUN)",
    )
    parser.add_argument(
        "--max-pages",
        type=int,
        default=None,
        help="Stop after this many pages",
    )
    return parser.parse_args(argv)


async def run_pass(
    container: AsyncContainer,
    reconcile: bool | None = None,
    max_pages: int | None = None,
) -> dict[str, int]:
    """Process pages until the active posts are exhausted.

    The first page fixes ``now`` and the diversity pool; later pages are
    sent both so that the whole pass ranks against the same snapshot.

    Args:
        container: Application container; each page gets its own request scope
        reconcile: Repair counters before ranking (None uses the settings)
        max_pages: Stop after this many pages

    Returns:
        Totals of the pass
    """
    totals = dict(pages=0, processed=0, updated=0, errors=0, repaired=0)
    request = RecomputeRanksRequest(max_pages=1, reconcile=reconcile)

    with logfire.span("run_ranking"):
        while True:
            async with container() as request_container:
                use_case = await request_container.get(RecomputeRanksUseCase)
                response = await use_case.execute(request)

            for key in totals:
                totals[key] += getattr(response, key)

            if response.completed:
                break
            if max_pages is not None and totals["pages"] >= max_pages:
                logfire.info(
                    "Ranking pass paused",
                    next_created_at=response.next_created_at,
                    next_post_id=str(response.next_post_id),
                )
                break

            request = RecomputeRanksRequest(
                after_created_at=response.next_created_at,
                after_post_id=response.next_post_id,
                max_pages=1,
                now=response.now,
                diversity=response.diversity,
                reconcile=reconcile,
            )

        logfire.info("Ranking run finished", **totals)

    return totals


async def run(args: argparse.Namespace) -> int:
    """Run one pass with the production container.

    Returns:
        Process exit code: 1 when any post failed to update
    """
    container = create_container()
    try:
        totals = await run_pass(container, args.reconcile, args.max_pages)
    finally:
        await container.close()

    return 1 if totals["errors"] else 0


def main() -> int:
    settings = Settings()
    setup_logging(settings)
    configure_logfire(settings, service_name="tally-ranking")

    return asyncio.run(run(parse_args()))


if __name__ == "__main__":
    sys.exit(main())
