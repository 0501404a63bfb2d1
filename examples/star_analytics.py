#!/usr/bin/env python3
"""
starlens - Star Analytics Example

Computes the star history of a repository twice to show the cache:
1. Fetch the repository summary and (sampled) stargazer pages
2. Print daily history, hourly activity and trends
3. Repeat the request, now answered from the event cache

Run with: python examples/star_analytics.py octocat/Hello-World
"""

import asyncio
import logging
import sys

from starlens import CollectionKey, EventCache, StarlensClient, StarlensError, configure_logging


async def run(key: CollectionKey) -> None:
    owner, repo = key.owner, key.repo
    cache = EventCache()

    async with StarlensClient.from_env(cache=cache) as client:
        # Step 1: First request fetches from GitHub
        print(f"1. Computing star analytics for {owner}/{repo}...")
        analytics = await client.star_analytics(owner, repo)
        print(f"   Total stars: {analytics.total_items}")
        print(f"   Created: {analytics.created_at} ({analytics.age_in_days} days ago)")
        print(f"   Average: {analytics.avg_per_day:.2f} stars/day")
        print(f"   Data completeness: {analytics.data_completeness:.1f}%")
        if analytics.stopped_early:
            print("   Rate budget exhausted, result is partial")

        # Step 2: Trends
        print("\n2. Trends...")
        trends = analytics.trends
        print(f"   Last 7 days: {trends.avg_7d:.2f}/day")
        print(f"   Last 30 days: {trends.avg_30d:.2f}/day")
        print(f"   Peak: {trends.peak_day.date} ({trends.peak_day.daily_count} stars)")
        print(f"   Direction: {trends.direction.value} ({trends.growth_rate_percent:+.2f}%)")

        print("\n   Recent days:")
        for bucket in analytics.recent_activity[-7:]:
            print(f"   - {bucket.date}: +{bucket.daily_count} (total {bucket.cumulative_count})")

        busiest = max(analytics.hourly_activity, key=lambda bucket: bucket.count)
        print(f"   Busiest hour this week: {busiest.hour:%Y-%m-%d %H:00} UTC ({busiest.count} stars)")

        # Step 3: Second request is served from the cache
        print("\n3. Repeating the request...")
        again = await client.star_analytics(owner, repo)
        print(f"   From cache: {again.from_cache}")


def main() -> None:
    try:
        key = CollectionKey.parse(sys.argv[1] if len(sys.argv) == 2 else "")
    except ValueError:
        print("usage: star_analytics.py OWNER/REPO")
        sys.exit(2)

    configure_logging(level=logging.WARNING, fetch_level=logging.INFO)

    try:
        asyncio.run(run(key))
    except StarlensError as e:
        print(f"\nError: [{e.code}] {e.message}")
        if e.request_id:
            print(f"Request ID: {e.request_id}")
        sys.exit(1)


if __name__ == "__main__":
    main()
