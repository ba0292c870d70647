#!/usr/bin/env python3
"""
Run simulated requests through the windowed dispatcher.

Settings come from a YAML config file when given, otherwise from
WINDOWED_DISPATCH_* environment variables (a .env file is honored).
"""

import argparse
import asyncio
import random

from dotenv import load_dotenv

from windowed_dispatch import DispatcherConfig, RateLimitedDispatcher, load_dispatch_config
from windowed_dispatch.utils import setup_logging


def make_request(index: int, max_latency: float):
    async def _request() -> dict:
        await asyncio.sleep(random.uniform(0, max_latency))
        return {"request": index}

    return _request


def main() -> None:
    load_dotenv()

    parser = argparse.ArgumentParser(description="Dispatch simulated requests in throttled windows.")
    parser.add_argument("--config", help="Path to dispatcher config YAML")
    parser.add_argument("--requests", type=int, default=100, help="Number of simulated requests")
    parser.add_argument("--max-latency", type=float, default=0.5, help="Upper bound of simulated latency (s)")
    parser.add_argument("--log-level", default="INFO")
    parser.add_argument("--dispatch-log-level", help="Level for windowed_dispatch loggers only")
    args = parser.parse_args()

    setup_logging(args.log_level, dispatch_level=args.dispatch_log_level)
    cfg = load_dispatch_config(args.config) if args.config else DispatcherConfig.from_env()

    dispatcher = RateLimitedDispatcher.from_config(
        cfg,
        on_batch_complete=lambda batch: print(
            f"Batch [{batch.start_index}, {batch.stop_index}]: {len(batch.results)} results"
        ),
        on_progress=lambda progress: print(
            f"Progress: {progress.completed_requests}/{progress.total_requests}"
        ),
    )
    requests = [make_request(i, args.max_latency) for i in range(args.requests)]
    results = asyncio.run(dispatcher.run(requests))
    print(f"Completed {len(results)} requests in {dispatcher.stats.last_time_ms / 1000:.1f}s.")


if __name__ == "__main__":
    main()
