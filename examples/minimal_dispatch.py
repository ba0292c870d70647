import asyncio

from dotenv import load_dotenv

from windowed_dispatch import DispatcherConfig, DispatchOptions, dispatch


async def fetch_square(n: int) -> int:
    await asyncio.sleep(0.05 * (n % 3))
    return n * n


def main() -> None:
    # Load WINDOWED_DISPATCH_* settings from .env if present
    load_dotenv()
    cfg = DispatcherConfig.from_env()

    print("▶ Dispatching 50 requests...")
    options = DispatchOptions(
        batch_size=cfg.batch_size or 10,
        on_batch_complete=lambda batch: print(
            f"Batch {batch.start_index}-{batch.stop_index}: {batch.results}"
        ),
        on_progress=lambda p: print(f"{p.completed_requests}/{p.total_requests} done"),
    )
    requests = [lambda n=n: fetch_square(n) for n in range(50)]
    results = asyncio.run(dispatch(requests, cfg.window_size, cfg.interval, options))

    print("\nResults in request order:")
    print(results)


if __name__ == "__main__":
    main()
