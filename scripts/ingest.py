"""Run feed ingestion from the command line.

Usage:
    python -m scripts.ingest                # All sources
    python -m scripts.ingest bbc aljazeera  # Selected sources
"""

import asyncio
import logging
import sys

from newsreader.services.ingestion.orchestrator import run_all_sources

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


async def main(argv: list[str]) -> int:
    sources = argv or None

    print("Starting feed ingestion...")
    results = await run_all_sources(sources=sources)

    print("\nIngestion complete:")
    for result in results:
        if result.error:
            print(f"  {result.source:<10} FAILED: {result.error}")
        else:
            print(f"  {result.source:<10} {result.count} drafts")
    print(f"  Total:     {sum(r.count for r in results)}")

    # Fail only if every source failed
    if results and all(r.error for r in results):
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main(sys.argv[1:])))
