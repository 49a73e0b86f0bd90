"""Protean Engine runner for Dee-licious Bakes domains.

Starts Engine workers that process events asynchronously when the
``production`` overlay is active:
- OutboxProcessor: polls outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams, invokes projectors and event handlers

Usage:
    python src/server.py                        # Run every domain engine
    python src/server.py --domain notifications # Run only the notifications engine
"""

import argparse
import asyncio
import importlib

from protean.server.engine import Engine

DOMAIN_NAMES = ["identity", "catalogue", "ordering", "messaging", "notifications"]


def _get_domain(name):
    """Import and initialize a domain by name."""
    if name not in DOMAIN_NAMES:
        raise ValueError(f"Unknown domain: {name}")
    domain = getattr(importlib.import_module(f"{name}.domain"), name)
    domain.init()
    return domain


async def run(domain_names):
    engines = [Engine(_get_domain(name)) for name in domain_names]
    await asyncio.gather(*(engine.run() for engine in engines))


def main():
    parser = argparse.ArgumentParser(description="Dee-licious Bakes Engine runner")
    parser.add_argument(
        "--domain",
        choices=DOMAIN_NAMES,
        help="Run a single domain engine (default: run all)",
    )
    args = parser.parse_args()

    domain_names = [args.domain] if args.domain else DOMAIN_NAMES

    asyncio.run(run(domain_names))


if __name__ == "__main__":
    main()
