#!/usr/bin/env python3
"""
Basic usage of abortable iterators.

This example demonstrates how to:
1. Stop an async generator when an abort signal fires
2. Read the abort error's message and code
3. End iteration gracefully instead of raising
"""

import asyncio

from abortable_iterator import (
    AbortController,
    AbortError,
    AbortOptions,
    abortable_source,
)


async def ticks():
    """Yield an increasing counter forever."""
    count = 0
    try:
        while True:
            await asyncio.sleep(0.1)
            count += 1
            yield count
    finally:
        print("  ticks() closed")


async def main():
    """Main function demonstrating abortable iteration."""
    print("Aborting with an error after 0.35s...")
    controller = AbortController()
    asyncio.get_running_loop().call_later(0.35, controller.abort, "timeout")

    options = AbortOptions(abort_message="ticker stopped", abort_code="TICKER_TIMEOUT")
    try:
        async for tick in abortable_source(ticks(), controller.signal, options):
            print(f"  tick {tick}")
    except AbortError as exc:
        print(f"  aborted: {exc.message} ({exc.code}, reason={exc.reason!r})")

    print("Aborting gracefully after 0.35s...")
    controller = AbortController()
    asyncio.get_running_loop().call_later(0.35, controller.abort)

    options = AbortOptions(return_on_abort=True)
    wrapped = abortable_source(ticks(), controller.signal, options)
    received = [tick async for tick in wrapped]
    print(f"  received {received}")


if __name__ == "__main__":
    asyncio.run(main())
