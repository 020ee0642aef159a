#!/usr/bin/env python3
"""
Abortable duplex example.

This example demonstrates how to:
1. Wrap both sides of a pipe with one abort signal
2. Receive a single on_abort notification for both sides
3. End both sides gracefully and inspect what was left unread
"""

import asyncio
from typing import Any, List

from abortable_iterator import (
    AbortController,
    AbortOptions,
    Duplex,
    abortable_duplex,
)


class Echo:
    """A toy pipe: the sink records input, the source replays a queue."""

    def __init__(self) -> None:
        self.queue: "asyncio.Queue[str]" = asyncio.Queue()
        for word in ("alpha", "beta", "gamma"):
            self.queue.put_nowait(word)

    async def sink(self, source: Any) -> List[str]:
        received = []
        async for item in source:
            received.append(item)
        return received

    def source(self) -> Any:
        return self._replay()

    async def _replay(self):
        while True:
            yield await self.queue.get()


async def inbound():
    """Send two messages, then stay open."""
    yield "hello"
    yield "world"
    await asyncio.Event().wait()


async def main():
    """Main function demonstrating an abortable duplex."""
    controller = AbortController()
    leftovers: List[str] = []

    async def on_abort(view: Any) -> None:
        print("  on_abort called once")

    echo = Echo()
    pipe = abortable_duplex(
        Duplex(sink=echo.sink, source=echo.source()),
        controller.signal,
        AbortOptions(
            on_abort=on_abort,
            return_on_abort=True,
            report_cleanup_error=lambda exc: print(f"  cleanup error: {exc!r}"),
        ),
    )

    sink_task = asyncio.create_task(pipe.sink(inbound()))
    async for word in pipe.source:
        print(f"  outbound: {word}")
        if word == "beta":
            controller.abort()

    leftovers.extend(echo.queue.get_nowait() for _ in range(echo.queue.qsize()))
    print(f"  inbound received: {await sink_task}")
    print(f"  left in queue: {leftovers}")


if __name__ == "__main__":
    asyncio.run(main())
