"""Sample usage: retry a flaky async call and inspect statistics"""

import asyncio
import logging
import random

from retrykit import ExhaustedError, NonRetryableError, OperationError, RetryExecutor

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")


async def fetch_quote():
    """Fails with a transient error most of the time"""
    if random.random() < 0.6:
        raise OperationError("connection reset by peer", code="ECONNRESET")
    return {"symbol": "ACME", "price": 42.0}


async def login():
    raise PermissionError("Invalid authentication credentials")


async def main():
    executor = RetryExecutor.create(max_attempts=4, base_delay=50, max_delay=1000)

    for _ in range(3):
        try:
            outcome = await executor.execute(fetch_quote)
            print(f"Got {outcome.value} after {outcome.attempts_used} attempt(s)")
        except ExhaustedError as e:
            print(f"Gave up after {e.attempts} attempts: {e.last_error}")

    try:
        await executor.execute(login, {"max_attempts": 10})
    except NonRetryableError as e:
        print(f"Not retried: {e.error} (attempts: {e.attempts})")

    print(executor.whoami())
    print(executor.to_serializable())


if __name__ == "__main__":
    asyncio.run(main())
