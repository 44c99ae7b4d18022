"""Background job processing with ARQ.

Provides Redis-based async background job processing with:
- Async-native execution (no thread pool overhead)
- Retries with backoff for transient failures
"""

from staffdesk.core.jobs.registry import (
    close_arq_pool,
    enqueue,
    get_arq_pool,
    init_arq_pool,
)


__all__ = [
    "close_arq_pool",
    "enqueue",
    "get_arq_pool",
    "init_arq_pool",
]
