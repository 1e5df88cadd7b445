"""Storage middleware chain and the query logging middleware."""

import time
from collections.abc import Sequence
from functools import partial
from typing import Any

import structlog

from campaignhub.core.logging import get_logger, log_database_query

from .types import NextHandler, QueryMiddleware, QueryParams


def build_chain(middlewares: Sequence[QueryMiddleware], terminal: NextHandler) -> NextHandler:
    """Compose middlewares around a terminal handler.

    The first middleware is the outermost: it sees the call exactly as
    issued by the caller.
    """
    handler = terminal
    for middleware in reversed(middlewares):
        handler = partial(middleware, call_next=handler)
    return handler


class QueryLoggingMiddleware:
    """Logs one ``database_query`` event per storage call with its duration."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self.logger = logger or get_logger(__name__)

    async def __call__(self, params: QueryParams, call_next: NextHandler) -> Any:
        start = time.perf_counter()
        try:
            result = await call_next(params)
        except Exception as exc:
            self.logger.warning(
                "database_query_failed",
                query_type=params.action.value,
                table=params.model.value,
                error_type=type(exc).__name__,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )
            raise

        log_database_query(
            self.logger,
            params.action.value,
            params.model.value,
            (time.perf_counter() - start) * 1000,
        )
        return result
