"""Storage client exposing one delegate per entity.

Every call issued through a delegate becomes a QueryParams descriptor and
runs through the middleware chain before reaching the StorageEngine::

    client = create_storage_client(session)
    campaigns = await client.campaign.find_many(where={"workspace_id": ws_id})
    await client.campaign.delete(where={"id": campaign_id})  # soft delete
"""

from collections.abc import Callable, Mapping, Sequence
from datetime import datetime
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from campaignhub.db.models.base import Base, utcnow
from campaignhub.db.models.registry import MODEL_REGISTRY, ModelName

from .engine import StorageEngine
from .middleware import QueryLoggingMiddleware, build_chain
from .soft_delete import SoftDeleteMiddleware
from .types import QueryAction, QueryMiddleware, QueryParams

Where = Mapping[str, Any]
OrderBy = Mapping[str, str] | Sequence[Mapping[str, str]]


def _compact(**kwargs: Any) -> dict[str, Any]:
    return {key: value for key, value in kwargs.items() if value is not None}


class ModelDelegate:
    """Query operations for a single entity."""

    def __init__(self, client: "StorageClient", model: ModelName):
        self._client = client
        self.model = model

    async def _dispatch(self, action: QueryAction, **args: Any) -> Any:
        return await self._client.dispatch(QueryParams(self.model, action, _compact(**args)))

    async def find_many(
        self,
        *,
        where: Where | None = None,
        select: Mapping[str, bool] | None = None,
        include: Mapping[str, Any] | None = None,
        order_by: OrderBy | None = None,
        take: int | None = None,
        skip: int | None = None,
    ) -> list[Any]:
        return await self._dispatch(
            QueryAction.FIND_MANY,
            where=where,
            select=select,
            include=include,
            order_by=order_by,
            take=take,
            skip=skip,
        )

    async def find_first(
        self,
        *,
        where: Where | None = None,
        select: Mapping[str, bool] | None = None,
        include: Mapping[str, Any] | None = None,
        order_by: OrderBy | None = None,
        skip: int | None = None,
    ) -> Any | None:
        return await self._dispatch(
            QueryAction.FIND_FIRST,
            where=where,
            select=select,
            include=include,
            order_by=order_by,
            skip=skip,
        )

    async def find_unique(
        self,
        *,
        where: Where,
        select: Mapping[str, bool] | None = None,
        include: Mapping[str, Any] | None = None,
    ) -> Any | None:
        return await self._dispatch(
            QueryAction.FIND_UNIQUE, where=where, select=select, include=include
        )

    async def count(self, *, where: Where | None = None) -> int:
        return await self._dispatch(QueryAction.COUNT, where=where)

    async def create(self, *, data: Mapping[str, Any]) -> Any:
        return await self._dispatch(QueryAction.CREATE, data=data)

    async def update(self, *, where: Where, data: Mapping[str, Any]) -> Any:
        return await self._dispatch(QueryAction.UPDATE, where=where, data=data)

    async def update_many(self, *, data: Mapping[str, Any], where: Where | None = None) -> dict:
        return await self._dispatch(QueryAction.UPDATE_MANY, where=where, data=data)

    async def upsert(
        self, *, where: Where, create: Mapping[str, Any], update: Mapping[str, Any]
    ) -> Any:
        return await self._dispatch(QueryAction.UPSERT, where=where, create=create, update=update)

    async def delete(self, *, where: Where) -> Any:
        return await self._dispatch(QueryAction.DELETE, where=where)

    async def delete_many(self, *, where: Where | None = None) -> dict:
        return await self._dispatch(QueryAction.DELETE_MANY, where=where)


class StorageClient:
    """Entry point for all entity access.

    The middleware chain is composed once at construction; there is no way
    to reach the engine around it through this client.

    Attributes:
        engine: Terminal handler executing descriptors
        middlewares: Middlewares in outermost-first order
    """

    def __init__(
        self,
        session: AsyncSession,
        middlewares: Sequence[QueryMiddleware] = (),
        *,
        registry: Mapping[ModelName, type[Base]] = MODEL_REGISTRY,
    ):
        self.session = session
        self.engine = StorageEngine(session, registry)
        self.middlewares = tuple(middlewares)
        self._handler = build_chain(self.middlewares, self.engine.execute)
        self._delegates = {name: ModelDelegate(self, name) for name in ModelName}

        self.workspace = self._delegates[ModelName.WORKSPACE]
        self.workspace_member = self._delegates[ModelName.WORKSPACE_MEMBER]
        self.campaign = self._delegates[ModelName.CAMPAIGN]
        self.ad_creative = self._delegates[ModelName.AD_CREATIVE]
        self.ai_log = self._delegates[ModelName.AI_LOG]
        self.integration = self._delegates[ModelName.INTEGRATION]
        self.user_session = self._delegates[ModelName.USER_SESSION]

    def delegate(self, model: ModelName) -> ModelDelegate:
        """Get the delegate for an entity by name."""
        return self._delegates[model]

    async def dispatch(self, params: QueryParams) -> Any:
        """Run a descriptor through the middleware chain."""
        return await self._handler(params)


def create_storage_client(
    session: AsyncSession,
    *,
    clock: Callable[[], datetime] = utcnow,
) -> StorageClient:
    """Create the application's storage client.

    Soft-delete handling is registered outermost so the logged descriptor
    is the one the engine actually runs.
    """
    return StorageClient(
        session,
        [SoftDeleteMiddleware(clock=clock), QueryLoggingMiddleware()],
    )
