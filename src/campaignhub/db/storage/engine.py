"""Storage engine executing query descriptors against an AsyncSession.

The engine is the terminal handler of the middleware chain. It knows
nothing about soft deletes or tenants; it translates each descriptor
into SQLAlchemy statements and reports failures as StorageError
subclasses. Rows already held by the session are kept in step with what
was written, and included relations are loaded only for the rows a read
returns.
"""

from collections import defaultdict
from collections.abc import Awaitable, Callable, Mapping
from enum import Enum
from typing import Any

from sqlalchemy import delete as sa_delete
from sqlalchemy import func, select
from sqlalchemy import update as sa_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.util import identity_key
from sqlalchemy.orm.attributes import set_committed_value

from campaignhub.db.models.base import Base
from campaignhub.db.models.registry import MODEL_REGISTRY, ModelName

from .exceptions import (
    ConstraintViolationError,
    QueryValidationError,
    RecordNotFoundError,
    StorageError,
)
from .filters import build_order_by, build_where, resolve_column, resolve_relationship
from .types import COUNT_INCLUDE_KEY, QueryAction, QueryParams

# Descriptor keys each action accepts
ALLOWED_ARGS: dict[QueryAction, frozenset[str]] = {
    QueryAction.FIND_MANY: frozenset({"where", "select", "include", "order_by", "take", "skip"}),
    QueryAction.FIND_FIRST: frozenset({"where", "select", "include", "order_by", "skip"}),
    QueryAction.FIND_UNIQUE: frozenset({"where", "select", "include"}),
    QueryAction.COUNT: frozenset({"where"}),
    QueryAction.CREATE: frozenset({"data"}),
    QueryAction.UPDATE: frozenset({"where", "data"}),
    QueryAction.UPDATE_MANY: frozenset({"where", "data"}),
    QueryAction.UPSERT: frozenset({"where", "create", "update"}),
    QueryAction.DELETE: frozenset({"where"}),
    QueryAction.DELETE_MANY: frozenset({"where"}),
}

Handler = Callable[[type[Base], ModelName, dict[str, Any]], Awaitable[Any]]


class StorageEngine:
    """Executes QueryParams against the database.

    Writes are flushed, not committed; the owner of the session decides
    the transaction boundary.

    Attributes:
        session: The async session statements run on
        registry: Entity name to model class mapping
    """

    def __init__(
        self,
        session: AsyncSession,
        registry: Mapping[ModelName, type[Base]] = MODEL_REGISTRY,
    ):
        self.session = session
        self.registry = registry
        self._handlers: dict[QueryAction, Handler] = {
            QueryAction.FIND_MANY: self._find_many,
            QueryAction.FIND_FIRST: self._find_first,
            QueryAction.FIND_UNIQUE: self._find_unique,
            QueryAction.COUNT: self._count,
            QueryAction.CREATE: self._create,
            QueryAction.UPDATE: self._update,
            QueryAction.UPDATE_MANY: self._update_many,
            QueryAction.UPSERT: self._upsert,
            QueryAction.DELETE: self._delete,
            QueryAction.DELETE_MANY: self._delete_many,
        }

    async def execute(self, params: QueryParams) -> Any:
        """Run a storage call.

        Raises:
            QueryValidationError: If the descriptor is malformed
            RecordNotFoundError: If a single-row write matches nothing
            ConstraintViolationError: If the database rejects a write
            StorageError: For any other database failure
        """
        model = self.registry.get(params.model)
        if model is None:
            raise QueryValidationError(
                f"Unregistered model {params.model!r}", str(params.model), params.action.value
            )

        args = dict(params.args)
        unknown = set(args) - ALLOWED_ARGS[params.action]
        if unknown:
            raise QueryValidationError(
                f"Unsupported arguments {sorted(unknown)}",
                params.model.value,
                params.action.value,
            )

        try:
            return await self._handlers[params.action](model, params.model, args)
        except StorageError as e:
            e.model = e.model or params.model.value
            e.action = e.action or params.action.value
            raise
        except IntegrityError as e:
            raise ConstraintViolationError(
                str(e.orig), params.model.value, params.action.value
            ) from e
        except SQLAlchemyError as e:
            raise StorageError(str(e), params.model.value, params.action.value) from e

    # Reads

    async def _find_many(self, model: type[Base], name: ModelName, args: dict[str, Any]) -> list:
        return await self._select_rows(model, args)

    async def _find_first(self, model: type[Base], name: ModelName, args: dict[str, Any]) -> Any:
        rows = await self._select_rows(model, {**args, "take": 1})
        return rows[0] if rows else None

    async def _find_unique(self, model: type[Base], name: ModelName, args: dict[str, Any]) -> Any:
        if not args.get("where"):
            raise QueryValidationError("find_unique requires a where filter")

        rows = await self._select_rows(model, {**args, "take": 2})
        if len(rows) > 1:
            raise QueryValidationError("find_unique filter matched more than one row")
        return rows[0] if rows else None

    async def _count(self, model: type[Base], name: ModelName, args: dict[str, Any]) -> int:
        stmt = select(func.count()).select_from(model).where(build_where(model, args.get("where")))
        result = await self.session.execute(stmt)
        return result.scalar_one()

    async def _select_rows(self, model: type[Base], args: dict[str, Any]) -> list:
        fields = args.get("select")
        include = args.get("include") or {}
        if fields and include:
            raise QueryValidationError("select and include cannot be combined")

        where = build_where(model, args.get("where"))
        count_columns: list[tuple[str, Any]] = []

        if fields:
            columns = [resolve_column(model, key) for key, enabled in fields.items() if enabled]
            if not columns:
                raise QueryValidationError("select must enable at least one field")
            stmt = select(*columns).where(where)
        else:
            count_columns = self._count_columns(model, include.get(COUNT_INCLUDE_KEY))
            stmt = select(model, *(column for _, column in count_columns)).where(where)

        stmt = stmt.order_by(*build_order_by(model, args.get("order_by")))
        if args.get("skip"):
            stmt = stmt.offset(args["skip"])
        if args.get("take") is not None:
            stmt = stmt.limit(args["take"])

        result = await self.session.execute(stmt)

        if fields:
            return [dict(row) for row in result.mappings().all()]

        if count_columns:
            rows = []
            for row in result.all():
                instance = row[0]
                instance.relation_counts = {
                    relation: row[index + 1] for index, (relation, _) in enumerate(count_columns)
                }
                rows.append(instance)
        else:
            rows = list(result.scalars().all())

        await self._load_includes(model, rows, include)
        return rows

    async def _load_includes(
        self, model: type[Base], rows: list, include: Mapping[str, Any]
    ) -> None:
        """Populate included relations on the returned rows.

        Only the named relations are written; attributes an earlier call
        loaded on the same objects are left as they were.
        """
        for relation, spec in include.items():
            if relation == COUNT_INCLUDE_KEY or not spec or not rows:
                continue

            prop = resolve_relationship(model, relation)
            if len(prop.local_remote_pairs) != 1:
                raise QueryValidationError(f"Cannot include composite relation '{relation}'")
            ((local_column, remote_column),) = prop.local_remote_pairs
            target = prop.mapper.class_
            local_key = model.__mapper__.get_property_by_column(local_column).key
            remote_key = target.__mapper__.get_property_by_column(remote_column).key

            related: dict[Any, list] = defaultdict(list)
            keys = {getattr(row, local_key) for row in rows} - {None}
            if keys:
                criteria = getattr(target, remote_key).in_(list(keys))
                if isinstance(spec, Mapping) and spec.get("where"):
                    criteria = criteria & build_where(target, spec["where"])
                stmt = select(target).where(criteria)
                if prop.order_by:
                    stmt = stmt.order_by(*prop.order_by)

                result = await self.session.execute(stmt)
                for child in result.scalars().all():
                    related[getattr(child, remote_key)].append(child)

            for row in rows:
                children = related.get(getattr(row, local_key), [])
                if prop.uselist:
                    set_committed_value(row, relation, children)
                else:
                    set_committed_value(row, relation, children[0] if children else None)

    def _count_columns(self, model: type[Base], spec: Any) -> list[tuple[str, Any]]:
        if not spec:
            return []
        if not isinstance(spec, Mapping) or not isinstance(spec.get("select"), Mapping):
            raise QueryValidationError('_count include must look like {"select": {...}}')

        columns = []
        for relation, relation_spec in spec["select"].items():
            if not relation_spec:
                continue

            prop = resolve_relationship(model, relation)
            if not prop.uselist:
                raise QueryValidationError(f"Cannot count to-one relation '{relation}'")

            target = prop.mapper.class_
            criteria = prop.primaryjoin
            if isinstance(relation_spec, Mapping) and relation_spec.get("where"):
                criteria = criteria & build_where(target, relation_spec["where"])

            subquery = (
                select(func.count())
                .select_from(target)
                .where(criteria)
                .correlate(model)
                .scalar_subquery()
                .label(f"_count_{relation}")
            )
            columns.append((relation, subquery))
        return columns

    # Writes

    async def _create(self, model: type[Base], name: ModelName, args: dict[str, Any]) -> Base:
        instance = model(**self._column_values(model, args.get("data")))
        self.session.add(instance)
        await self.session.flush()
        return instance

    async def _update(self, model: type[Base], name: ModelName, args: dict[str, Any]) -> Base:
        values = self._column_values(model, args.get("data"))
        instance = await self._single_row(model, name, QueryAction.UPDATE, args.get("where"))
        for key, value in values.items():
            setattr(instance, key, value)
        await self.session.flush()
        return instance

    async def _update_many(
        self, model: type[Base], name: ModelName, args: dict[str, Any]
    ) -> dict[str, int]:
        values = self._column_values(model, args.get("data"))
        ids = await self._matching_ids(model, args.get("where"))
        if not ids:
            return {"count": 0}

        pk_column = model.__mapper__.primary_key[0]
        stmt = (
            sa_update(model)
            .where(pk_column.in_(ids))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

        # Keep rows already in the session in step with the database
        for instance in self._identities(model, ids):
            for key, value in values.items():
                set_committed_value(instance, key, value)
        return {"count": len(ids)}

    async def _upsert(self, model: type[Base], name: ModelName, args: dict[str, Any]) -> Base:
        where = args.get("where")
        if not where:
            raise QueryValidationError("upsert requires a where filter")

        rows = await self._select_rows(model, {"where": where, "take": 2})
        if len(rows) > 1:
            raise QueryValidationError("upsert filter matched more than one row")

        if not rows:
            return await self._create(model, name, {"data": args.get("create")})

        instance = rows[0]
        for key, value in self._column_values(model, args.get("update") or {}, allow_empty=True).items():
            setattr(instance, key, value)
        await self.session.flush()
        return instance

    async def _delete(self, model: type[Base], name: ModelName, args: dict[str, Any]) -> Base:
        instance = await self._single_row(model, name, QueryAction.DELETE, args.get("where"))
        pk_column = model.__mapper__.primary_key[0]
        stmt = (
            sa_delete(model)
            .where(pk_column == getattr(instance, pk_column.key))
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)
        self.session.expunge(instance)
        return instance

    async def _delete_many(
        self, model: type[Base], name: ModelName, args: dict[str, Any]
    ) -> dict[str, int]:
        ids = await self._matching_ids(model, args.get("where"))
        if not ids:
            return {"count": 0}

        pk_column = model.__mapper__.primary_key[0]
        stmt = (
            sa_delete(model)
            .where(pk_column.in_(ids))
            .execution_options(synchronize_session=False)
        )
        await self.session.execute(stmt)

        for instance in self._identities(model, ids):
            self.session.expunge(instance)
        return {"count": len(ids)}

    # Helpers

    async def _matching_ids(self, model: type[Base], where: Mapping[str, Any] | None) -> list:
        pk_attribute = getattr(model, model.__mapper__.primary_key[0].key)
        result = await self.session.execute(select(pk_attribute).where(build_where(model, where)))
        return list(result.scalars().all())

    def _identities(self, model: type[Base], ids: list) -> list[Base]:
        """Get the session's in-memory instances for the given primary keys."""
        instances = []
        for key in ids:
            instance = self.session.identity_map.get(identity_key(model, key))
            if instance is not None:
                instances.append(instance)
        return instances

    async def _single_row(
        self,
        model: type[Base],
        name: ModelName,
        action: QueryAction,
        where: Mapping[str, Any] | None,
    ) -> Base:
        if not where:
            raise QueryValidationError(f"{action.value} requires a where filter")

        rows = await self._select_rows(model, {"where": where, "take": 2})
        if not rows:
            raise RecordNotFoundError(name.value, action.value, dict(where))
        if len(rows) > 1:
            raise QueryValidationError(f"{action.value} filter matched more than one row")
        return rows[0]

    def _column_values(
        self,
        model: type[Base],
        data: Mapping[str, Any] | None,
        *,
        allow_empty: bool = False,
    ) -> dict[str, Any]:
        if not data and not allow_empty:
            raise QueryValidationError("data must not be empty")

        values = {}
        for key, value in (data or {}).items():
            resolve_column(model, key)
            values[key] = value.value if isinstance(value, Enum) else value
        return values
