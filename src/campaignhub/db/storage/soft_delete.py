"""Soft-delete middleware.

Every storage call for an auditable model passes through
``SoftDeleteMiddleware``, which applies two rewrites:

* ``delete``/``delete_many`` become ``update``/``update_many`` that set
  ``deleted_at`` to the current time, keeping the caller's ``where``.
* ``find_many``, ``find_first``, ``find_unique`` and ``count`` get
  ``deleted_at = None`` added to ``where`` unless the caller already put a
  ``deleted_at`` condition at the top level. Relation includes and
  ``_count`` selections that target auditable models get the same default.

Models in ``NON_AUDITABLE_MODELS`` pass through untouched: their deletes
are physical and their reads unfiltered.
"""

from collections.abc import Callable, Mapping
from datetime import datetime
from typing import Any

import structlog

from campaignhub.core.logging import get_logger
from campaignhub.db.models.base import Base, utcnow
from campaignhub.db.models.registry import MODEL_REGISTRY, ModelName
from campaignhub.utils.exceptions import ConfigurationError

from .types import COUNT_INCLUDE_KEY, READ_ACTIONS, NextHandler, QueryAction, QueryParams

SOFT_DELETE_FIELD = "deleted_at"

# Ledger and session-like records
NON_AUDITABLE_MODELS: frozenset[ModelName] = frozenset(
    {
        ModelName.AI_LOG,
        ModelName.USER_SESSION,
        ModelName.WORKSPACE_MEMBER,
    }
)

DELETE_REWRITES: dict[QueryAction, QueryAction] = {
    QueryAction.DELETE: QueryAction.UPDATE,
    QueryAction.DELETE_MANY: QueryAction.UPDATE_MANY,
}


def is_auditable(model: ModelName) -> bool:
    """Whether a model is subject to soft-delete rewriting."""
    return model not in NON_AUDITABLE_MODELS


def check_soft_delete_coverage(registry: Mapping[ModelName, type[Base]] = MODEL_REGISTRY) -> None:
    """Verify the registry agrees with NON_AUDITABLE_MODELS.

    Raises:
        ConfigurationError: If a ModelName is unregistered, an auditable
            model has no deleted_at column, or an exempt model has one
    """
    missing = [name.value for name in ModelName if name not in registry]
    if missing:
        raise ConfigurationError(f"Models missing from registry: {', '.join(missing)}")

    for name, model in registry.items():
        has_marker = SOFT_DELETE_FIELD in model.__mapper__.columns
        if is_auditable(name) and not has_marker:
            raise ConfigurationError(
                f"{name.value} is auditable but has no {SOFT_DELETE_FIELD} column; "
                "add SoftDeleteMixin or list it in NON_AUDITABLE_MODELS"
            )
        if not is_auditable(name) and has_marker:
            raise ConfigurationError(
                f"{name.value} is exempt from soft delete but defines {SOFT_DELETE_FIELD}"
            )


def with_default_visibility(where: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of ``where`` hiding soft-deleted rows unless it already decides."""
    scoped = dict(where or {})
    if SOFT_DELETE_FIELD not in scoped:
        scoped[SOFT_DELETE_FIELD] = None
    return scoped


class SoftDeleteMiddleware:
    """Rewrites deletes into soft deletes and hides soft-deleted rows.

    Attributes:
        registry: Entity name to model class mapping, validated on construction
        clock: Source of the deleted_at timestamp
    """

    def __init__(
        self,
        *,
        registry: Mapping[ModelName, type[Base]] = MODEL_REGISTRY,
        clock: Callable[[], datetime] = utcnow,
        logger: structlog.stdlib.BoundLogger | None = None,
    ):
        check_soft_delete_coverage(registry)
        self.registry = registry
        self.clock = clock
        self.logger = logger or get_logger(__name__)
        self._names_by_model = {model: name for name, model in registry.items()}

    async def __call__(self, params: QueryParams, call_next: NextHandler) -> Any:
        if not is_auditable(params.model):
            return await call_next(params)

        if params.action in DELETE_REWRITES:
            return await call_next(self.rewrite_delete(params))

        if params.action in READ_ACTIONS:
            return await call_next(self.filter_read(params))

        return await call_next(params)

    def rewrite_delete(self, params: QueryParams) -> QueryParams:
        """Turn a delete-shaped call into the equivalent soft-delete update."""
        rewritten = QueryParams(
            model=params.model,
            action=DELETE_REWRITES[params.action],
            args={**params.args, "data": {SOFT_DELETE_FIELD: self.clock()}},
        )
        self.logger.debug(
            "soft_delete_rewrite",
            model=params.model.value,
            action=params.action.value,
            rewritten_action=rewritten.action.value,
        )
        return rewritten

    def filter_read(self, params: QueryParams) -> QueryParams:
        """Add the default visibility filter to a read call."""
        changes: dict[str, Any] = {"where": with_default_visibility(params.args.get("where"))}
        include = params.args.get("include")
        if include:
            changes["include"] = self._filter_includes(params.model, include)
        return params.with_args(**changes)

    def _filter_includes(self, model: ModelName, include: Mapping[str, Any]) -> dict[str, Any]:
        model_class = self.registry[model]
        filtered: dict[str, Any] = {}
        for relation, spec in include.items():
            if relation == COUNT_INCLUDE_KEY and isinstance(spec, Mapping):
                selected = spec.get("select") or {}
                filtered[relation] = {
                    **spec,
                    "select": {
                        name: self._filter_relation(model_class, name, item)
                        for name, item in selected.items()
                    },
                }
            else:
                filtered[relation] = self._filter_relation(model_class, relation, spec)
        return filtered

    def _filter_relation(self, model_class: type[Base], relation: str, spec: Any) -> Any:
        target = self._relation_target(model_class, relation)
        if not spec or target is None or not is_auditable(target):
            return spec
        if spec is True:
            return {"where": with_default_visibility(None)}
        if isinstance(spec, Mapping):
            return {**spec, "where": with_default_visibility(spec.get("where"))}
        return spec

    def _relation_target(self, model_class: type[Base], relation: str) -> ModelName | None:
        # Unknown relations are left for the engine to reject
        prop = model_class.__mapper__.relationships.get(relation)
        if prop is None:
            return None
        return self._names_by_model.get(prop.mapper.class_)
