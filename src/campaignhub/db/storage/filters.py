"""Translation of where/order_by descriptors into SQLAlchemy expressions.

Where descriptor grammar:
    {"name": "Spring"}                      equality
    {"deleted_at": None}                    IS NULL
    {"deleted_at": {"not": None}}           IS NOT NULL
    {"workspace_id": {"in": [...]}}         operator dict
    {"OR": [{...}, {...}]}                  logical AND / OR / NOT
    {"campaign": {"is": {...}}}             to-one relation filter
    {"ad_creatives": {"some": {...}}}       to-many relation filter
"""

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any

from sqlalchemy import ColumnElement, and_, false, not_, or_, true
from sqlalchemy.orm import InstrumentedAttribute, RelationshipProperty

from campaignhub.db.models.base import Base

from .exceptions import QueryValidationError

LOGICAL_KEYS = ("AND", "OR", "NOT")
SORT_DIRECTIONS = ("asc", "desc")


def plain_value(value: Any) -> Any:
    """Unwrap enum members to their stored value."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list | tuple | set | frozenset):
        return [plain_value(item) for item in value]
    return value


def resolve_column(model: type[Base], name: str) -> InstrumentedAttribute:
    """Get the mapped column attribute for a field name.

    Raises:
        QueryValidationError: If the model has no such column
    """
    if name not in model.__mapper__.columns:
        raise QueryValidationError(f"Unknown field '{name}' on {model.__name__}")
    return getattr(model, name)


def resolve_relationship(model: type[Base], name: str) -> RelationshipProperty:
    """Get the relationship property for a relation name.

    Raises:
        QueryValidationError: If the model has no such relationship
    """
    relationships = model.__mapper__.relationships
    if name not in relationships:
        raise QueryValidationError(f"Unknown relation '{name}' on {model.__name__}")
    return relationships[name]


def build_where(model: type[Base], where: Mapping[str, Any] | None) -> ColumnElement[bool]:
    """Build a boolean clause from a where descriptor.

    An empty or missing descriptor matches every row.
    """
    if not where:
        return true()

    clauses: list[ColumnElement[bool]] = []
    for key, value in where.items():
        if key in LOGICAL_KEYS:
            clauses.append(_logical_clause(model, key, value))
        elif key in model.__mapper__.relationships:
            clauses.append(_relation_clause(model, key, value))
        else:
            clauses.append(_column_clause(resolve_column(model, key), value))

    return and_(*clauses) if len(clauses) > 1 else clauses[0]


def _as_list(value: Any) -> list[Mapping[str, Any]]:
    if isinstance(value, Mapping):
        return [value]
    if isinstance(value, Sequence) and not isinstance(value, str):
        return list(value)
    raise QueryValidationError(f"Logical operands must be a mapping or list, got {value!r}")


def _logical_clause(model: type[Base], key: str, value: Any) -> ColumnElement[bool]:
    parts = [build_where(model, item) for item in _as_list(value)]

    if key == "AND":
        return and_(*parts) if parts else true()
    if key == "OR":
        return or_(*parts) if parts else false()
    return not_(and_(*parts)) if parts else false()


def _column_clause(column: InstrumentedAttribute, value: Any) -> ColumnElement[bool]:
    if not isinstance(value, Mapping):
        return _equals(column, value)

    if not value:
        raise QueryValidationError(f"Empty operator dict for field '{column.key}'")

    parts = [_operator_clause(column, op, operand) for op, operand in value.items()]
    return and_(*parts) if len(parts) > 1 else parts[0]


def _equals(column: InstrumentedAttribute, value: Any) -> ColumnElement[bool]:
    if value is None:
        return column.is_(None)
    return column == plain_value(value)


def _operator_clause(
    column: InstrumentedAttribute, op: str, operand: Any
) -> ColumnElement[bool]:
    match op:
        case "equals":
            return _equals(column, operand)
        case "not":
            if isinstance(operand, Mapping):
                return not_(_column_clause(column, operand))
            if operand is None:
                return column.is_not(None)
            return column != plain_value(operand)
        case "in":
            return column.in_(plain_value(list(operand)))
        case "not_in":
            return column.not_in(plain_value(list(operand)))
        case "lt":
            return column < plain_value(operand)
        case "lte":
            return column <= plain_value(operand)
        case "gt":
            return column > plain_value(operand)
        case "gte":
            return column >= plain_value(operand)
        case "contains":
            return column.contains(operand, autoescape=True)
        case "starts_with":
            return column.startswith(operand, autoescape=True)
        case "ends_with":
            return column.endswith(operand, autoescape=True)
        case _:
            raise QueryValidationError(f"Unknown operator '{op}' for field '{column.key}'")


def _relation_clause(model: type[Base], name: str, value: Any) -> ColumnElement[bool]:
    prop = resolve_relationship(model, name)
    attribute = getattr(model, name)
    target = prop.mapper.class_

    if not isinstance(value, Mapping) or len(value) != 1:
        raise QueryValidationError(
            f"Relation filter '{name}' needs exactly one of is/is_not/some/none/every"
        )

    (op, operand), = value.items()
    criteria = build_where(target, operand)

    if prop.uselist:
        match op:
            case "some":
                return attribute.any(criteria)
            case "none":
                return not_(attribute.any(criteria))
            case "every":
                return not_(attribute.any(not_(criteria)))
    else:
        match op:
            case "is":
                return attribute.has(criteria)
            case "is_not":
                return not_(attribute.has(criteria))

    raise QueryValidationError(f"Operator '{op}' is not valid for relation '{name}'")


def build_order_by(
    model: type[Base],
    order_by: Mapping[str, str] | Sequence[Mapping[str, str]] | None,
) -> list[ColumnElement]:
    """Build ORDER BY expressions from {"field": "asc"|"desc"} descriptors."""
    if not order_by:
        return []

    items = [order_by] if isinstance(order_by, Mapping) else list(order_by)
    expressions: list[ColumnElement] = []
    for item in items:
        for name, direction in item.items():
            column = resolve_column(model, name)
            if direction not in SORT_DIRECTIONS:
                raise QueryValidationError(
                    f"Sort direction for '{name}' must be 'asc' or 'desc', got {direction!r}"
                )
            expressions.append(column.desc() if direction == "desc" else column.asc())
    return expressions
