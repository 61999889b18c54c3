from typing import Iterable

from sqlalchemy import UniqueConstraint, and_, inspect as sa_inspect, select


def find_unknown_model_kwargs(model, kwargs: dict) -> list[str]:
    """
    Return kwarg keys that are not mapped attributes (columns or relationships) of `model`.
    """
    allowed = {attr.key for attr in sa_inspect(model).attrs}
    return [k for k in kwargs if k not in allowed]


def get_required_columns(model) -> list[str]:
    """
    Columns that are NOT NULL, have no client/server default and are not auto PKs.
    """
    cols = []
    for col in model.__table__.columns:
        has_default = col.default is not None or col.server_default is not None
        is_auto_pk = col.autoincrement is True and col.primary_key
        if not col.nullable and not has_default and not is_auto_pk:
            cols.append(col.name)
    return cols


def get_unique_column_sets(model) -> list[list[str]]:
    """
    Return every set of columns that must be unique together:
    Column(unique=True), UniqueConstraint(...) and Index(..., unique=True).
    """
    unique_sets: list[list[str]] = []

    for col in model.__table__.columns:
        if col.unique:
            unique_sets.append([col.name])

    for constraint in model.__table__.constraints:
        if isinstance(constraint, UniqueConstraint):
            unique_sets.append([c.name for c in constraint.columns])

    for idx in model.__table__.indexes:
        if idx.unique:
            unique_sets.append([c.name for c in idx.columns])

    # the same set can be declared twice (unique=True + index=True)
    deduped: list[list[str]] = []
    for cols in unique_sets:
        if cols not in deduped:
            deduped.append(cols)
    return deduped


async def find_unique_conflicts(db, model, kwargs: dict) -> set[str]:
    """
    Run pre-insert queries to detect rows that would violate a unique constraint.
    Only constraint sets fully covered by `kwargs` are checked. Best effort: the
    database constraint remains the source of truth.
    """
    conflicts: set[str] = set()

    for cols in get_unique_column_sets(model):
        if not all(c in kwargs for c in cols):
            continue

        conditions = [getattr(model, c) == kwargs[c] for c in cols]
        result = await db.execute(select(model).where(and_(*conditions)).limit(1))
        if result.scalars().first() is not None:
            conflicts.update(cols)

    return conflicts


def sorted_fields(fields: Iterable[str]) -> list[str]:
    return sorted(set(fields))
