"""
Base CRUD utilities shared by every model.

``base_get()`` holds the select/filter/order/paginate pipeline used by
``get_channels()``, ``get_videos()``, ``get_comments()`` and ``get_tags()``.
"""

from typing import Any, Literal, Type, TypeVar
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.inspection import inspect

# Type variable for SQLAlchemy models
ModelType = TypeVar("ModelType")


def _get_valid_fields(model_class) -> set[str]:
    """Extract valid column names from SQLAlchemy model."""
    mapper = inspect(model_class)
    return {col.key for col in mapper.columns}


def _validate_filter_field(model_class, field_name: str) -> None:
    """Validate that a field name exists on the model."""
    valid_fields = _get_valid_fields(model_class)
    if field_name not in valid_fields:
        raise ValueError(
            f"Invalid filter field '{field_name}'. "
            f"Valid fields: {', '.join(sorted(valid_fields))}"
        )


def _validate_order_by_field(model_class, field_name: str) -> None:
    """Validate that an order_by field exists on the model."""
    valid_fields = _get_valid_fields(model_class)
    if field_name not in valid_fields:
        raise ValueError(
            f"Invalid order_by field '{field_name}'. "
            f"Valid fields: {', '.join(sorted(valid_fields))}"
        )


def _validate_pagination(limit: int | None, offset: int) -> None:
    """Validate pagination parameters."""
    if limit is not None and limit < 0:
        raise ValueError("limit must be non-negative")
    if offset < 0:
        raise ValueError("offset must be non-negative")


def _validate_order_direction(order_direction: str) -> None:
    if order_direction not in ("asc", "desc"):
        raise ValueError("order_direction must be 'asc' or 'desc'")


async def base_get(
    db: AsyncSession,
    model_class: Type[ModelType],
    *,
    filters: dict[str, Any],
    limit: int | None,
    offset: int,
    order_by: str,
    order_direction: Literal["asc", "desc"],
    first: bool = False,
    query=None,
) -> list[ModelType] | ModelType | None:
    """
    Query model instances with filtering, ordering and pagination.

    Args:
        db: Database session
        model_class: SQLAlchemy model class to query
        filters: field_name -> value equality filters
        limit: Maximum number of results (None = unlimited)
        offset: Number of results to skip
        order_by: Column to order by (must be a valid model column)
        order_direction: 'asc' or 'desc'
        first: Return a single instance or None instead of a list
        query: Optional pre-built select (e.g. with joins) to extend

    Examples:
        # All videos owned by a user, newest first
        videos = await base_get(
            db, Video,
            filters={"owner_id": user_id},
            limit=None,
            offset=0,
            order_by="created_at",
            order_direction="desc",
        )
    """
    if query is None:
        query = select(model_class)

    for field_name, value in filters.items():
        column = getattr(model_class, field_name)
        if isinstance(value, (list, tuple, set)):
            query = query.where(column.in_(value))
        else:
            query = query.where(column == value)

    order_column = getattr(model_class, order_by)
    if order_direction == "desc":
        query = query.order_by(order_column.desc())
    else:
        query = query.order_by(order_column.asc())

    if limit is not None:
        query = query.limit(limit)
    query = query.offset(offset)

    result = await db.execute(query)

    if first:
        return result.scalars().first()
    return list(result.scalars().all())


async def base_create(db: AsyncSession, model_instance: ModelType) -> ModelType:
    """Add, commit and refresh a new instance."""
    db.add(model_instance)
    await db.commit()
    await db.refresh(model_instance)
    return model_instance


async def base_update(db: AsyncSession, model_instance: ModelType) -> ModelType:
    """
    Persist changes made to an instance and return it refreshed.

    Example:
        video = await crud_video.get_videos(db, id=video_id, first=True)
        video.title = "New title"
        video = await crud_video.update_video(db, video)
    """
    await db.commit()
    await db.refresh(model_instance)
    return model_instance


async def base_delete(db: AsyncSession, model_instance: ModelType) -> None:
    await db.delete(model_instance)
    await db.commit()
