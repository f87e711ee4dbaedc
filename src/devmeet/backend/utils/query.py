"""Database query helpers"""
from typing import Type, TypeVar
from sqlmodel import select
from ..models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


def get_active_query(model: Type[T]):
    """Get query for non-deleted records (soft delete filter)

    Args:
        model: Data model class

    Returns:
        Query object with soft delete filter applied

    Example:
        >>> query = get_active_query(User).where(User.email == email)
        >>> user = (await session.execute(query)).scalar_one_or_none()
    """
    return select(model).where(model.deleted_at.is_(None))
