"""Connection request data model"""
from typing import Optional
from sqlmodel import Field, Index
from .base import BaseModel


class ConnectionRequest(BaseModel, table=True):
    """Directed interest signal between two accounts

    The unordered pair is the identity of the relationship: ``pair_low_id``
    and ``pair_high_id`` hold the two participant ids in ascending order and
    carry a unique index, so a second request for the same pair fails at
    insert time regardless of direction. ``from_user_id`` only records who
    initiated.
    """

    __tablename__ = "connection_requests"

    id: Optional[int] = Field(default=None, primary_key=True)
    from_user_id: int = Field(foreign_key="users.id", index=True)
    to_user_id: int = Field(foreign_key="users.id", index=True)
    pair_low_id: int = Field(nullable=False)
    pair_high_id: int = Field(nullable=False)
    status: str = Field(
        max_length=20,
        description="Request status: interested | ignored | accepted | rejected (see RequestStatus enum)",
    )

    __table_args__ = (
        Index(
            "idx_connection_requests_pair_unique",
            "pair_low_id",
            "pair_high_id",
            unique=True,
        ),
    )

    @staticmethod
    def pair_of(user_a: int, user_b: int) -> tuple[int, int]:
        """Canonical (low, high) ordering of an unordered pair"""
        return (user_a, user_b) if user_a <= user_b else (user_b, user_a)

    def involves(self, user_id: int) -> bool:
        """Check whether the user is one of the two participants"""
        return user_id in (self.from_user_id, self.to_user_id)

    def counterpart_of(self, user_id: int) -> int:
        """Return the other participant"""
        return self.to_user_id if self.from_user_id == user_id else self.from_user_id
