"""Connection request service

State machine of the directed interest signal between two accounts:

    send:   (none) -> interested | ignored
    review: interested -> accepted | rejected   (receiver only)
    cancel: any -> (none)                        (either participant)

At most one request exists per unordered pair of accounts.
"""
from datetime import datetime
from sqlmodel import or_, select
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from ..enums import RequestStatus
from ..models import User, ConnectionRequest
from ..schemas.common import MessageResponse, PublicUserResponse
from ..schemas.request import (
    ConnectionRequestResponse,
    RequestActionResponse,
    ReceivedRequestResponse,
    ConnectionListResponse,
)
from ..utils.query import get_active_query
from ..exceptions import (
    ValidationError,
    ConflictError,
    NotFoundError,
    AuthorizationError,
)
from ..logger import get_logger

logger = get_logger(__name__)


def _conflict_message(existing: ConnectionRequest) -> str:
    if existing.status == RequestStatus.INTERESTED.value:
        return "Connection request is already pending"
    return f"Connection request already exists with status: {existing.status}"


class RequestService:
    """Connection request service"""

    @staticmethod
    async def get_pair_request(
        session: AsyncSession,
        user_a: int,
        user_b: int,
    ) -> ConnectionRequest | None:
        """Find the request for an unordered pair, whatever its direction"""
        low, high = ConnectionRequest.pair_of(user_a, user_b)
        result = await session.execute(
            select(ConnectionRequest).where(
                ConnectionRequest.pair_low_id == low,
                ConnectionRequest.pair_high_id == high,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def are_connected(session: AsyncSession, user_a: int, user_b: int) -> bool:
        """Whether the pair has an accepted connection request"""
        request = await RequestService.get_pair_request(session, user_a, user_b)
        return request is not None and request.status == RequestStatus.ACCEPTED.value

    @staticmethod
    async def send(
        session: AsyncSession,
        from_user_id: int,
        to_user_id: int,
        status: str,
    ) -> RequestActionResponse:
        """Send a connection request

        Args:
            session: Database session
            from_user_id: Sender id
            to_user_id: Receiver id
            status: ``interested`` or ``ignored``

        Returns:
            RequestActionResponse

        Raises:
            ValidationError: Invalid status, self request or unknown receiver
            ConflictError: A request already exists for the pair
        """
        logger.info(f"Sending '{status}' request: {from_user_id} -> {to_user_id}")

        if status not in RequestStatus.send_statuses():
            raise ValidationError(f"Invalid status: {status}")

        if from_user_id == to_user_id:
            raise ValidationError("You cannot send a connection request to yourself")

        result = await session.execute(
            get_active_query(User).where(User.id == to_user_id)
        )
        if result.scalar_one_or_none() is None:
            raise ValidationError(f"User {to_user_id} does not exist")

        existing = await RequestService.get_pair_request(session, from_user_id, to_user_id)
        if existing:
            logger.warning(
                f"Request already exists for pair ({from_user_id}, {to_user_id}) "
                f"with status {existing.status}"
            )
            raise ConflictError(_conflict_message(existing))

        low, high = ConnectionRequest.pair_of(from_user_id, to_user_id)
        request = ConnectionRequest(
            from_user_id=from_user_id,
            to_user_id=to_user_id,
            pair_low_id=low,
            pair_high_id=high,
            status=status,
        )
        session.add(request)
        try:
            await session.commit()
        except IntegrityError:
            # Concurrent send for the same pair won the insert
            await session.rollback()
            existing = await RequestService.get_pair_request(session, from_user_id, to_user_id)
            logger.warning(f"Concurrent request for pair ({from_user_id}, {to_user_id})")
            raise ConflictError(
                _conflict_message(existing) if existing else "Connection request already exists"
            )
        await session.refresh(request)

        logger.info(f"Connection request {request.id} created")
        return RequestActionResponse(
            message=f"{RequestStatus(status).get_label()} successfully",
            data=ConnectionRequestResponse.model_validate(request),
        )

    @staticmethod
    async def review(
        session: AsyncSession,
        receiver_id: int,
        request_id: int,
        decision: str,
    ) -> RequestActionResponse:
        """Accept or reject a pending request addressed to the receiver

        Raises:
            ValidationError: Invalid decision
            NotFoundError: No pending request with that id for the receiver
        """
        logger.info(f"User {receiver_id} reviewing request {request_id}: {decision}")

        if decision not in RequestStatus.review_statuses():
            raise ValidationError(f"Invalid status: {decision}")

        # Conditional update: only one reviewer can move it out of 'interested'
        result = await session.execute(
            update(ConnectionRequest)
            .where(
                ConnectionRequest.id == request_id,
                ConnectionRequest.to_user_id == receiver_id,
                ConnectionRequest.status == RequestStatus.INTERESTED.value,
            )
            .values(status=decision, updated_at=datetime.now())
        )
        if result.rowcount != 1:
            await session.rollback()
            logger.warning(f"Request {request_id} not reviewable by user {receiver_id}")
            raise NotFoundError("Connection request not found or already processed")
        await session.commit()

        request = await session.get(ConnectionRequest, request_id)
        await session.refresh(request)

        logger.info(f"Connection request {request_id} {decision}")
        return RequestActionResponse(
            message=f"{RequestStatus(decision).get_label()} successfully",
            data=ConnectionRequestResponse.model_validate(request),
        )

    @staticmethod
    async def cancel(
        session: AsyncSession,
        requester_id: int,
        counterpart_id: int,
    ) -> MessageResponse:
        """Delete the request between two accounts

        Raises:
            ValidationError: Requester and counterpart are the same account
            NotFoundError: No request for the pair
            AuthorizationError: Requester is not a participant
        """
        logger.info(f"User {requester_id} cancelling request with {counterpart_id}")

        if requester_id == counterpart_id:
            raise ValidationError("Invalid operation")

        request = await RequestService.get_pair_request(session, requester_id, counterpart_id)
        if not request:
            raise NotFoundError("Connection request not found")

        if not request.involves(requester_id):
            raise AuthorizationError("You are not authorized to cancel this request")

        await session.delete(request)
        await session.commit()

        logger.info(f"Connection request {request.id} cancelled")
        return MessageResponse(message="Connection request cancelled successfully")

    @staticmethod
    async def list_received(
        session: AsyncSession,
        user_id: int,
    ) -> list[ReceivedRequestResponse]:
        """Pending requests addressed to the user, oldest first"""
        result = await session.execute(
            select(ConnectionRequest, User)
            .join(User, User.id == ConnectionRequest.from_user_id)
            .where(
                ConnectionRequest.to_user_id == user_id,
                ConnectionRequest.status == RequestStatus.INTERESTED.value,
                User.deleted_at.is_(None),
            )
            .order_by(ConnectionRequest.created_at, ConnectionRequest.id)
        )
        return [
            ReceivedRequestResponse(
                request=ConnectionRequestResponse.model_validate(request),
                sender=PublicUserResponse.model_validate(sender),
            )
            for request, sender in result.all()
        ]

    @staticmethod
    async def list_connections(
        session: AsyncSession,
        user_id: int,
    ) -> ConnectionListResponse:
        """Accounts with an accepted request with the user"""
        result = await session.execute(
            select(ConnectionRequest).where(
                ConnectionRequest.status == RequestStatus.ACCEPTED.value,
                or_(
                    ConnectionRequest.from_user_id == user_id,
                    ConnectionRequest.to_user_id == user_id,
                ),
            )
        )
        peer_ids = [request.counterpart_of(user_id) for request in result.scalars().all()]
        if not peer_ids:
            return ConnectionListResponse(count=0, connections=[])

        users_result = await session.execute(
            get_active_query(User).where(User.id.in_(peer_ids)).order_by(User.id)
        )
        peers = [PublicUserResponse.model_validate(u) for u in users_result.scalars().all()]
        return ConnectionListResponse(count=len(peers), connections=peers)
