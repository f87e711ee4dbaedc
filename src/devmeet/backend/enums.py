"""Enumeration types for backend"""
from enum import Enum


class Environment(str, Enum):
    """Deployment mode

    In development, a failed passcode or reset-token delivery degrades to
    returning the secret inline so the signup flow is not blocked.
    """

    DEVELOPMENT = "development"
    PRODUCTION = "production"


class RequestStatus(str, Enum):
    """Connection request status enumeration

    Defines the lifecycle states of a directed interest signal between two
    accounts.
    """

    INTERESTED = "interested"
    IGNORED = "ignored"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

    @classmethod
    def send_statuses(cls) -> list[str]:
        """Statuses a sender may create a request with"""
        return [cls.INTERESTED.value, cls.IGNORED.value]

    @classmethod
    def review_statuses(cls) -> list[str]:
        """Decisions a receiver may apply to a pending request"""
        return [cls.ACCEPTED.value, cls.REJECTED.value]

    @classmethod
    def labels(cls) -> dict[str, str]:
        """Get human-readable labels for each status

        Returns:
            Dictionary mapping status values to display labels
        """
        return {
            cls.INTERESTED.value: "Interest shown",
            cls.IGNORED.value: "Profile ignored",
            cls.ACCEPTED.value: "Connection accepted",
            cls.REJECTED.value: "Connection rejected",
        }

    def get_label(self) -> str:
        """Get the human-readable label for this status"""
        return self.labels().get(self.value, self.value)


class CollegeYear(str, Enum):
    """Year of study"""

    FIRST = "1st Year"
    SECOND = "2nd Year"
    THIRD = "3rd Year"
    FOURTH = "4th Year"
    ALUMNI = "Alumni"
    OTHER = "Other"


class RealtimeEvent(str, Enum):
    """Realtime chat event names

    Client -> server: join_room, send_message, typing.
    Server -> client: receive_message, user_typing, error.
    """

    JOIN_ROOM = "joinRoom"
    SEND_MESSAGE = "sendMessage"
    TYPING = "typing"
    RECEIVE_MESSAGE = "receiveMessage"
    USER_TYPING = "userTyping"
    ROOM_JOINED = "roomJoined"
    ERROR = "error"
