"""Business services"""
from .auth_service import AuthService
from .legacy_signup import LegacySignupAdapter
from .match_service import MatchService, compute_matches, compute_single_match
from .request_service import RequestService
from .profile_service import ProfileService
from .pending_reaper import PendingSignupReaper
from .alumni_service import AlumniService

__all__ = [
    "AuthService",
    "LegacySignupAdapter",
    "MatchService",
    "compute_matches",
    "compute_single_match",
    "RequestService",
    "ProfileService",
    "PendingSignupReaper",
    "AlumniService",
]
