"""Utility helpers"""
from .email import EmailService
from .query import get_active_query
from .skills import normalize_key, normalize_list, keys_of

__all__ = [
    "EmailService",
    "get_active_query",
    "normalize_key",
    "normalize_list",
    "keys_of",
]
