"""DevMeet - peer skill-exchange matchmaking backend"""

__version__ = "0.1.0"
