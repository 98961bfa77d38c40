from . import matching_service
from . import discovery_session

__all__ = [
    "matching_service",
    "discovery_session",
]
