"""
User Use Cases
"""

from .get_profile_use_case import GetProfileUseCase, ProfileResponse

__all__ = [
    "GetProfileUseCase",
    "ProfileResponse",
]
