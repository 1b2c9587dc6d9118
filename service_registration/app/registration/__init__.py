"""
Registration rules package.

``RegistrationService`` gates new users on the minimum age before handing
them to the store (or caching proxy) it wraps, and passes listings through.
"""

from .service import RegistrationService, MINIMUM_REGISTRATION_AGE

__all__ = ["RegistrationService", "MINIMUM_REGISTRATION_AGE"]
