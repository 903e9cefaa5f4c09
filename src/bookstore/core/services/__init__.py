"""Core services exports."""

# Database Service
from .database.db_session import DbSessionService

# JWT Services
from .jwt.jwt_gen import JwtGeneratorService
from .jwt.jwt_verify import TokenVerificationService

__all__ = [
    # Database Service
    "DbSessionService",
    # JWT Services
    "JwtGeneratorService",
    "TokenVerificationService",
]
