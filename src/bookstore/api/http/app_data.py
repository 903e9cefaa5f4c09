from dataclasses import dataclass

from src.bookstore.core.services import DbSessionService, TokenVerificationService
from src.bookstore.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    database_service: DbSessionService
    token_verify_service: TokenVerificationService
