import json
from pathlib import Path
from typing import Annotated, List

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'Popcorn Cinema'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production
    LOG_TO_FILE: bool = False
    LOG_DIR: Path = _PROJECT_ROOT / 'logs'
    LOG_JSON: bool = False  # one JSON object per line for log shippers
    LOG_RETENTION: str = '7 days'

    # Identity provider token verification
    SECRET_KEY: SecretStr = SecretStr('test_secret_key_change_in_production')
    ALGORITHM: str = 'HS256'

    # CORS: comma separated or a JSON list; parsed here, not by the settings source
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = []

    @field_validator('BACKEND_CORS_ORIGINS', mode='before')
    @classmethod
    def assemble_cors_origins(cls, v: str | List[str]) -> List[str]:
        if isinstance(v, str) and not v.startswith('['):
            return [i.strip() for i in v.split(',') if i.strip()]
        elif isinstance(v, str):
            return json.loads(v)
        elif isinstance(v, list):
            return v
        return []

    # MongoDB
    MONGODB_URL: str = 'mongodb://localhost:27017'
    MONGODB_DB_NAME: str = 'popcorn'
    MONGODB_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    # Pricing (integer cents)
    TAX_RATE_PERCENT: float = 5.0
    SERVICE_FEE: int = 100

    # Booking lifecycle
    BOOKING_HOLD_MINUTES: int = 15
    MAX_SEATS_PER_BOOKING: int = 10
    BOOKING_REF_MAX_ATTEMPTS: int = 5
    AUTO_CONFIRM_BOOKINGS: bool = False  # demo mode: treat every booking as paid on creation

    # Payment processor callbacks; unset disables the shared-secret check
    PAYMENT_WEBHOOK_SECRET: SecretStr | None = None
    EXPIRY_SWEEP_INTERVAL_SECONDS: float = 60.0

    # Showtime date + start_time are interpreted in this zone
    SHOWTIME_TIMEZONE: str = 'UTC'

    @field_validator('TAX_RATE_PERCENT')
    @classmethod
    def validate_tax_rate(cls, v: float) -> float:
        if v < 0:
            raise ValueError('TAX_RATE_PERCENT must not be negative')
        return v


settings = Settings()  # type: ignore
