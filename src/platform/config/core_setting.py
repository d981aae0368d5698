from pathlib import Path

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[3]
_ENV_PATH = _PROJECT_ROOT / '.env'
_ENV_FILE = _ENV_PATH if _ENV_PATH.exists() else (_PROJECT_ROOT / '.env.example')


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_ignore_empty=True,
        extra='ignore',
    )

    PROJECT_NAME: str = 'VeXeViet Booking Core'
    VERSION: str = '0.1.0'
    DEBUG: bool = True  # Set to False in production

    # Booking backend
    API_BASE_URL: str = 'http://localhost:3000/api/v1'
    API_TIMEOUT_SECONDS: float = 30.0
    API_ACCESS_TOKEN: SecretStr | None = None

    # Payment backend
    PAYMENT_API_BASE_URL: str = 'http://localhost:8000/api/v1'
    PAYMENT_RETURN_URL: str = 'http://localhost:3000/booking/payment/result'

    # Seat hold persistence
    HOLD_STORAGE_KEY: str = 'vexeviet_seat_hold'
    HOLD_STORAGE_PATH: str = ''  # empty -> in-memory store
    HOLD_DEFAULT_TTL_SECONDS: int = 900  # 15 minutes, server default

    # Countdown
    COUNTDOWN_TICK_SECONDS: float = 1.0
    COUNTDOWN_URGENT_THRESHOLD_SECONDS: int = 60

    @field_validator('API_BASE_URL', 'PAYMENT_API_BASE_URL', mode='before')
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        if isinstance(v, str):
            return v.rstrip('/')
        return v

    @property
    def API_HEADERS(self) -> dict[str, str]:
        headers = {'Content-Type': 'application/json'}
        if self.API_ACCESS_TOKEN:
            headers['Authorization'] = f'Bearer {self.API_ACCESS_TOKEN.get_secret_value()}'
        return headers


settings = Settings()  # type: ignore
