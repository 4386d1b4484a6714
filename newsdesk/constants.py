"""Infrastructure and technical constants."""

from typing import Final

# Technical configuration constants
DEFAULT_HOST: Final = "127.0.0.1"
DEFAULT_PORT: Final = 8080
DEFAULT_DATABASE_URL: Final = "sqlite:///./newsdesk.db"

# Connection pool defaults
DEFAULT_POOL_SIZE: Final = 5
DEFAULT_MAX_OVERFLOW: Final = 10
DEFAULT_POOL_TIMEOUT: Final = 30.0
DEFAULT_POOL_RECYCLE: Final = 3600
