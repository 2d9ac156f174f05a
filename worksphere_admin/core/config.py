import sys

from pydantic_settings import BaseSettings

_ENV_FILE = None if "pytest" in sys.modules else ".env"


class Settings(BaseSettings):
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    EMPLOYEE_API_BASE_URL: str = "http://localhost:8080/api/employees"
    EMPLOYEE_API_TIMEOUT_SECONDS: float = 300.0

    CURRENCY_SYMBOL: str = "₹"
    CURRENCY_GROUPING: str = "indian"
    DEFAULT_ITEMS_PER_PAGE: int = 10

    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    AZURE_AD_TENANT_ID: str = ""
    AZURE_AD_CLIENT_ID: str = ""
    ADMIN_ROLE: str = "admin"

    model_config = {
        "env_file": _ENV_FILE,
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
    }


settings = Settings()
