# hostel_api/config/settings.py
from urllib.parse import quote_plus

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # 🔵 Banco principal (PostgreSQL)
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "hostel"
    db_user: str = "hostel"
    db_password: str = ""
    db_ssl: bool = False

    # URL completa (ex.: sqlite nos testes); tem prioridade sobre db_*
    database_url_override: str | None = None

    db_pool_timeout_seconds: int = 10
    db_connect_timeout_seconds: int = 5
    db_statement_timeout_ms: int = 5000

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    app_prefix: str = ""
    cors_origins_raw: str = "http://localhost:5173,http://127.0.0.1:5173"
    trust_proxy_headers: bool = False
    socketio_async_mode: str = "eventlet"

    jwt_secret: str = "dev-secret-change-me"
    jwt_issuer: str = "hostel-api"
    jwt_audience: str = "hostel-front"
    jwt_access_minutes: int = 15
    jwt_refresh_days: int = 30

    password_iterations: int = 600_000

    refresh_cookie_name: str = "refresh_token"
    refresh_cookie_path: str = "/"
    refresh_cookie_samesite: str = "Lax"
    refresh_cookie_secure: bool | None = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("db_host", "db_name", "db_user", "db_password", "jwt_secret", mode="before")
    @classmethod
    def strip_strings(cls, v):
        if isinstance(v, str):
            return v.strip().strip('"').strip("'")
        return v

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override

        user = quote_plus(self.db_user)
        password = quote_plus(self.db_password)
        host = self.db_host
        port = self.db_port
        db = self.db_name

        return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{db}"

    @property
    def api_prefix(self) -> str:
        return f"{self.app_prefix.rstrip('/')}/api"

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins_raw.split(",") if o.strip()]

    @property
    def cookie_secure(self) -> bool:
        # sem override explícito, só exige HTTPS em produção
        if self.refresh_cookie_secure is not None:
            return self.refresh_cookie_secure
        return self.environment == "production"


settings = Settings()
