"""Application configuration via environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """service2 settings, read from the environment and an optional .env file."""

    # Downstream services, as host:port
    SERVICE3_ADDRESS: str = "localhost:8083"
    SERVICE4_ADDRESS: str = "localhost:8084"

    # Server
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8082

    # Outbound HTTP client
    CONNECT_TIMEOUT_MS: int = 2000
    READ_TIMEOUT_MS: int = 3000

    # Logging
    PYTHON_LOG_LEVEL: str = "INFO"
    ENABLE_FILE_LOGGING: bool = True
    REQUEST_LOGGING_ENABLED: bool = True
    REQUEST_LOG_HEADERS: bool = False

    # Tracing
    OTEL_SERVICE_NAME: str = "service2"
    OTEL_CONSOLE_EXPORT: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def service3_url(self) -> str:
        return f"http://{self.SERVICE3_ADDRESS}/bar"

    @property
    def service4_url(self) -> str:
        return f"http://{self.SERVICE4_ADDRESS}/baz"

    @property
    def blow_up_url(self) -> str:
        """The service's own /blowup endpoint, reached over loopback."""
        return f"http://localhost:{self.SERVER_PORT}/blowup"


settings = Settings()
