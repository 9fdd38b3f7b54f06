from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PLANET_MESH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")
    allowed_origins: str = Field(default="*", description="CORS allowed origins, comma separated")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (plain or json)")

    # Mesh Generation Defaults
    default_width: float = Field(default=800.0, description="Default map width")
    default_height: float = Field(default=600.0, description="Default map height")
    default_space: float = Field(default=10.0, description="Default spacing between sample points")
    default_chaos: float = Field(default=0.5, description="Default jitter as a fraction of spacing")

    # Limits
    max_map_width: float = Field(default=4000.0, description="Max allowed map width")
    max_map_height: float = Field(default=4000.0, description="Max allowed map height")
    max_points: int = Field(default=100_000, description="Max sample points per request")

    # Performance Configuration
    worker_processes: int = Field(default=0, description="Process pool size for generation, 0 uses threads")

    @property
    def origins(self) -> list:
        """CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",") if origin.strip()]


# Instantiate singleton settings object
settings = Settings()
