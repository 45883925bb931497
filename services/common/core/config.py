"""
Common Configuration
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class BaseAppConfig(BaseSettings):
    """
    Common application settings.
    """

    LOG_LEVEL: str = Field(default="INFO", description="Log level")
    LOG_CONFIG_PATH: str = Field(
        default="config/edge_log.yaml", description="YAML logging config path"
    )
    VICTORIALOGS_URL: str = Field(default="", description="VictoriaLogs ingestion URL")
    VERIFY_SSL: bool = Field(default=True, description="Whether to verify SSL certificates")

    # ===== Function backend metadata =====
    AWS_REGION: str = Field(default="local", description="Region reported by the function")
    FUNCTION_NAME: str = Field(default="ApiFn", description="Function name reported by the backend")
    FUNCTION_MEMORY_SIZE: int = Field(default=128, description="Configured memory limit (MB)")
    FUNCTION_TIMEOUT: float = Field(
        default=5.0, gt=0, description="Function execution bound in seconds"
    )

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )
