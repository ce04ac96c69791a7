"""Configuration schema using Pydantic.

Persisted to ~/.stdrpc/config.json; every field can also be set through
STDRPC_* environment variables (nested with ``__``).
"""

from typing import Literal

from pydantic import BaseModel, Field, ConfigDict
from pydantic_settings import BaseSettings


class CodecConfig(BaseModel):
    """Wire codec behaviour."""
    # What encode does with ints outside the signed 32-bit range
    int_overflow: Literal["reject", "wrap"] = "reject"


class DispatchConfig(BaseModel):
    """Dispatch table behaviour."""
    unknown_function_message: str = "Unknown function"
    sanitize_errors: bool = True  # Redact secrets from unexpected handler exceptions


class LoggingConfig(BaseModel):
    """CLI logging."""
    level: Literal["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_sink: bool = False  # Also write to ~/.stdrpc/logs/<command>.log


class Config(BaseSettings):
    """Root configuration for stdrpc."""
    codec: CodecConfig = Field(default_factory=CodecConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = ConfigDict(
        env_prefix="STDRPC_",
        env_nested_delimiter="__"
    )
