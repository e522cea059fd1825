"""Configuration for floe-faker.

Settings can be loaded from environment variables with the FLOE_FAKER_
prefix or from a local .env file.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FakerSettings(BaseSettings):
    """Runtime settings for ModelFaker and GeneratorRegistry.

    Example:
        >>> # From environment (FLOE_FAKER_SEED=42)
        >>> settings = FakerSettings()
        >>>
        >>> # Explicit
        >>> settings = FakerSettings(seed=42, key_column="id")
    """

    model_config = SettingsConfigDict(
        env_prefix="FLOE_FAKER_",
        env_file=".env",
        extra="ignore",
    )

    seed: int | None = Field(
        default=None,
        description="Random seed for reproducible placeholder values",
    )
    locale: str = Field(
        default="en_US",
        description="Faker locale used by the default generators",
    )
    key_column: str = Field(
        default="_id",
        min_length=1,
        description="Column holding the store-assigned record key",
    )
    text_length: int = Field(
        default=12,
        ge=4,
        le=64,
        description="Length of generated text values",
    )
    eager_validation: bool = Field(
        default=False,
        description="Check every model for missing generators when the faker is created",
    )
