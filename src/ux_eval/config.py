"""
Centralized Configuration Management for ux-eval.

This module uses pydantic-settings to manage all application-wide settings.
It provides a single, typed `Settings` object that can be imported and used
throughout the application.

Configuration can be overridden via a `.env` file in the working directory or
by setting environment variables (e.g., `UXEVAL_CLI_DEFAULT_LOG_LEVEL=DEBUG`).
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Defines the application's configuration settings.
    """

    # --- General Settings ---
    cli_default_log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="The logging level for the command line interface.",
    )

    # --- Evaluation Settings ---
    default_persona: str = Field(
        default="xiao_fang",
        description="Persona preset used by the CLI when none is given.",
    )
    report_language: Literal["en", "zh"] = Field(
        default="en",
        description="Language of the generated Markdown report.",
    )

    # --- Pydantic-Settings Configuration ---
    model_config = SettingsConfigDict(
        # Prefix for environment variables (e.g., UXEVAL_REPORT_LANGUAGE)
        env_prefix="UXEVAL_",
        env_file=".env",
        extra="ignore",
        env_file_encoding="utf-8",
    )


# Create a single, importable instance of the settings
settings = Settings()
