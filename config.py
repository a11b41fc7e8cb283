"""
Configuration settings for cluster-drill.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Item Selection
    # ========================================
    selection_method: Literal["kmeans", "random_clusters", "random"] = Field(
        default="kmeans",
        description="Selection algorithm used for new sessions",
    )
    selection_rounds: str = Field(
        default="4,2,1",
        description="Comma-separated lockstep passes required per round",
    )
    selection_cluster_count: int = Field(
        default=4,
        description="Number of clusters items are divided into",
    )
    selection_max_passes: int = Field(
        default=7,
        description="Full passes over the queue for the non-clustered algorithm",
    )

    # ========================================
    # K-means
    # ========================================
    kmeans_max_iter: int = Field(
        default=300,
        description="Maximum Lloyd iterations for a single k-means run",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="Log level for the CLI (DEBUG, INFO, WARNING, ERROR)",
    )

    # ========================================
    # Helper Methods
    # ========================================
    def get_round_schedule(self) -> list[int]:
        """Parse selection_rounds into a list of integers (blank -> [])."""
        return [int(part) for part in self.selection_rounds.split(",") if part.strip()]

    def get_selection_config(self) -> dict[str, object]:
        """Get item selection configuration as a dictionary."""
        return {
            "method": self.selection_method,
            "rounds": self.get_round_schedule(),
            "cluster_count": self.selection_cluster_count,
            "max_passes": self.selection_max_passes,
            "kmeans_max_iter": self.kmeans_max_iter,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
