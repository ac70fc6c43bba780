"""
Observability Demo - Application Configuration
===============================================

What:  Centralized configuration management using Pydantic Settings.
How:   Pydantic Settings reads from environment variables (or .env file),
       validates types/ranges, and provides a singleton `settings` object.
       Tests and embedders can build their own `Settings(...)` and hand it
       to `create_app()` instead of relying on the singleton.
Who:   Imported by the application factory, the routes and `__main__`.
When:  Loaded once at module import time.

Latency ranges:
    Each simulated route has its own LatencyRange (milliseconds). In the
    environment they are given as JSON, e.g.
        LATENCY_HOME='{"min_ms": 50, "max_ms": 150}'
"""

import logging
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings


class LatencyRange(BaseModel):
    """Inclusive bounds, in milliseconds, of a simulated backend delay."""

    min_ms: float = Field(default=0, ge=0)
    max_ms: float = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "LatencyRange":
        if self.min_ms > self.max_ms:
            raise ValueError(
                f"min_ms ({self.min_ms}) must not exceed max_ms ({self.max_ms})"
            )
        return self

    @property
    def min_seconds(self) -> float:
        return self.min_ms / 1000

    @property
    def max_seconds(self) -> float:
        return self.max_ms / 1000


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every setting has a default, so the app runs with no environment at all.
    Attributes are grouped by concern.
    """

    # ── Server ────────────────────────────────────────────────────────────
    app_name: str = Field(default="Cloud-Native Observability Demo")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3000, ge=1, le=65535)

    # Completion lines are emitted at DEBUG, so DEBUG is the default
    log_level: str = Field(default="DEBUG")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    @property
    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)

    # ── Correlation IDs ───────────────────────────────────────────────────
    # 12 random bytes → 24 hex characters
    trace_id_bytes: int = Field(default=12, ge=4, le=64)

    # ── Simulation ────────────────────────────────────────────────────────
    unhealthy_ratio: float = Field(default=0.1, ge=0.0, le=1.0)

    latency_home: LatencyRange = Field(default=LatencyRange(min_ms=50, max_ms=150))
    latency_status: LatencyRange = Field(default=LatencyRange(min_ms=10, max_ms=50))
    latency_error: LatencyRange = Field(default=LatencyRange(min_ms=100, max_ms=300))
    latency_products: LatencyRange = Field(default=LatencyRange(min_ms=100, max_ms=400))
    latency_cart: LatencyRange = Field(default=LatencyRange(min_ms=50, max_ms=200))
    latency_account: LatencyRange = Field(default=LatencyRange(min_ms=200, max_ms=600))
    latency_add_to_cart: LatencyRange = Field(default=LatencyRange(min_ms=20, max_ms=80))

    # ── Metrics ───────────────────────────────────────────────────────────
    # Registers process/platform/GC collectors next to the app's own series
    collect_process_metrics: bool = Field(default=True)

    histogram_buckets: List[float] = Field(
        default=[0.005, 0.01, 0.02, 0.05, 0.1, 0.5, 1, 2],
        description="Upper bounds (seconds) of the response time histogram buckets",
    )

    @field_validator("histogram_buckets")
    @classmethod
    def validate_buckets(cls, v: List[float]) -> List[float]:
        if not v:
            raise ValueError("histogram_buckets must not be empty")
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError("histogram_buckets must be strictly ascending")
        return v

    # ── Pydantic Settings Config ──────────────────────────────────────────
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance used when create_app() is called without settings
settings = Settings()
