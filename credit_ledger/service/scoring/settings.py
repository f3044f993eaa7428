"""
Scoring Settings for the Credit Ledger.

This module contains the configurable parameters of the creditworthiness
score and the repayment reward program. They can be adjusted via
environment variables, for example to tune the penalty slope or to run the
ledger in a jurisdiction with a different financial year.

Environment variables use the SCORING_ prefix:
    SCORING_PENALTY_DIVISOR=1000
    SCORING_MAX_PENALTY=80
    SCORING_REWARD_POINTS=10

Usage:
    from credit_ledger.service.scoring.settings import scoring_settings

    # Use default settings (loaded from env)
    points = scoring_settings.reward_points

    # Or create custom settings for testing
    custom = ScoringSettings(reward_points=25)
"""

from decimal import Decimal
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from credit_ledger.domain.entities import MAX_SCORE, MIN_SCORE


class ScoringSettings(BaseSettings):
    """
    Configurable parameters for the score and reward rules.

    All settings can be overridden via environment variables with SCORING_ prefix.
    Monetary values are in the ledger currency (rupees), not minor units.
    """

    model_config = SettingsConfigDict(
        env_prefix="SCORING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Score ===
    base_score: int = Field(
        default=MAX_SCORE,
        ge=MIN_SCORE,
        le=MAX_SCORE,
        description="Score of a buyer with nothing outstanding",
    )
    penalty_divisor: Decimal = Field(
        default=Decimal("1000"),
        gt=0,
        description="Outstanding amount that costs one score point",
    )
    max_penalty: int = Field(
        default=80,
        ge=0,
        description="Cap on points lost to the outstanding balance",
    )

    # === Rewards ===
    reward_points: int = Field(
        default=10,
        ge=0,
        description="Points awarded for settling within the financial year of the credit",
    )

    # === Financial Year ===
    financial_year_start_month: int = Field(
        default=4,
        ge=1,
        le=12,
        description="Calendar month on which the financial year begins (4 = April)",
    )
    timezone: str = Field(
        default="Asia/Kolkata",
        description="IANA timezone in which financial-year boundaries are evaluated",
    )

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Reject timezone names the tz database does not know."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @model_validator(mode="after")
    def validate_penalty_cap(self) -> "ScoringSettings":
        if self.max_penalty > self.base_score:
            raise ValueError(
                f"max_penalty ({self.max_penalty}) exceeds base_score ({self.base_score})"
            )
        if self.min_score < MIN_SCORE:
            raise ValueError(
                f"base_score - max_penalty ({self.min_score}) is below {MIN_SCORE}"
            )
        return self

    @property
    def min_score(self) -> int:
        """Lowest score any profile can reach."""
        return self.base_score - self.max_penalty

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


@lru_cache
def get_scoring_settings() -> ScoringSettings:
    """Get cached scoring settings instance."""
    return ScoringSettings()


scoring_settings = get_scoring_settings()
