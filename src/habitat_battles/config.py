"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="HABITAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    debug: bool = False

    # Seed for the shared battle RNG (None = nondeterministic)
    rng_seed: int | None = None

    # AI pacing
    ai_base_thinking_ms: int = 500
    ai_thinking_ms_per_difficulty: int = 300
    # Consecutive rejected AI actions before that AI concedes
    ai_max_failed_actions: int = 3

    # Flat rewards handed to the winner of a decided battle
    winner_experience: int = 100
    winner_currency: int = 50

    # Status effects inflicted by moves
    poison_fraction: float = 0.125  # Of target max health, per tick
    burn_fraction: float = 0.0625
    status_duration: int = 3

    # Default battle settings
    max_team_size: int = 6
    turn_time_limit: int = 30  # Seconds, carried but not enforced by the engine

    def thinking_time_ms(self, difficulty: int) -> int:
        """AI thinking delay for a difficulty level, in milliseconds."""
        return self.ai_base_thinking_ms + difficulty * self.ai_thinking_ms_per_difficulty


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
