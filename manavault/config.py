from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="MANAVAULT_")

    app_name: str = "ManaVault"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/manavault"

    # Draw model defaults for Commander (99-card library, 7-card hand)
    default_deck_size: int = 99
    default_starting_hand_size: int = 7

    # When False, per-deck analysis is always recomputed and never stored
    analysis_cache_enabled: bool = True

    # JSON list in the environment, e.g. MANAVAULT_CORS_ALLOW_ORIGINS=["https://example.com"]
    cors_allow_origins: list[str] = ["*"]


settings = Settings()


# =============================================================================
# BATCH ANALYSIS LIMITS
# =============================================================================

# Decks analyzed per batch when populating the analysis cache
DEFAULT_ANALYSIS_BATCH_SIZE = 20

# Upper bound accepted from callers for a single batch
MAX_ANALYSIS_BATCH_SIZE = 200
