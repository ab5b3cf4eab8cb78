from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "MaelMon"
    debug: bool = False

    database_url: str = "postgresql+asyncpg://localhost:5432/maelmon"

    # Seconds to wait for a pooled connection before failing
    database_pool_timeout: float = 10.0

    cors_origins: list[str] = [
        "https://maelmon-trading-cards.onrender.com",
        "http://localhost:3000",
    ]

    # Balance granted to a user account when it is first created
    starting_currency: int = 100

    # Minimum time between two successful daily pack claims
    daily_pack_cooldown_hours: int = 24

    # Flat currency credited with every daily pack (0 = card only)
    daily_pack_currency_bonus: int = 0

    # Hold a per-user lock from cooldown check to cooldown stamp
    # Only covers claims handled by this process
    serialize_claims_per_user: bool = True

    # Register unseen chat identities on their first message
    chat_auto_register: bool = True


settings = Settings()


# =============================================================================
# SUPPLY
# =============================================================================

# max_supply sentinel for definitions that can be minted without limit
UNLIMITED_SUPPLY = -1
