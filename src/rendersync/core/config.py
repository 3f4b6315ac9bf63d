"""Library configuration loaded from environment variables."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """rendersync settings. All values can be overridden via environment variables."""

    app_name: str = "rendersync"
    debug: bool = False

    # Signing
    secret: str = ""

    # Redis
    redis_url: str = "redis://localhost:6379/0"
    channel_prefix: str = "sync"

    # Streaming
    replay_window_seconds: int = 300  # 5 minute replay buffer
    heartbeat_interval_seconds: int = 15

    # Publishing is skipped entirely when disabled (e.g. in test environments)
    enabled: bool = True

    model_config = {"env_prefix": "RENDERSYNC_", "env_file": ".env", "extra": "ignore"}


settings = Settings()
