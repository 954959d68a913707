from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    search_provider: str = "rfam"
    rfam_search_url: str = "https://rfam.org/search/sequence"
    request_timeout_seconds: int = 200
    max_connections: int = 100

    submitter_workers: int = 10
    poller_workers: int = 10
    batch_size: int = 10
    inter_batch_delay_seconds: float = 5.0
    min_poll_interval_seconds: float = 5.0

    max_submit_attempts: int = 3
    max_poll_attempts: int = 360
    max_poll_errors: int = 5
    backoff_base_seconds: float = 1.0
    backoff_max_seconds: float = 60.0
    rate_limit_backoff_factor: float = 4.0

    fasta_file: str = ""
    sequence: str = ""
    output_file: str = "data.txt"
