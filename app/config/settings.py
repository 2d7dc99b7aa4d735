from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8000

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "docvault"
    db_username: str = "docvault"
    db_password: str = "secret"

    catalog_path: str = ""

    storage_backend: str = "local"
    files_root: str = "/app/files"
    s3_bucket: str = ""
    s3_region: str = "us-east-1"
    s3_endpoint_url: str = ""
    signed_url_ttl_seconds: int = 3600

    classification_provider: str = "openai"
    classification_temperature: float = 0.1
    classification_max_tokens: int = 800
    openai_api_key: str = ""
    openai_model_name: str = "gpt-4o-mini"
    openai_timeout_seconds: int = 30
    openai_compatible_base_url: str = ""

    render_font_path: str = ""

    upload_max_workers: int = 4
