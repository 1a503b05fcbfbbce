from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "provider_onboarding"
    db_username: str = "onboarding"
    db_password: str = "secret"
    db_pool_max_size: int = 10

    storage_backend: str = "s3"
    storage_bucket: str = "provider-documents"
    storage_prefix: str = "provider-documents"
    storage_region: str = "us-east-1"
    storage_endpoint_url: str = ""
    storage_public_base_url: str = ""
    storage_cache_control: str = "max-age=3600"
    local_storage_root: str = "/app/files"

    max_document_size_bytes: int = 5 * 1024 * 1024
    max_request_file_size_bytes: int = 10 * 1024 * 1024
    max_files_per_batch: int = 10
    allowed_mime_types: list[str] = ["image/jpeg", "image/png", "application/pdf"]
