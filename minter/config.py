import json
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from minter.models.pinning import PinataCredentials


class ConfigurationError(Exception):
    pass


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "NFT Minter"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"
    host: str = "0.0.0.0"
    port: int | None = None
    default_port: int = 8080
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:8082", "https://a-brave-new-nft.com"]
    )
    upload_dir: str = "uploads"
    max_upload_bytes: int = Field(default=50 * 1024 * 1024, ge=1)
    pinata_api_url: str = "https://api.pinata.cloud"
    pinata_api_key: str | None = None
    pinata_secret_key: str | None = None
    pinata_keys_file: str = "pinata_keys.json"
    pinata_timeout_seconds: float = 60.0
    nft_symbol: str = "TUT"
    nft_thumbnail_uri: str = "https://tezostaqquito.io/img/favicon.png"
    metadata_pin_name: str = "TUT-metadata"

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() == "production"

    @property
    def listen_port(self) -> int:
        if self.is_production:
            if self.port is None:
                raise ConfigurationError("PORT must be set in production")
            return self.port
        return self.default_port

    @property
    def upload_path(self) -> Path:
        path = Path(self.upload_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path

    def pinata_credentials(self) -> PinataCredentials:
        if self.is_production:
            if not self.pinata_api_key or not self.pinata_secret_key:
                raise ConfigurationError("PINATA_API_KEY and PINATA_SECRET_KEY must be set in production")
            return PinataCredentials(api_key=self.pinata_api_key, api_secret=self.pinata_secret_key)

        keys_path = Path(self.pinata_keys_file)
        if not keys_path.exists():
            raise ConfigurationError(f"Pinata key file not found: {keys_path}")
        try:
            raw = json.loads(keys_path.read_text(encoding="utf-8"))
            return PinataCredentials(api_key=raw["apiKey"], api_secret=raw["apiSecret"])
        except (ValueError, KeyError, TypeError) as exc:
            raise ConfigurationError(f"Invalid Pinata key file {keys_path}: {exc}") from exc


settings = Settings()
