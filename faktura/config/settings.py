"""
Application settings with Pydantic v2 validation.

Loads configuration from environment variables with sensible defaults.
Settings are built once at process start and handed to the use cases that
need them; business logic never reads the environment directly.
"""

from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Storage configuration."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "faktura.db"

    # SQLite settings
    pool_size: int = 5
    busy_timeout: int = 30000  # ms

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 5000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class AutomationSettings(BaseSettings):
    """Shared-secret gate for the workflow automation endpoints."""

    model_config = SettingsConfigDict(env_prefix="AUTOMATION_")

    # Empty secret means the endpoints answer 503
    secret: str | None = None


class WebhookSettings(BaseSettings):
    """Outgoing completion webhook configuration."""

    model_config = SettingsConfigDict(env_prefix="WEBHOOK_")

    # Without a secret nothing is sent (payloads are never unsigned)
    secret: str | None = None
    allowed_domains: Annotated[list[str], NoDecode] = ["localhost", "127.0.0.1"]
    timeout: float = 10.0
    signature_header: str = "X-Webhook-Signature"

    @field_validator("allowed_domains", mode="before")
    @classmethod
    def split_domains(cls, v: Any) -> list[str]:
        """Accept a comma separated list, as the env var is usually written."""
        if isinstance(v, str):
            return [d.strip().lower() for d in v.split(",") if d.strip()]
        return [str(d).strip().lower() for d in v]


class SellerSettings(BaseSettings):
    """Seller identity used when an automated request carries none."""

    model_config = SettingsConfigDict(env_prefix="DEFAULT_SELLER_")

    name: str = "Nazwa firmy"
    nip: str = "000-000-00-00"
    address_1: str = "Adres firmy"
    address_2: str = "Kod, Miasto"
    phone: str | None = "+48 000 000 000"
    bank: str | None = "Bank"
    bank_address: str | None = "Adres banku"
    iban: str | None = "PL00 0000 0000 0000 0000 0000 0000"

    def as_party_fields(self) -> dict[str, str | None]:
        """Map to InvoiceParty field names."""
        return {
            "name": self.name,
            "nip": self.nip,
            "address_line_1": self.address_1,
            "address_line_2": self.address_2,
            "phone": self.phone,
            "bank_name": self.bank,
            "bank_branch_address": self.bank_address,
            "iban": self.iban,
        }


class InvoiceDefaultsSettings(BaseSettings):
    """Defaults stamped onto invoices created without a form."""

    model_config = SettingsConfigDict(env_prefix="INVOICE_")

    issue_place: str = "Warszawa"
    copy_type: str = "ORYGINAŁ"
    payment_type: str = "przelew"
    vat_rate: float = 23.0
    item_name: str = "Usługa"
    item_uom: str = "szt"
    buyer_name: str = "Nabywca"
    buyer_nip: str = "000-000-00-00"
    buyer_address_1: str = "Adres nabywcy"
    buyer_address_2: str = "Kod, Miasto"
    automatic_number_prefix: str = "AUTO"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Faktura VAT"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Sub-settings
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)
    automation: AutomationSettings = Field(default_factory=AutomationSettings)
    webhook: WebhookSettings = Field(default_factory=WebhookSettings)
    seller: SellerSettings = Field(default_factory=SellerSettings)
    invoice: InvoiceDefaultsSettings = Field(default_factory=InvoiceDefaultsSettings)

    @field_validator("storage", mode="before")
    @classmethod
    def ensure_data_dir(cls, v: Any) -> StorageSettings:
        if isinstance(v, dict):
            settings = StorageSettings(**v)
        else:
            settings = v or StorageSettings()
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Reset settings (for testing)."""
    global _settings
    _settings = None
