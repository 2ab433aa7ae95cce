"""Application configuration using pydantic settings with structured sections."""

from decimal import Decimal
from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from rise_settlement.core.signature import KeyOrder


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = Field(default="sqlite+aiosqlite:///./settlement.db", alias="url")
    echo: bool = False


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    callback_allowed_ips: list[str] = Field(default_factory=list)
    enforce_callback_ip_allowlist: bool = False
    # peers whose X-Forwarded-For / X-Real-IP headers are believed
    trusted_proxies: list[str] = Field(default_factory=list)


class BasepaySettings(BaseModel):
    collection_key: str = ""
    success_token: str = "success"
    failure_token: str = "FAIL"
    key_order: KeyOrder = "locale"
    # tradeResult codes that fail the deposit; any other non-success code leaves it pending
    failure_results: list[str] = Field(default_factory=list)


class NekpaySettings(BaseModel):
    secret_key: str = ""
    success_token: str = "SUCCESS"
    failure_token: str = "FAIL"
    key_order: KeyOrder = "byte"


class GatewaySettings(BaseModel):
    basepay: BasepaySettings = BasepaySettings()
    nekpay: NekpaySettings = NekpaySettings()


class SettlementSettings(BaseModel):
    drop_interval_hours: int = Field(default=22, gt=0)
    referral_rates: list[Decimal] = Field(
        default_factory=lambda: [Decimal("0.20"), Decimal("0.03"), Decimal("0.02")],
        max_length=3,
    )
    default_bonus_rate: Decimal = Decimal("0")
    method_bonus_rates: dict[str, Decimal] = Field(
        default_factory=lambda: {"crypto_manual": Decimal("0.05")}
    )

    def bonus_rate_for(self, method: Optional[str]) -> Decimal:
        if method and method in self.method_bonus_rates:
            return self.method_bonus_rates[method]
        return self.default_bonus_rate


class IncomeJobSettings(BaseModel):
    batch_size: int = Field(default=100, gt=0)


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    log_level: str = "INFO"
    project_name: str = "Rise Settlement Server"
    api_prefix: str = "/api"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    gateways: GatewaySettings = GatewaySettings()
    settlement: SettlementSettings = SettlementSettings()
    income_job: IncomeJobSettings = IncomeJobSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def host(self) -> str:
        return self.server.host

    @property
    def port(self) -> int:
        return self.server.port

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm


@lru_cache()
def get_settings() -> Settings:
    return Settings()
