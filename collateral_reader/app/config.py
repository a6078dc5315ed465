"""Config file."""
from urllib.parse import quote_plus
from typing import Annotated

from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


def _split_csv(value: object) -> object:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class Settings(BaseSettings):
    """Application settings."""

    # PROJECT
    project_name: str = Field("collateral-reader", alias="PROJECT_NAME")
    log_level: str = Field("INFO", alias="LOG_LEVEL")

    # REMOTE FETCH
    fetch_timeout_ms: int = Field(5_000, alias="FETCH_TIMEOUT_MS", gt=0)

    # MULTICHAIN REGISTRIES
    chain_directory_url: str = Field(
        "https://scanapi.multichain.org/data/chain?type=mainnet",
        alias="CHAIN_DIRECTORY_URL",
    )
    token_directory_url: str = Field(
        "https://bridgeapi.multichain.org/v4/tokenlistv4/1",
        alias="TOKEN_DIRECTORY_URL",
    )
    eth_chain_id: str = Field("1", alias="ETH_CHAIN_ID")
    whitelisted_symbols: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["ETH", "WETH", "WBTC", "USDC", "USDT", "DAI"],
        alias="WHITELISTED_SYMBOLS",
    )
    balance_query_concurrency: int = Field(4, alias="BALANCE_QUERY_CONCURRENCY", gt=0)

    # NATIVE CHAIN (primary first, then fallbacks)
    native_rpc_urls: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: ["https://interlay.api.onfinality.io/public"],
        alias="NATIVE_RPC_URLS",
    )

    # CACHE
    cache_backend: str = Field("memory", alias="CACHE_BACKEND")

    # DATABASE (only needed by the sqlalchemy cache backend)
    postgres_user: str | None = Field(None, alias="POSTGRES_USER")
    postgres_password: SecretStr | None = Field(None, alias="POSTGRES_PASSWORD")
    postgres_server: str | None = Field(None, alias="POSTGRES_SERVER")
    postgres_port: int | None = Field(None, alias="POSTGRES_PORT")
    postgres_db: str | None = Field(None, alias="POSTGRES_DB")
    database_url: str | None = Field(None, alias="DATABASE_URL")

    @field_validator("whitelisted_symbols", "native_rpc_urls", mode="before")
    @classmethod
    def parse_csv(cls, value: object) -> object:
        return _split_csv(value)

    @model_validator(mode="after")
    def assemble_db_url(self) -> "Settings":
        if not self.database_url and self.postgres_server and self.postgres_db:
            user = quote_plus(self.postgres_user or "")
            password = quote_plus(
                self.postgres_password.get_secret_value() if self.postgres_password else ""
            )
            host = self.postgres_server
            port = self.postgres_port or 5432
            db = self.postgres_db

            self.database_url = f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db}"

        return self

    @property
    def fetch_timeout_s(self) -> float:
        return self.fetch_timeout_ms / 1000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
        extra="ignore",
    )


settings: Settings = Settings()
