"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)
from web3 import Web3

from .constants import (
    INFURA_MAINNET_URL,
    STARGATE_COMMITTEE_TELEGRAM_CHAT_ID,
    STARGATE_STRATEGY_ADDRESSES,
)
from .errors import ConfigurationError

load_dotenv()

SECRET_FIELDS = ("infura_api_key", "telegram_token")
REDACTED = "***redacted***"


class TomlConfigSource(PydanticBaseSettingsSource):
    """Lowest-precedence source reading a TOML file (top-level or [oryx] table)."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
        super().__init__(settings_cls)
        self._path = path

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return None, "", False

    def _resolve_path(self) -> Path | None:
        if self._path:
            return self._path
        local_config = Path("oryx.toml")
        user_config = Path.home() / ".config" / "oryx" / "config.toml"
        if local_config.exists():
            return local_config
        if user_config.exists():
            return user_config
        return None

    def __call__(self) -> dict[str, Any]:
        path = self._resolve_path()
        if path is None or not path.exists():
            return {}

        with path.open("rb") as f:
            data = tomllib.load(f)
        body = data.get("oryx", data)
        if not isinstance(body, dict):
            return {}

        for key in SECRET_FIELDS:
            if key in body:
                raise ValueError(
                    f"Security violation: '{key}' found in TOML config file. "
                    f"Secrets must only be provided via environment variables."
                )

        return body


class OryxSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with ORYX_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- credentials ---
    infura_api_key: SecretStr | None = None
    telegram_token: SecretStr | None = None

    # --- chain ---
    rpc_url: str | None = None
    block_number: int | None = Field(default=None, ge=0)
    strategy_addresses: list[str] = Field(
        default_factory=lambda: list(STARGATE_STRATEGY_ADDRESSES), min_length=1
    )

    # --- delivery ---
    telegram_chat_id: int = STARGATE_COMMITTEE_TELEGRAM_CHAT_ID
    dry_run: bool = False

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="ORYX_",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("infura_api_key", "telegram_token", mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr; treat empty strings as unset."""
        if v is None or isinstance(v, SecretStr):
            return v
        if isinstance(v, str) and not v.strip():
            return None
        return SecretStr(v)

    @field_validator("strategy_addresses")
    @classmethod
    def checksum_strategy_addresses(cls, v: list[str]) -> list[str]:
        """Normalize strategy addresses to checksum form, keeping their order."""
        checksummed = []
        for address in v:
            if not Web3.is_address(address):
                raise ValueError(f"Invalid strategy address: {address!r}")
            checksummed.append(Web3.to_checksum_address(address))
        return checksummed

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get("ORYX_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,  # optional secrets dir
        )

    @classmethod
    def load(cls, **overrides: Any) -> OryxSettings:
        """Build settings from every source with ``overrides`` taking precedence.

        Raises:
            ConfigurationError: If the TOML file is unreadable or holds a
                secret, or any value fails validation.
        """
        try:
            return cls(**overrides)
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    def require_credentials(self) -> None:
        """Ensure every credential the run needs is present.

        Raises:
            ConfigurationError: If the Infura key is missing and no explicit
                RPC URL is configured, or the Telegram token is missing
                outside dry-run mode.
        """
        if self.rpc_url is None and self.infura_api_key is None:
            raise ConfigurationError(
                "ORYX_INFURA_API_KEY not set (or provide --rpc-url)"
            )
        if not self.dry_run and self.telegram_token is None:
            raise ConfigurationError("ORYX_TELEGRAM_TOKEN not set")

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a dict with secrets redacted."""
        data = self.model_dump()
        for key in SECRET_FIELDS:
            if getattr(self, key):
                data[key] = REDACTED
        return data

    @property
    def rpc_url_required(self) -> str:
        """Get the JSON-RPC endpoint, building the Infura URL when none is set."""
        if self.rpc_url is not None:
            return self.rpc_url
        if self.infura_api_key is None:
            raise ConfigurationError("ORYX_INFURA_API_KEY not set")
        return INFURA_MAINNET_URL.format(
            api_key=self.infura_api_key.get_secret_value()
        )

    @property
    def telegram_token_required(self) -> str:
        """Get the Telegram bot token, raising ConfigurationError if not set."""
        if self.telegram_token is None:
            raise ConfigurationError("ORYX_TELEGRAM_TOKEN not set")
        return self.telegram_token.get_secret_value()
