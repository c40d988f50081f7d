"""
Configuration: environment variables from Azure Key Vault, with optional
per-user overrides, falling back to .env when Key Vault is unavailable or
not configured.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .columns import Dialect, parse_target

logger = logging.getLogger(__name__)

# Known env vars to fetch from Key Vault
ENV_VARS = (
    "DATABASE_URL",
    "SOURCE_SCHEMA",
    "SCHEMA",
    "SKIP_UNUSED_COLUMNS",
    "DDL_TARGET",
    "API_AUTH_TOKEN",
)

_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_to_secret_name(env_key: str) -> str:
    """Convert env var name to Key Vault secret name (underscores -> hyphens)."""
    return env_key.replace("_", "-")


def _load_from_dotenv() -> None:
    """Load .env from the working directory or the project root; existing vars win."""
    for base in (Path.cwd(), Path(__file__).resolve().parent.parent):
        env_path = base / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            return


def load_env() -> None:
    """
    Load env vars from Azure Key Vault (or .env fallback).
    - KEYVAULT_NAME: vault name (required for Key Vault)
    - AZURE_USER_NAME: optional; use {VAR}-{USER} secrets first, then {VAR}
    - Does not overwrite existing os.environ values (allows CLI overrides)
    """
    # KEYVAULT_NAME itself may live in .env
    _load_from_dotenv()
    vault_name = os.environ.get("KEYVAULT_NAME", "").strip()
    user_name = os.environ.get("AZURE_USER_NAME", "").strip().upper()
    if not vault_name:
        return

    from azure.identity import DefaultAzureCredential
    from azure.keyvault.secrets import SecretClient

    try:
        credential = DefaultAzureCredential()
        client = SecretClient(vault_url=f"https://{vault_name}.vault.azure.net/", credential=credential)
    except Exception as e:
        logger.warning(f"Key Vault {vault_name} unavailable, using .env only: {e}")
        return

    for var in ENV_VARS:
        if var in os.environ:
            continue
        base_name = _env_to_secret_name(var)
        secret_names = [f"{base_name}-{user_name}", base_name] if user_name else [base_name]
        for name in secret_names:
            try:
                secret = client.get_secret(name)
            except Exception as e:
                logger.debug(f"Secret {name} not read from Key Vault: {e}")
                continue
            if secret and secret.value:
                os.environ[var] = secret.value
                break


def env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class Settings:
    """Runtime settings read from the environment."""

    database_url: Optional[str] = None
    schema: Optional[str] = None
    skip_unused_columns: bool = True
    target: Dialect = Dialect.MYSQL
    api_auth_token: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        schema = os.environ.get("SOURCE_SCHEMA", "").strip() or os.environ.get("SCHEMA", "").strip()
        return cls(
            database_url=os.environ.get("DATABASE_URL", "").strip() or None,
            schema=schema or None,
            skip_unused_columns=env_flag("SKIP_UNUSED_COLUMNS", True),
            target=parse_target(os.environ.get("DDL_TARGET", "").strip() or Dialect.MYSQL),
            api_auth_token=os.environ.get("API_AUTH_TOKEN") or None,
        )
