"""Resolve the account that signs x402 payments."""

from __future__ import annotations

import logging

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .config import Settings
from .constants import MNEMONIC_ENV, PRIVATE_KEY_ENV
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Account.enable_unaudited_hdwallet_features()


def normalize_private_key(private_key: str) -> str:
    key = private_key.strip()
    if key.startswith(("0x", "0X")):
        key = key[2:]
    return f"0x{key}"


def resolve_signer(settings: Settings) -> LocalAccount:
    """Derive the signing account, preferring the private key over the mnemonic."""
    if settings.private_key:
        try:
            account = Account.from_key(normalize_private_key(settings.private_key))
        except Exception as exc:
            raise ConfigurationError(f"{PRIVATE_KEY_ENV} is not a valid private key") from exc
        logger.debug("using %s signer %s", PRIVATE_KEY_ENV, account.address)
        return account

    if settings.mnemonic:
        try:
            account = Account.from_mnemonic(settings.mnemonic.strip())
        except Exception as exc:
            raise ConfigurationError(f"{MNEMONIC_ENV} is not a valid mnemonic phrase") from exc
        logger.debug("using %s signer %s", MNEMONIC_ENV, account.address)
        return account

    raise ConfigurationError(
        f"UPLOAD requires {PRIVATE_KEY_ENV} or {MNEMONIC_ENV} in env or .env file"
    )
