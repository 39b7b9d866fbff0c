"""nftitem x402 upload client (Python)."""

from __future__ import annotations

from .client import (
    OperationResult,
    UploadRequest,
    get_nft_url,
    inspect_upload,
    parse_token_id,
    upload_with_payment,
)
from .config import Settings, load_settings
from .constants import API_BASE, GREEN_SQUARE_PNG_BASE64, NFTS_PATH, UPLOAD_PATH
from .errors import ConfigurationError, NftItemError, OperationError, ValidationError
from .payment import PaymentClientFactory, create_payment_client
from .signer import normalize_private_key, resolve_signer

__all__ = [
    "API_BASE",
    "UPLOAD_PATH",
    "NFTS_PATH",
    "GREEN_SQUARE_PNG_BASE64",
    "Settings",
    "load_settings",
    "resolve_signer",
    "normalize_private_key",
    "PaymentClientFactory",
    "create_payment_client",
    "UploadRequest",
    "OperationResult",
    "parse_token_id",
    "upload_with_payment",
    "inspect_upload",
    "get_nft_url",
    "NftItemError",
    "ConfigurationError",
    "ValidationError",
    "OperationError",
]
