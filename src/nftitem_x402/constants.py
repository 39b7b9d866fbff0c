"""Shared constants for the nftitem x402 upload client."""

from __future__ import annotations

from typing import Dict, List


API_BASE = "https://api.nftitem.io"
UPLOAD_PATH = "/upload"
NFTS_PATH = "/nfts"

UPLOAD_COMMAND = "UPLOAD"
DEFAULT_CONTENT_TYPE = "image/png"

PRIVATE_KEY_ENV = "X402_PRIVATE_KEY"
MNEMONIC_ENV = "X402_MNEMONIC"

CLI_COMMANDS: List[str] = ["upload", "get", "inspect"]

JSON_HEADERS: Dict[str, str] = {"Content-Type": "application/json"}

# 1x2 green PNG used when no --file is given.
GREEN_SQUARE_PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAIAAAACCAIAAAD91JpzAAAAD0lEQVR4nGNg+M8AQhAKABvyA/1tVLjHAAAAAElFTkSuQmCC"
)


def upload_url(api_base: str = API_BASE) -> str:
    return f"{api_base.rstrip('/')}{UPLOAD_PATH}"


def nft_url(token_id: int, api_base: str = API_BASE) -> str:
    return f"{api_base.rstrip('/')}{NFTS_PATH}/{token_id}"
