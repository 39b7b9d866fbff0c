"""Upload, inspect and NFT lookup calls against the nftitem API."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import math
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, Optional, Union

import httpx

from .config import Settings
from .constants import (
    DEFAULT_CONTENT_TYPE,
    JSON_HEADERS,
    UPLOAD_COMMAND,
    nft_url,
    upload_url,
)
from .errors import ValidationError
from .payment import PaymentClientFactory, create_payment_client
from .signer import resolve_signer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadRequest:
    content: str
    content_type: str = DEFAULT_CONTENT_TYPE

    def __post_init__(self) -> None:
        try:
            base64.b64decode(self.content, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise ValidationError("upload content must be base64 encoded") from exc

    @classmethod
    def from_bytes(cls, raw: bytes, content_type: str = DEFAULT_CONTENT_TYPE) -> "UploadRequest":
        return cls(content=base64.b64encode(raw).decode("ascii"), content_type=content_type)

    def to_payload(self) -> Dict[str, str]:
        return {"content": self.content, "contentType": self.content_type}

    def encode(self) -> bytes:
        """Serialize the ``/upload`` request body."""
        body = {"command": UPLOAD_COMMAND, "data": self.to_payload()}
        return json.dumps(body, separators=(",", ":")).encode("utf-8")


@dataclass
class OperationResult:
    ok: bool
    status: int
    data: Any
    headers: Optional[Dict[str, str]] = None

    @classmethod
    def from_response(
        cls, response: httpx.Response, include_headers: bool = False
    ) -> "OperationResult":
        return cls(
            ok=response.is_success,
            status=response.status_code,
            data=_parse_json_body(response),
            headers=dict(response.headers.items()) if include_headers else None,
        )


def _parse_json_body(response: httpx.Response) -> Any:
    # Non-JSON bodies (including error pages) collapse to {}.
    try:
        return response.json()
    except ValueError:
        logger.debug(
            "non-JSON body from %s (status %s), using {}",
            response.request.url,
            response.status_code,
        )
        return {}


def parse_token_id(token_id: Union[str, int, float]) -> int:
    """Convert a CLI token id to a non-negative integer."""
    if isinstance(token_id, bool):
        raise ValidationError(f"Invalid tokenId: {token_id}")

    if isinstance(token_id, int):
        value = token_id
    else:
        text = str(token_id).strip()
        try:
            value = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                raise ValidationError(f"Invalid tokenId: {token_id!r}") from None
            if not math.isfinite(number) or not number.is_integer():
                raise ValidationError(f"Invalid tokenId: {token_id!r}")
            value = int(number)

    if value < 0:
        raise ValidationError(f"Invalid tokenId: {token_id!r}")
    return value


@asynccontextmanager
async def _http_client(client: Optional[httpx.AsyncClient]) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as owned:
        yield owned


async def upload_with_payment(
    request: UploadRequest,
    settings: Optional[Settings] = None,
    *,
    payment_client_factory: PaymentClientFactory = create_payment_client,
) -> OperationResult:
    """POST the upload through the x402 client, paying any 402 challenge."""
    settings = settings or Settings()
    signer = resolve_signer(settings)
    url = upload_url(settings.api_base)

    print(f"Uploading to: {url}")

    async with payment_client_factory(signer) as client:
        response = await client.post(url, content=request.encode(), headers=JSON_HEADERS)
    return OperationResult.from_response(response)


async def inspect_upload(
    request: UploadRequest,
    settings: Optional[Settings] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> OperationResult:
    """POST the upload without payment and return the raw answer with headers."""
    settings = settings or Settings()
    url = upload_url(settings.api_base)

    print(f"Inspecting (no payment): {url}")

    async with _http_client(http_client) as client:
        response = await client.post(url, content=request.encode(), headers=JSON_HEADERS)
    return OperationResult.from_response(response, include_headers=True)


async def get_nft_url(
    token_id: Union[str, int, float],
    settings: Optional[Settings] = None,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> OperationResult:
    settings = settings or Settings()
    url = nft_url(parse_token_id(token_id), settings.api_base)
    logger.debug("GET %s", url)

    async with _http_client(http_client) as client:
        response = await client.get(url)
    return OperationResult.from_response(response)
