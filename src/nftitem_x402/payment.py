"""x402 payment-capable httpx client."""

from __future__ import annotations

from typing import Any, Callable

import httpx
from eth_account.signers.local import LocalAccount
from x402 import x402Client
from x402.http.clients import x402_httpx_transport
from x402.mechanisms.evm import EthAccountSigner
from x402.mechanisms.evm.exact import register_exact_evm_client

PaymentClientFactory = Callable[[LocalAccount], httpx.AsyncClient]


def create_x402_client(signer: LocalAccount) -> x402Client:
    client = x402Client()
    register_exact_evm_client(client, EthAccountSigner(signer))
    return client


def create_payment_client(signer: LocalAccount, **kwargs: Any) -> httpx.AsyncClient:
    """Return an ``httpx.AsyncClient`` that pays 402 challenges with ``signer``.

    The x402 transport detects the 402 response, builds the payment header for
    the exact EVM scheme and retries the request. Extra keyword arguments are
    passed to ``httpx.AsyncClient``.
    """
    return httpx.AsyncClient(
        transport=x402_httpx_transport(create_x402_client(signer)),
        **kwargs,
    )
