import base64
import json

import httpx
import pytest

pytest.importorskip("x402")
pytest.importorskip("eth_account")

from nftitem_x402.client import (
    UploadRequest,
    get_nft_url,
    inspect_upload,
    parse_token_id,
    upload_with_payment,
)
from nftitem_x402.config import Settings
from nftitem_x402.constants import GREEN_SQUARE_PNG_BASE64
from nftitem_x402.errors import ConfigurationError, ValidationError

KEY = "0x" + "1" * 64


class StubPaymentTransport(httpx.AsyncBaseTransport):
    """Answers a 402 by retrying once with a fake payment header."""

    def __init__(self, handler):
        self._inner = httpx.MockTransport(handler)

    async def handle_async_request(self, request):
        response = await self._inner.handle_async_request(request)
        if response.status_code != 402:
            return response
        request.headers["PAYMENT-SIGNATURE"] = "stub-proof"
        return await self._inner.handle_async_request(request)


def stub_factory(handler, signers=None):
    def factory(signer):
        if signers is not None:
            signers.append(signer.address)
        return httpx.AsyncClient(transport=StubPaymentTransport(handler))

    return factory


def forbidden(request):
    raise AssertionError(f"unexpected request to {request.url}")


def test_upload_request_payload():
    req = UploadRequest(GREEN_SQUARE_PNG_BASE64)
    assert req.to_payload() == {"content": GREEN_SQUARE_PNG_BASE64, "contentType": "image/png"}
    assert json.loads(req.encode()) == {
        "command": "UPLOAD",
        "data": {"content": GREEN_SQUARE_PNG_BASE64, "contentType": "image/png"},
    }


def test_upload_request_from_bytes():
    req = UploadRequest.from_bytes(b"hello", "image/jpeg")
    assert req.content == base64.b64encode(b"hello").decode()
    assert req.content_type == "image/jpeg"


def test_upload_request_rejects_non_base64():
    with pytest.raises(ValidationError):
        UploadRequest("not base64!!")


@pytest.mark.parametrize("value,expected", [("93", 93), (93, 93), ("0", 0), (" 7 ", 7), ("1e2", 100), (5.0, 5)])
def test_parse_token_id_valid(value, expected):
    assert parse_token_id(value) == expected


@pytest.mark.parametrize("value", ["abc", "", "nan", "NaN", "inf", float("nan"), "-1", "1.5", True])
def test_parse_token_id_invalid(value):
    with pytest.raises(ValidationError):
        parse_token_id(value)


@pytest.mark.asyncio
@pytest.mark.parametrize("token_id", [0, 1, 93, 123456789])
async def test_get_nft_url_issues_single_get(token_id):
    calls = []

    def handler(request):
        calls.append((request.method, request.url.path))
        return httpx.Response(200, json={"url": f"https://cdn.test/{token_id}.png"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        result = await get_nft_url(str(token_id), Settings(), http_client=http)

    assert calls == [("GET", f"/nfts/{token_id}")]
    assert result.ok
    assert result.status == 200
    assert result.data["url"] == f"https://cdn.test/{token_id}.png"
    assert result.headers is None


@pytest.mark.asyncio
@pytest.mark.parametrize("token_id", ["abc", float("nan"), ""])
async def test_get_nft_url_validates_before_network(token_id):
    async with httpx.AsyncClient(transport=httpx.MockTransport(forbidden)) as http:
        with pytest.raises(ValidationError):
            await get_nft_url(token_id, Settings(), http_client=http)


@pytest.mark.asyncio
async def test_get_nft_url_not_found():
    def handler(request):
        return httpx.Response(404, json={"error": "not found"})

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        result = await get_nft_url(404, Settings(), http_client=http)

    assert not result.ok
    assert result.status == 404
    assert result.data == {"error": "not found"}


@pytest.mark.asyncio
async def test_non_json_body_becomes_empty_mapping():
    def handler(request):
        return httpx.Response(502, text="<html>bad gateway</html>")

    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        result = await get_nft_url(1, Settings(), http_client=http)

    assert result.status == 502
    assert result.data == {}


@pytest.mark.asyncio
async def test_inspect_returns_raw_challenge():
    def handler(request):
        assert request.method == "POST"
        assert str(request.url) == "https://api.nftitem.io/upload"
        assert "payment-signature" not in request.headers
        return httpx.Response(
            402,
            json={"x402Version": 2, "accepts": []},
            headers={"payment-required": "challenge"},
        )

    req = UploadRequest(GREEN_SQUARE_PNG_BASE64)
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        result = await inspect_upload(req, Settings(), http_client=http)

    assert not result.ok
    assert result.status == 402
    assert result.headers["payment-required"] == "challenge"
    assert result.data == {"x402Version": 2, "accepts": []}


@pytest.mark.asyncio
async def test_upload_pays_and_retries():
    seen = []
    signers = []

    def handler(request):
        seen.append(dict(request.headers))
        if "payment-signature" not in request.headers:
            return httpx.Response(402, json={"accepts": []})
        return httpx.Response(200, json={"id": "abc"})

    result = await upload_with_payment(
        UploadRequest(GREEN_SQUARE_PNG_BASE64),
        Settings(private_key=KEY),
        payment_client_factory=stub_factory(handler, signers),
    )

    assert result.ok
    assert result.status == 200
    assert result.data == {"id": "abc"}
    assert result.headers is None
    assert len(seen) == 2
    assert seen[1]["payment-signature"] == "stub-proof"
    assert len(signers) == 1


@pytest.mark.asyncio
async def test_upload_and_inspect_send_identical_bodies():
    bodies = {}

    def recorder(name):
        def handler(request):
            bodies.setdefault(name, request.content)
            return httpx.Response(200, json={})

        return handler

    req = UploadRequest("aGVsbG8=", "image/gif")
    await upload_with_payment(
        req, Settings(private_key=KEY), payment_client_factory=stub_factory(recorder("paid"))
    )
    async with httpx.AsyncClient(transport=httpx.MockTransport(recorder("free"))) as http:
        await inspect_upload(req, Settings(), http_client=http)

    assert bodies["paid"] == bodies["free"]
    assert json.loads(bodies["paid"]) == {
        "command": "UPLOAD",
        "data": {"content": "aGVsbG8=", "contentType": "image/gif"},
    }


@pytest.mark.asyncio
async def test_upload_without_credentials_fails_before_request():
    with pytest.raises(ConfigurationError):
        await upload_with_payment(
            UploadRequest(GREEN_SQUARE_PNG_BASE64),
            Settings(),
            payment_client_factory=stub_factory(forbidden),
        )


@pytest.mark.asyncio
async def test_inspect_and_get_work_without_credentials():
    def handler(request):
        if request.method == "GET":
            return httpx.Response(200, json={"url": "https://cdn.test/1.png"})
        return httpx.Response(402, json={})

    settings = Settings()
    async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
        inspected = await inspect_upload(UploadRequest(GREEN_SQUARE_PNG_BASE64), settings, http_client=http)
        fetched = await get_nft_url(1, settings, http_client=http)

    assert inspected.status == 402
    assert fetched.ok
