"""Command-line entry point: pay & upload, inspect the 402 challenge, or look up an NFT."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Any, List, Optional

from .client import UploadRequest, get_nft_url, inspect_upload, upload_with_payment
from .config import Settings, load_settings
from .constants import CLI_COMMANDS, DEFAULT_CONTENT_TYPE, GREEN_SQUARE_PNG_BASE64, NFTS_PATH
from .errors import ConfigurationError, OperationError

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nftitem-upload",
        description="Upload images to api.nftitem.io, paying with x402.",
    )
    parser.add_argument(
        "--file",
        help="Path to image file (overrides built-in green square)",
    )
    parser.add_argument(
        "--env",
        help="Path to .env file to load",
    )
    parser.add_argument(
        "--get-nft",
        dest="get_nft",
        metavar="TOKEN_ID",
        help=f"GET {NFTS_PATH}/{{i}} - fetch NFT URL by token ID (e.g. 93)",
    )
    parser.add_argument(
        "--command",
        "--cmd",
        dest="command",
        choices=CLI_COMMANDS,
        help=(
            "upload (pay & upload), inspect (raw 402 response without payment), "
            "get (alias for --get-nft)"
        ),
    )
    parser.add_argument(
        "--content-type",
        dest="content_type",
        help="Content type sent with the upload (default: guessed from --file, else image/png)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def _dump(value: Any) -> str:
    return json.dumps(value, indent=2)


def _select_content(file: Optional[str], content_type: Optional[str]) -> UploadRequest:
    if file:
        path = Path(file)
        guessed, _ = mimetypes.guess_type(path.name)
        if guessed is None or not guessed.startswith("image/"):
            guessed = None
        return UploadRequest.from_bytes(
            path.read_bytes(), content_type or guessed or DEFAULT_CONTENT_TYPE
        )
    return UploadRequest(GREEN_SQUARE_PNG_BASE64, content_type or DEFAULT_CONTENT_TYPE)


async def _run_get(token_id: str, settings: Settings) -> None:
    result = await get_nft_url(token_id, settings)
    print(f"GET {NFTS_PATH}/{token_id} status: {result.status}")
    print(f"data: {_dump(result.data)}")
    if not result.ok:
        raise OperationError(f"GET nft failed: {result.status}", result.status, result.data)
    url = result.data.get("url") if isinstance(result.data, dict) else None
    print(f"OK - url: {url}")


async def _run_inspect(request: UploadRequest, settings: Settings) -> None:
    result = await inspect_upload(request, settings)
    print(f"status: {result.status}")
    print(f"headers: {_dump(result.headers)}")
    print(f"data: {_dump(result.data)}")


async def _run_upload(request: UploadRequest, settings: Settings) -> None:
    result = await upload_with_payment(request, settings)
    print(f"status: {result.status}")
    print(f"data: {_dump(result.data)}")
    if not result.ok:
        raise OperationError(f"Upload failed: {result.status}", result.status, result.data)
    print("OK")


async def run(args: argparse.Namespace) -> None:
    if args.command == "get" and not args.get_nft:
        raise ConfigurationError("--command get requires --get-nft <tokenId>")

    settings = load_settings(args.env)

    if args.get_nft:
        await _run_get(args.get_nft, settings)
        return

    request = _select_content(args.file, args.content_type)
    if args.command == "inspect":
        await _run_inspect(request, settings)
        return
    await _run_upload(request, settings)


def _error_detail(exc: BaseException) -> Any:
    # Prefer a response body carried by the error over its message.
    data = getattr(exc, "data", None)
    if data:
        return data
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            return response.json()
        except (AttributeError, RuntimeError, ValueError):
            pass
    return str(exc)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        asyncio.run(run(args))
    except KeyboardInterrupt:
        return 130
    except Exception as exc:
        logger.debug("command failed", exc_info=True)
        detail = _error_detail(exc)
        print(detail if isinstance(detail, str) else _dump(detail), file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
