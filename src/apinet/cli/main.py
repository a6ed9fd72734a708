# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""apinet CLI."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from dataclasses import asdict, is_dataclass, replace
from typing import Any

from ..client import NetworkClient
from ..config import load_http_settings, load_network_config
from ..errors import error_category_to_reason
from ..http.retry import RetryPolicy
from ..log import setup_logging
from ..models.response import ApiResponse
from ..models.result import ApiError, ApiResult, Success

CLI_TEXT_TRUNCATION_BYTES = 4096
METHODS = ("GET", "POST")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Call an envelope-style ({code, data, msg}) JSON API")
    parser.add_argument("method", type=str.upper, choices=METHODS, help="HTTP method")
    parser.add_argument("base_url", help="Base address, e.g. https://api.example.com")
    parser.add_argument("path", help="Request path relative to the base address")
    parser.add_argument("--body", help="JSON request body (POST)")
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Extra request header; may be repeated",
    )
    parser.add_argument(
        "--data",
        action="store_true",
        help="Unwrap the envelope and print only `data` (fails on business errors)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output JSON instead of a human-friendly summary",
    )
    parser.add_argument("--retries", type=int, default=None, help="Max retries for connectivity failures")
    parser.add_argument(
        "--ignore-ssl-errors",
        action="store_true",
        help="Skip TLS verification (useful for lab/self-signed targets)",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: APINET_LOG_LEVEL or WARNING)")
    return parser


def _parse_headers(parser: argparse.ArgumentParser, raw_headers: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in raw_headers:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            parser.error(f"invalid header {raw!r}; expected NAME:VALUE")
        headers[name.strip()] = value.strip()
    return headers


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    keep = max_bytes - len(suffix.encode("utf-8"))
    if keep <= 0:
        return suffix.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")
    return raw[:keep].decode("utf-8", errors="ignore") + suffix


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, ApiResponse):
        return value.to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return asdict(value)
    return value


def _error_payload(error: ApiError) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "category": error.category.value,
        "reason": error_category_to_reason(error.category),
        "message": error.message,
    }
    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        payload["status_code"] = status_code
    code = getattr(error, "code", None)
    if code is not None:
        payload["code"] = code
    return payload


def _print_result(result: ApiResult[Any], *, as_json: bool) -> int:
    if isinstance(result, Success):
        payload = _to_jsonable(result.data)
        if as_json:
            json.dump({"ok": True, "result": payload}, sys.stdout, indent=2, sort_keys=True, default=str)
            sys.stdout.write("\n")
        else:
            text = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
            print(_truncate_text_bytes(text, CLI_TEXT_TRUNCATION_BYTES))
        return 0

    if isinstance(result, ApiError):
        payload = _error_payload(result)
        if as_json:
            json.dump({"ok": False, "error": payload}, sys.stdout, indent=2, sort_keys=True, default=str)
            sys.stdout.write("\n")
        else:
            print(f"[apinet] {payload['category']}: {payload['message']}", file=sys.stderr)
            if payload["reason"]:
                print(f"Reason: {payload['reason']}", file=sys.stderr)
        return 1

    print(f"[apinet] unexpected result: {result!r}", file=sys.stderr)
    return 1


async def _call(client: NetworkClient, args: argparse.Namespace, headers: dict[str, str], body: Any) -> ApiResult[Any]:
    async with client:
        if args.data:
            return await client.request_data(args.method, args.path, body=body, headers=headers)
        return await client.request(args.method, args.path, body=body, headers=headers)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    headers = _parse_headers(parser, args.header)
    body: Any = None
    if args.body is not None:
        try:
            body = json.loads(args.body)
        except json.JSONDecodeError as exc:
            parser.error(f"--body is not valid JSON: {exc}")

    try:
        config = load_network_config(args.base_url)
    except ValueError as exc:
        parser.error(str(exc))
    if args.retries is not None:
        retry_policy = RetryPolicy.NO_RETRY if args.retries <= 0 else RetryPolicy(max_retries=args.retries)
        config = replace(config, retry_policy=retry_policy)

    settings = load_http_settings()
    if args.ignore_ssl_errors:
        settings.verify_ssl = False

    client = NetworkClient(config, settings=settings)
    result = asyncio.run(_call(client, args, headers, body))
    return _print_result(result, as_json=args.json)


if __name__ == "__main__":
    raise SystemExit(main())
