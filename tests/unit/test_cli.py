# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import json

import pytest

from apinet.cli import main as cli_main
from apinet.cli.main import _parse_headers, _truncate_text_bytes, build_parser
from apinet.client import NetworkClient
from apinet.http import HttpResponse, RetryPolicy, StubTransport

BASE_URL = "https://api.example.com"


def _envelope(code, data, msg):
    return HttpResponse(
        status_code=200,
        headers={"content-type": "application/json"},
        content=json.dumps({"code": code, "data": data, "msg": msg}).encode(),
    )


@pytest.fixture
def stub(monkeypatch):
    transport = StubTransport(
        {
            f"{BASE_URL}/user/1": _envelope(200, {"id": 1, "name": "Test"}, "success"),
            f"{BASE_URL}/user/999": _envelope(404, None, "user not found"),
            f"{BASE_URL}/fail": HttpResponse(status_code=503, content=b"down"),
        }
    )
    captured = {}

    def factory(config, settings=None):
        captured["config"] = config
        captured["settings"] = settings
        return NetworkClient(config, transport=transport, settings=settings)

    monkeypatch.setattr(cli_main, "NetworkClient", factory)
    transport.captured = captured
    return transport


def test_build_parser_defaults():
    args = build_parser().parse_args(["get", BASE_URL, "/user/1"])
    assert args.method == "GET"
    assert args.header == []
    assert args.data is False
    assert args.json is False
    assert args.retries is None


def test_parse_headers():
    parser = build_parser()
    assert _parse_headers(parser, ["Authorization: Bearer t", "X-Empty:"]) == {"Authorization": "Bearer t", "X-Empty": ""}
    with pytest.raises(SystemExit):
        _parse_headers(parser, ["no-separator"])


def test_truncate_text_bytes():
    assert _truncate_text_bytes("short", 100) == "short"
    truncated = _truncate_text_bytes("x" * 100, 30)
    assert truncated.endswith("...[truncated]")
    assert len(truncated.encode("utf-8")) <= 30


def test_envelope_is_printed_as_json(stub, capsys):
    assert cli_main.main(["GET", BASE_URL, "/user/1", "--json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload == {"ok": True, "result": {"code": 200, "data": {"id": 1, "name": "Test"}, "msg": "success"}}
    assert stub.closed is True


def test_data_mode_reports_business_errors(stub, capsys):
    assert cli_main.main(["GET", BASE_URL, "/user/999", "--data"]) == 1
    err = capsys.readouterr().err
    assert "[apinet] BUSINESS: user not found" in err
    assert "Reason:" in err


def test_http_error_json_payload(stub, capsys):
    assert cli_main.main(["GET", BASE_URL, "/fail", "--json", "--retries", "0"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["ok"] is False
    assert payload["error"]["category"] == "HTTP"
    assert payload["error"]["status_code"] == 503
    assert stub.captured["config"].retry_policy == RetryPolicy.NO_RETRY


def test_post_body_and_headers_are_sent(stub, capsys):
    stub.add(f"{BASE_URL}/login", _envelope(200, {"token": "abc"}, "success"))
    exit_code = cli_main.main(["POST", BASE_URL, "/login", "--body", '{"username": "test"}', "-H", "X-Trace: 1", "--data"])

    assert exit_code == 0
    request = stub.requests[-1]
    assert request.method == "POST"
    assert json.loads(request.body) == {"username": "test"}
    assert request.headers["X-Trace"] == "1"
    assert json.loads(capsys.readouterr().out) == {"token": "abc"}


def test_retries_and_ssl_flags(stub, capsys):
    cli_main.main(["GET", BASE_URL, "/user/1", "--retries", "5", "--ignore-ssl-errors"])
    capsys.readouterr()
    assert stub.captured["config"].retry_policy.max_retries == 5
    assert stub.captured["settings"].verify_ssl is False


def test_invalid_body_and_base_url_are_usage_errors(stub):
    with pytest.raises(SystemExit):
        cli_main.main(["POST", BASE_URL, "/login", "--body", "{not json"])
    with pytest.raises(SystemExit):
        cli_main.main(["GET", "not-a-url", "/user/1"])
