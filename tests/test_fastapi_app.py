from __future__ import annotations

import json
import logging
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

import sellpoint.pipeline.invoker as invoker_mod
import sellpoint.serve.fastapi_app as app_mod
from sellpoint.common.config import ProviderConfig
from sellpoint.pipeline.rate_limit import SlidingWindowRateLimiter

REPLY = (
    '```json\n{"valueProposition":"自动报税","sellingPoints":[{"title":"一键报税",'
    '"description":"省时省心"}],"targetUser":"自由职业者","elevatorPitch":"...",'
    '"wechatCopy":"..."}\n```'
)


class _FakeClient:
    """Stands in for httpx.Client; replays queued (status, content) pairs."""

    replies: list[tuple[int, str | None]] = []
    calls: list[dict[str, Any]] = []

    def __init__(self, timeout: float | int | None = None) -> None:  # signature-compatible
        self.timeout = timeout

    def __enter__(self) -> "_FakeClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        return None

    def post(self, url: str, headers: dict[str, str] | None = None, json: dict[str, Any] | None = None) -> httpx.Response:  # noqa: A002
        type(self).calls.append({"url": url, "headers": headers, "json": json})
        status, content = type(self).replies.pop(0) if len(type(self).replies) > 1 else type(self).replies[0]
        if status != 200:
            return httpx.Response(status, text="upstream secret detail")
        return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch) -> TestClient:
    _FakeClient.replies = [(200, REPLY)]
    _FakeClient.calls = []
    monkeypatch.setattr(invoker_mod.httpx, "Client", _FakeClient)
    monkeypatch.setattr(app_mod, "CONFIG", ProviderConfig(api_key="test-key"))
    monkeypatch.setattr(app_mod, "LIMITER", SlidingWindowRateLimiter())
    return TestClient(app_mod.app)


def test_health_ok(client: TestClient) -> None:
    r = client.get("/health")
    assert r.status_code == 200
    data = r.json()
    assert data.get("status") == "ok"
    assert data.get("model") == "deepseek-ai/DeepSeek-V3"


def test_generate_end_to_end(client: TestClient) -> None:
    r = client.post("/api/generate", json={"description": "一款帮助自由职业者管理发票和报税的工具"})
    assert r.status_code == 200
    result = r.json()["result"]
    assert result["valueProposition"] == "自动报税"
    assert len(result["sellingPoints"]) == 1
    assert result["sellingPoints"][0] == {"title": "一键报税", "description": "省时省心"}

    assert len(_FakeClient.calls) == 1
    call = _FakeClient.calls[0]
    assert call["url"] == "https://api.siliconflow.cn/v1/chat/completions"
    assert call["headers"]["Authorization"] == "Bearer test-key"
    assert call["json"]["temperature"] == 0.4
    assert call["json"]["max_tokens"] == 1500
    assert "一款帮助自由职业者管理发票和报税的工具" in call["json"]["messages"][1]["content"]


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"description": ""},
        {"description": "   "},
        {"description": 42},
        {"description": "a" * 501},
    ],
)
def test_generate_rejects_bad_description(client: TestClient, body: dict[str, Any]) -> None:
    r = client.post("/api/generate", json=body)
    assert r.status_code == 400
    assert r.json()["error"]
    assert _FakeClient.calls == []


def test_generate_rejects_missing_body(client: TestClient) -> None:
    r = client.post("/api/generate", content="not json", headers={"Content-Type": "application/json"})
    assert r.status_code == 400
    assert "error" in r.json()


def test_sixth_request_in_window_is_rate_limited(client: TestClient) -> None:
    for _ in range(5):
        assert client.post("/api/generate", json={"description": "保温杯"}).status_code == 200
    r = client.post("/api/generate", json={"description": "保温杯"})
    assert r.status_code == 429
    assert r.json() == {"error": "请求太频繁，请稍后再试"}
    assert len(_FakeClient.calls) == 5


def test_missing_api_key_is_500(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(app_mod, "CONFIG", ProviderConfig(api_key=None))
    r = client.post("/api/generate", json={"description": "保温杯"})
    assert r.status_code == 500
    assert "error" in r.json()
    assert _FakeClient.calls == []


def test_all_attempts_failing_is_502_without_detail(client: TestClient) -> None:
    _FakeClient.replies = [(500, None)]
    r = client.post("/api/generate", json={"description": "保温杯"})
    assert r.status_code == 502
    assert r.json() == {"error": "AI 生成失败，请稍后重试"}
    assert "secret" not in r.text
    assert len(_FakeClient.calls) == 3


def test_recovers_after_bad_replies(client: TestClient) -> None:
    _FakeClient.replies = [
        (200, "抱歉，我无法生成。"),
        (200, json.dumps({"valueProposition": "x", "sellingPoints": []})),
        (200, REPLY),
    ]
    r = client.post("/api/generate", json={"description": "保温杯"})
    assert r.status_code == 200
    assert r.json()["result"]["targetUser"] == "自由职业者"
    assert len(_FakeClient.calls) == 3


def test_unparseable_reply_is_retried_then_502(client: TestClient) -> None:
    depth = 100_000
    _FakeClient.replies = [(200, '{"a": ' + "[" * depth + "]" * depth + "}")]
    r = client.post("/api/generate", json={"description": "保温杯"})
    assert r.status_code == 502
    assert r.json() == {"error": "AI 生成失败，请稍后重试"}
    assert len(_FakeClient.calls) == 3


def test_startup_warns_about_missing_key(monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture) -> None:
    monkeypatch.setattr(app_mod, "CONFIG", ProviderConfig(api_key=None))
    caplog.set_level(logging.INFO)
    with TestClient(app_mod.app):
        pass
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert any("AI_API_KEY" in m for m in warnings)
    assert not any("Prompt template" in m for m in warnings)


def test_startup_warns_about_incomplete_template(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, tmp_path
) -> None:  # noqa: ANN001
    path = tmp_path / "tpl.txt"
    path.write_text('<|system|>sys<|user|>{{input}} -> {"valueProposition": ""}', encoding="utf-8")
    monkeypatch.setattr(app_mod, "CONFIG", ProviderConfig(api_key="k", prompt_template=str(path)))
    caplog.set_level(logging.INFO)
    with TestClient(app_mod.app):
        pass
    warnings = [r.getMessage() for r in caplog.records if r.levelno == logging.WARNING]
    assert any("sellingPoints" in m and "wechatCopy" in m for m in warnings)
    assert not any("AI_API_KEY" in m for m in warnings)


def test_startup_warns_about_unreadable_template(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture, tmp_path
) -> None:  # noqa: ANN001
    missing = tmp_path / "absent.txt"
    monkeypatch.setattr(app_mod, "CONFIG", ProviderConfig(api_key="k", prompt_template=str(missing)))
    caplog.set_level(logging.INFO)
    with TestClient(app_mod.app):
        pass
    assert any("Failed to read prompt template" in r.getMessage() for r in caplog.records)
