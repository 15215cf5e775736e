import threading
import unittest
from types import SimpleNamespace
from unittest import mock

import support  # noqa: F401

import httpx
import openai
from fastapi.testclient import TestClient

from skillgap.ai.factory import get_llm_client
from skillgap.ai.providers.gemini_provider import GEMINI_OPENAI_BASE_URL, GeminiProvider
from skillgap.ai.providers.openai_provider import OpenAIProvider
from skillgap.ai.types import ChatMessage, JsonSchemaFormat, LLMError
from skillgap.analytics import db as analytics_db
from skillgap.analytics.db import get_latest_runs
from skillgap.main import app

MESSAGES = [ChatMessage(role="system", content="sys"), ChatMessage(role="user", content="hi")]


def _response(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _provider_with(create):
    provider = OpenAIProvider(model="gpt-test", api_key="sk-test")
    provider._client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return provider


def _runs_for(stage):
    return [run for run in get_latest_runs(limit=200) if run["stage"] == stage]


class OpenAIProviderTests(unittest.IsolatedAsyncioTestCase):
    async def test_schema_request_is_strict_and_logged(self):
        create = mock.AsyncMock(return_value=_response('{"ok": true}'))
        provider = _provider_with(create)
        schema = JsonSchemaFormat(name="thing", schema={"type": "object"})

        content = await provider.complete(MESSAGES, stage="test_schema", json_schema=schema, max_output_tokens=99)
        self.assertEqual(content, '{"ok": true}')

        kwargs = create.await_args.kwargs
        self.assertEqual(kwargs["model"], "gpt-test")
        self.assertEqual(kwargs["max_tokens"], 99)
        self.assertEqual(kwargs["messages"][1], {"role": "user", "content": "hi"})
        response_format = kwargs["response_format"]
        self.assertEqual(response_format["type"], "json_schema")
        self.assertTrue(response_format["json_schema"]["strict"])
        self.assertEqual(response_format["json_schema"]["name"], "thing")

        run = _runs_for("test_schema")[0]
        self.assertEqual(run["status"], "success")
        self.assertEqual(run["schema_constrained"], 1)
        self.assertEqual(run["model"], "gpt-test")

    async def test_json_mode_uses_json_object(self):
        create = mock.AsyncMock(return_value=_response("[]"))
        await _provider_with(create).complete(MESSAGES, stage="test_json_mode", json_mode=True)
        self.assertEqual(create.await_args.kwargs["response_format"], {"type": "json_object"})
        self.assertNotIn("max_tokens", create.await_args.kwargs)

    async def test_non_json_body_is_logged_as_invalid(self):
        create = mock.AsyncMock(return_value=_response("not json"))
        content = await _provider_with(create).complete(MESSAGES, stage="test_invalid", json_mode=True)
        self.assertEqual(content, "not json")
        self.assertEqual(_runs_for("test_invalid")[0]["error_code"], "invalid_schema")

    async def test_empty_response_raises(self):
        create = mock.AsyncMock(return_value=_response(""))
        with self.assertRaises(LLMError) as ctx:
            await _provider_with(create).complete(MESSAGES, stage="test_empty")
        self.assertEqual(ctx.exception.code, "empty_response")
        self.assertEqual(_runs_for("test_empty")[0]["status"], "empty")

    async def test_sdk_errors_are_mapped(self):
        request = httpx.Request("POST", "https://example.invalid/v1/chat/completions")
        timeout = mock.AsyncMock(side_effect=openai.APITimeoutError(request=request))
        with self.assertRaises(LLMError) as ctx:
            await _provider_with(timeout).complete(MESSAGES, stage="test_timeout")
        self.assertEqual(ctx.exception.code, "llm_timeout")

        broken = mock.AsyncMock(side_effect=openai.APIConnectionError(request=request))
        with self.assertRaises(LLMError) as ctx:
            await _provider_with(broken).complete(MESSAGES, stage="test_connection")
        self.assertEqual(ctx.exception.code, "llm_exception")
        self.assertEqual(_runs_for("test_connection")[0]["status"], "error")

    async def test_run_logging_happens_off_the_event_loop(self):
        create = mock.AsyncMock(return_value=_response("ok"))
        provider = _provider_with(create)
        await provider.complete(MESSAGES, stage="test_warm_up")

        writer_threads = []
        original = analytics_db.log_ai_analysis_run

        def record_thread(**kwargs):
            writer_threads.append(threading.get_ident())
            original(**kwargs)

        with mock.patch(
            "skillgap.ai.providers.openai_provider.log_ai_analysis_run", side_effect=record_thread
        ), mock.patch.object(analytics_db, "init_db", wraps=analytics_db.init_db) as init_db:
            await provider.complete(MESSAGES, stage="test_off_loop")
            await provider.complete(MESSAGES, stage="test_off_loop")

        self.assertEqual(len(writer_threads), 2)
        self.assertNotIn(threading.get_ident(), writer_threads)
        init_db.assert_not_called()
        self.assertEqual(len(_runs_for("test_off_loop")), 2)

    def test_missing_key_is_rejected(self):
        with self.assertRaises(LLMError) as ctx:
            OpenAIProvider(model="gpt-test", api_key="  ")
        self.assertEqual(ctx.exception.code, "llm_disabled")


class FactoryTests(unittest.TestCase):
    def test_gemini_is_the_default_provider(self):
        client = get_llm_client("AIza-test")
        self.assertIsInstance(client, GeminiProvider)
        self.assertEqual(str(client._client.base_url), GEMINI_OPENAI_BASE_URL)

    def test_unknown_provider_is_rejected(self):
        with mock.patch.dict("os.environ", {"AI_PROVIDER": "carrier-pigeon"}):
            with self.assertRaises(ValueError):
                get_llm_client("key")


class AnalyticsEndpointTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def test_requires_admin_key(self):
        self.assertEqual(self.client.get("/v1/analytics/ai-runs").status_code, 401)
        wrong = self.client.get("/v1/analytics/ai-runs", headers={"X-API-Key": "wrong"})
        self.assertEqual(wrong.status_code, 401)

    def test_lists_recent_runs(self):
        response = self.client.get("/v1/analytics/ai-runs?limit=5", headers={"X-API-Key": "test-admin-key"})
        self.assertEqual(response.status_code, 200)
        self.assertIsInstance(response.json(), list)
        self.assertLessEqual(len(response.json()), 5)

    def test_health_reports_provider(self):
        body = self.client.get("/v1/health").json()
        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["llmProvider"], "gemini")
        self.assertTrue(body["llmModel"])


if __name__ == "__main__":
    unittest.main()
