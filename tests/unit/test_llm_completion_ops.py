# Copyright (C) 2026 StableLlama
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

"""Defines the test llm completion ops unit so this responsibility stays isolated, testable, and easy to evolve."""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from unittest import TestCase
from unittest.mock import patch

import httpx
from fastapi.testclient import TestClient

from hckbookmarklet.core.config import LOGS_DIR
from hckbookmarklet.main import app, create_app
from hckbookmarklet.services.llm import llm_logging
from hckbookmarklet.services.llm.llm_completion_ops import openai_chat_complete
from hckbookmarklet.services.llm.llm_request_helpers import build_headers

_RealAsyncClient = httpx.AsyncClient

URL = "https://fake.local/v1/chat/completions"
BODY = {"model": "deepseek/deepseek-chat", "messages": [{"role": "user", "content": "Q"}]}


def _enable_llm_debug(test: TestCase) -> None:
    os.environ["HCK_LLM_DEBUG"] = "1"
    test.addCleanup(os.environ.pop, "HCK_LLM_DEBUG", None)


class OpenAIChatCompleteTest(TestCase):
    def setUp(self):
        _enable_llm_debug(self)
        llm_logging.llm_logs.clear()
        self.addCleanup(llm_logging.llm_logs.clear)
        self.requests: list[httpx.Request] = []

    def _call(self, handler):
        def recording_handler(request):
            self.requests.append(request)
            return handler(request)

        transport = httpx.MockTransport(recording_handler)

        def client_factory(*args, **kwargs):
            return _RealAsyncClient(*args, transport=transport, **kwargs)

        with patch(
            "hckbookmarklet.services.llm.llm_completion_ops.httpx.AsyncClient",
            side_effect=client_factory,
        ):
            return asyncio.run(
                openai_chat_complete(
                    url=URL,
                    headers=build_headers("sk-secret", referer="https://r.example", title="T"),
                    body=BODY,
                    timeout_s=5,
                )
            )

    def test_success_returns_json_and_logs_redacted_entry(self):
        reply = self._call(
            lambda request: httpx.Response(200, json={"choices": [{"message": {"content": "A"}}]})
        )
        self.assertTrue(reply.ok)
        self.assertEqual(reply.body["choices"][0]["message"]["content"], "A")

        sent = self.requests[0]
        self.assertEqual(sent.method, "POST")
        self.assertEqual(sent.headers["authorization"], "Bearer sk-secret")
        self.assertEqual(sent.headers["http-referer"], "https://r.example")
        self.assertEqual(sent.headers["x-title"], "T")
        self.assertEqual(json.loads(sent.content), BODY)

        self.assertEqual(len(llm_logging.llm_logs), 1)
        entry = llm_logging.llm_logs[0]
        self.assertEqual(entry["request"]["headers"]["Authorization"], "***")
        self.assertEqual(entry["response"]["status_code"], 200)
        self.assertIsNotNone(entry["timestamp_end"])

    def test_error_status_is_returned_with_parsed_body(self):
        reply = self._call(
            lambda request: httpx.Response(429, json={"error": {"message": "slow down"}})
        )
        self.assertFalse(reply.ok)
        self.assertEqual(reply.status_code, 429)
        self.assertEqual(reply.body, {"error": {"message": "slow down"}})

    def test_unparsable_error_body_becomes_empty_dict(self):
        reply = self._call(lambda request: httpx.Response(502, text="<html>Bad gateway</html>"))
        self.assertEqual(reply.status_code, 502)
        self.assertEqual(reply.body, {})

    def test_transport_error_propagates_and_is_logged(self):
        def fail(request):
            raise httpx.ConnectError("boom", request=request)

        with self.assertRaises(httpx.ConnectError):
            self._call(fail)
        self.assertEqual(llm_logging.llm_logs[0]["response"]["error_detail"], "boom")

    def test_dump_file_written_when_enabled(self):
        with tempfile.TemporaryDirectory() as td:
            dump_path = Path(td) / "logs" / "dump.log"
            os.environ["HCK_LLM_DUMP"] = "1"
            os.environ["HCK_LLM_DUMP_PATH"] = str(dump_path)
            try:
                self._call(lambda request: httpx.Response(200, json={"choices": []}))
            finally:
                os.environ.pop("HCK_LLM_DUMP")
                os.environ.pop("HCK_LLM_DUMP_PATH")
            text = dump_path.read_text(encoding="utf-8")
            self.assertIn(URL, text)
            self.assertNotIn("sk-secret", text)


class LlmLogsTest(TestCase):
    def setUp(self):
        _enable_llm_debug(self)
        llm_logging.llm_logs.clear()
        self.addCleanup(llm_logging.llm_logs.clear)
        # Built after the flag is set so the debug routes are mounted
        self.client = TestClient(create_app())

    def test_log_is_bounded(self):
        for i in range(llm_logging.MAX_LOG_ENTRIES + 5):
            llm_logging.add_llm_log(llm_logging.create_log_entry(f"u{i}", "POST", {}, None))
        self.assertEqual(len(llm_logging.llm_logs), llm_logging.MAX_LOG_ENTRIES)
        self.assertEqual(llm_logging.llm_logs[0]["request"]["url"], "u5")

    def test_debug_endpoints_list_and_clear(self):
        llm_logging.add_llm_log(llm_logging.create_log_entry("u", "POST", {}, {"a": 1}))
        r = self.client.get("/api/v1/debug/llm_logs")
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.json()[0]["request"]["body"], {"a": 1})

        r = self.client.delete("/api/v1/debug/llm_logs")
        self.assertEqual(r.json(), {"status": "ok"})
        self.assertEqual(llm_logging.llm_logs, [])


class LlmDebugDisabledTest(TestCase):
    def setUp(self):
        llm_logging.llm_logs.clear()
        self.addCleanup(llm_logging.llm_logs.clear)

    def test_entries_are_not_recorded_by_default(self):
        llm_logging.add_llm_log(llm_logging.create_log_entry("u", "POST", {}, {"q": "secret"}))
        self.assertEqual(llm_logging.llm_logs, [])

    def test_debug_routes_are_not_mounted_by_default(self):
        client = TestClient(app)
        self.assertEqual(client.get("/api/v1/debug/llm_logs").status_code, 404)
        self.assertEqual(client.delete("/api/v1/debug/llm_logs").status_code, 404)

    def test_default_dump_path_is_under_logs_dir(self):
        self.assertEqual(
            llm_logging._dump_path(), str(LOGS_DIR / "llm_raw.log")
        )
        with patch.dict(os.environ, {"HCK_LLM_DUMP_PATH": "/tmp/custom.log"}):
            self.assertEqual(llm_logging._dump_path(), "/tmp/custom.log")
