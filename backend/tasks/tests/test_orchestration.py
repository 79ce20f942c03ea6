# tasks/tests/test_orchestration.py
"""
AI Orchestration Tests
======================

Test Philosophy:
----------------
- Mock the OpenAI SDK to avoid costs and flakiness
- Substitute the ModelClient with a recording double to prove which calls
  do (and do not) reach the provider
- Every provider failure must come out as one taxonomy error

Test Categories:
----------------
1. OpenAIModelClient - SDK call shape and error classification
2. AIOrchestrator    - credential gate, parameters, results, error mapping
"""

from __future__ import annotations

import json
from typing import List, Optional, Tuple
from unittest.mock import MagicMock, patch

from django.test import SimpleTestCase, override_settings

from api.exceptions import (
    ConfigurationError,
    InternalError,
    UpstreamAuthError,
    UpstreamParseError,
    UpstreamQuotaError,
    ValidationError,
)
from tasks.ai_engine.client import (
    Completion,
    GenerationParams,
    ModelClient,
    ModelClientError,
    OpenAIModelClient,
    ProviderAuthError,
    ProviderQuotaError,
    UsageMetrics,
)
from tasks.ai_engine.orchestrator import (
    GENERATION_PARAMS,
    INTENT_ANALYZE,
    INTENT_GENERATE,
    INTENT_SUGGEST,
    AIOrchestrator,
    build_orchestrator,
)


# ===========================================================================
# HELPER FIXTURES
# ===========================================================================


def create_mock_openai_response(
    content: Optional[str],
    prompt_tokens: int = 50,
    completion_tokens: int = 25,
) -> MagicMock:
    """Create a mock Chat Completions response object."""
    mock_choice = MagicMock()
    mock_choice.message.content = content

    mock_response = MagicMock()
    mock_response.choices = [mock_choice]
    mock_response.usage.prompt_tokens = prompt_tokens
    mock_response.usage.completion_tokens = completion_tokens
    mock_response.usage.total_tokens = prompt_tokens + completion_tokens
    return mock_response


def create_status_error(error_class, status_code: int, code: Optional[str] = None):
    """Build an openai APIStatusError subclass instance."""
    mock_response = MagicMock()
    mock_response.status_code = status_code
    body = {"code": code, "message": "provider says no"} if code else None
    return error_class(message=f"Error code: {status_code}", response=mock_response, body=body)


class RecordingModelClient(ModelClient):
    """ModelClient double that records calls and replays a scripted outcome."""

    def __init__(self, text: str = "ok", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.calls: List[Tuple[str, str, GenerationParams]] = []

    def complete(self, system_instruction, prompt, params):
        self.calls.append((system_instruction, prompt, params))
        if self.error is not None:
            raise self.error
        return Completion(
            text=self.text,
            usage=UsageMetrics(prompt_tokens=10, completion_tokens=5, total_tokens=15),
        )


def draft_batch_json(count: int = 5) -> str:
    return json.dumps([
        {
            "title": f"Task {i}",
            "description": "Do it",
            "priority": "high",
            "category": "launch",
            "estimatedDuration": 30,
        }
        for i in range(count)
    ])


# ===========================================================================
# OPENAI MODEL CLIENT TESTS
# ===========================================================================


class TestOpenAIModelClient(SimpleTestCase):
    """Tests for the OpenAI-backed ModelClient."""

    params = GenerationParams(max_tokens=123, temperature=0.3)

    def test_construction_does_not_create_sdk_client(self) -> None:
        with patch("tasks.ai_engine.client.OpenAI") as mock_openai_class:
            OpenAIModelClient(api_key="test-key")

        mock_openai_class.assert_not_called()

    @patch("tasks.ai_engine.client.OpenAI")
    def test_complete_calls_chat_completions(self, mock_openai_class: MagicMock) -> None:
        mock_client = MagicMock()
        mock_openai_class.return_value = mock_client
        mock_client.chat.completions.create.return_value = create_mock_openai_response("Hello")

        client = OpenAIModelClient(api_key="test-key", model="gpt-test", timeout=5.0)
        completion = client.complete("system text", "user text", self.params)

        mock_openai_class.assert_called_once_with(api_key="test-key", timeout=5.0, max_retries=0)
        kwargs = mock_client.chat.completions.create.call_args.kwargs
        self.assertEqual(kwargs["model"], "gpt-test")
        self.assertEqual(kwargs["max_tokens"], 123)
        self.assertEqual(kwargs["temperature"], 0.3)
        self.assertEqual(
            kwargs["messages"],
            [
                {"role": "system", "content": "system text"},
                {"role": "user", "content": "user text"},
            ],
        )
        self.assertEqual(completion.text, "Hello")
        self.assertEqual(completion.usage.total_tokens, 75)

    @patch("tasks.ai_engine.client.OpenAI")
    def test_none_content_becomes_empty_text(self, mock_openai_class: MagicMock) -> None:
        mock_client = MagicMock()
        mock_openai_class.return_value = mock_client
        mock_client.chat.completions.create.return_value = create_mock_openai_response(None)

        completion = OpenAIModelClient(api_key="k").complete("s", "p", self.params)

        self.assertEqual(completion.text, "")

    def _assert_raises(self, mock_openai_class, side_effect, expected) -> ModelClientError:
        mock_client = MagicMock()
        mock_openai_class.return_value = mock_client
        mock_client.chat.completions.create.side_effect = side_effect

        client = OpenAIModelClient(api_key="test-key")
        with self.assertRaises(expected) as ctx:
            client.complete("s", "p", self.params)
        self.assertEqual(mock_client.chat.completions.create.call_count, 1)
        return ctx.exception

    @patch("tasks.ai_engine.client.OpenAI")
    def test_authentication_error(self, mock_openai_class: MagicMock) -> None:
        from openai import AuthenticationError

        self._assert_raises(
            mock_openai_class,
            create_status_error(AuthenticationError, 401, "invalid_api_key"),
            ProviderAuthError,
        )

    @patch("tasks.ai_engine.client.OpenAI")
    def test_rate_limit_error(self, mock_openai_class: MagicMock) -> None:
        from openai import RateLimitError

        error = self._assert_raises(
            mock_openai_class,
            create_status_error(RateLimitError, 429, "insufficient_quota"),
            ProviderQuotaError,
        )
        self.assertIn("429", error.provider_message)

    @patch("tasks.ai_engine.client.OpenAI")
    def test_quota_code_on_other_status(self, mock_openai_class: MagicMock) -> None:
        from openai import PermissionDeniedError

        self._assert_raises(
            mock_openai_class,
            create_status_error(PermissionDeniedError, 403, "insufficient_quota"),
            ProviderQuotaError,
        )

    @patch("tasks.ai_engine.client.OpenAI")
    def test_timeout_is_generic_failure(self, mock_openai_class: MagicMock) -> None:
        from openai import APITimeoutError

        error = self._assert_raises(
            mock_openai_class, APITimeoutError(request=MagicMock()), ModelClientError
        )
        self.assertNotIsInstance(error, (ProviderAuthError, ProviderQuotaError))

    @patch("tasks.ai_engine.client.OpenAI")
    def test_connection_error_is_generic_failure(self, mock_openai_class: MagicMock) -> None:
        from openai import APIConnectionError

        error = self._assert_raises(
            mock_openai_class, APIConnectionError(request=MagicMock()), ModelClientError
        )
        self.assertNotIsInstance(error, (ProviderAuthError, ProviderQuotaError))

    @patch("tasks.ai_engine.client.OpenAI")
    def test_server_error_is_generic_failure(self, mock_openai_class: MagicMock) -> None:
        from openai import InternalServerError

        error = self._assert_raises(
            mock_openai_class, create_status_error(InternalServerError, 503), ModelClientError
        )
        self.assertIn("503", str(error))


# ===========================================================================
# ORCHESTRATOR TESTS
# ===========================================================================


class TestAIOrchestratorCredentialGate(SimpleTestCase):
    """A missing credential must fail before the provider is contacted."""

    def setUp(self) -> None:
        self.client = RecordingModelClient()
        self.orchestrator = AIOrchestrator(model_client=self.client, api_key=None)

    def test_suggest_without_credential(self) -> None:
        with self.assertRaises(ConfigurationError):
            self.orchestrator.suggest({"title": "Write report"})
        self.assertEqual(len(self.client.calls), 0)

    def test_generate_without_credential(self) -> None:
        with self.assertRaises(ConfigurationError):
            self.orchestrator.generate_tasks("Launch a blog")
        self.assertEqual(len(self.client.calls), 0)

    def test_analyze_without_credential(self) -> None:
        with self.assertRaises(ConfigurationError):
            self.orchestrator.analyze_workload([{"title": "Report"}])
        self.assertEqual(len(self.client.calls), 0)

    def test_empty_string_credential_counts_as_missing(self) -> None:
        orchestrator = AIOrchestrator(model_client=self.client, api_key="")

        self.assertFalse(orchestrator.is_configured)
        with self.assertRaises(ConfigurationError):
            orchestrator.suggest({"title": "Write report"})


class TestAIOrchestratorIntents(SimpleTestCase):
    def orchestrator(self, client: ModelClient) -> AIOrchestrator:
        return AIOrchestrator(model_client=client, api_key="test-key")

    def test_suggest_returns_text_and_usage(self) -> None:
        client = RecordingModelClient(text="Break it into three parts.")

        result = self.orchestrator(client).suggest({"title": "Write report"}, "for finance")

        self.assertEqual(result.suggestion_text, "Break it into three parts.")
        self.assertEqual(result.usage.total_tokens, 15)
        self.assertEqual(
            result.to_dict(),
            {
                "suggestionText": "Break it into three parts.",
                "usageMetrics": {"promptTokens": 10, "completionTokens": 5, "totalTokens": 15},
            },
        )
        system, prompt, params = client.calls[0]
        self.assertIn("Write report", prompt)
        self.assertIn("for finance", prompt)
        self.assertEqual(params, GENERATION_PARAMS[INTENT_SUGGEST])

    def test_generate_returns_validated_drafts(self) -> None:
        client = RecordingModelClient(text=draft_batch_json(6))

        result = self.orchestrator(client).generate_tasks("Launch a blog", "Solo")

        self.assertEqual(len(result.draft_tasks), 6)
        payload = result.to_dict()
        self.assertEqual(payload["draftTasks"][0]["title"], "Task 0")
        self.assertEqual(payload["draftTasks"][0]["priority"], "high")
        self.assertEqual(client.calls[0][2], GENERATION_PARAMS[INTENT_GENERATE])

    def test_analyze_returns_text_and_count(self) -> None:
        client = RecordingModelClient(text="You are overcommitted on Friday.")
        tasks = [{"title": "A", "priority": "high"}, {"title": "B"}, {"title": "C"}]

        result = self.orchestrator(client).analyze_workload(tasks)

        self.assertEqual(result.analysis_text, "You are overcommitted on Friday.")
        self.assertEqual(result.task_count, 3)
        self.assertEqual(result.to_dict()["taskCount"], 3)
        self.assertEqual(client.calls[0][2], GENERATION_PARAMS[INTENT_ANALYZE])

    def test_generate_uses_lowest_temperature(self) -> None:
        generate = GENERATION_PARAMS[INTENT_GENERATE].temperature

        self.assertLess(generate, GENERATION_PARAMS[INTENT_SUGGEST].temperature)
        self.assertLess(generate, GENERATION_PARAMS[INTENT_ANALYZE].temperature)

    def test_analyze_empty_list_fails_before_provider(self) -> None:
        client = RecordingModelClient()

        with self.assertRaises(ValidationError):
            self.orchestrator(client).analyze_workload([])
        self.assertEqual(client.calls, [])

    def test_blank_inputs_fail_before_provider(self) -> None:
        client = RecordingModelClient()
        orchestrator = self.orchestrator(client)

        with self.assertRaises(ValidationError):
            orchestrator.suggest({"title": ""})
        with self.assertRaises(ValidationError):
            orchestrator.generate_tasks("   ")
        self.assertEqual(client.calls, [])

    def test_malformed_batch_returns_no_drafts(self) -> None:
        batch = json.loads(draft_batch_json(4))
        batch[2]["priority"] = "urgent!!"
        client = RecordingModelClient(text=json.dumps(batch))

        with self.assertRaises(UpstreamParseError) as ctx:
            self.orchestrator(client).generate_tasks("Launch a blog")
        self.assertEqual(ctx.exception.index, 2)

    def test_invalid_json_is_parse_error(self) -> None:
        client = RecordingModelClient(text="[{not json")

        with self.assertRaises(UpstreamParseError):
            self.orchestrator(client).generate_tasks("Launch a blog")

    def test_empty_suggestion_is_parse_error(self) -> None:
        client = RecordingModelClient(text="   ")

        with self.assertRaises(UpstreamParseError):
            self.orchestrator(client).suggest({"title": "Write report"})


class TestAIOrchestratorErrorMapping(SimpleTestCase):
    def run_suggest(self, error: Exception) -> Tuple[Exception, RecordingModelClient]:
        client = RecordingModelClient(error=error)
        orchestrator = AIOrchestrator(model_client=client, api_key="test-key")
        with self.assertRaises(Exception) as ctx:
            orchestrator.suggest({"title": "Write report"})
        return ctx.exception, client

    def test_quota_maps_to_upstream_quota(self) -> None:
        error, client = self.run_suggest(ProviderQuotaError("quota", "insufficient_quota"))

        self.assertIsInstance(error, UpstreamQuotaError)
        self.assertEqual(error.status_code, 429)
        self.assertEqual(len(client.calls), 1)

    def test_auth_maps_to_upstream_auth(self) -> None:
        error, _ = self.run_suggest(ProviderAuthError("auth", "invalid_api_key"))

        self.assertIsInstance(error, UpstreamAuthError)
        self.assertEqual(error.status_code, 401)

    def test_other_failures_map_to_internal_error_with_provider_message(self) -> None:
        error, client = self.run_suggest(ModelClientError("timeout", "Request timed out."))

        self.assertIsInstance(error, InternalError)
        self.assertEqual(error.status_code, 500)
        self.assertEqual(error.message, "Failed to get AI suggestions")
        self.assertEqual(error.details, "Request timed out.")
        # No retry
        self.assertEqual(len(client.calls), 1)


class TestBuildOrchestrator(SimpleTestCase):
    @override_settings(OPENAI_API_KEY="sk-test", OPENAI_MODEL="gpt-x", OPENAI_TIMEOUT=7.0)
    def test_wires_openai_client_from_settings(self) -> None:
        orchestrator = build_orchestrator()

        self.assertTrue(orchestrator.is_configured)
        self.assertIsInstance(orchestrator.model_client, OpenAIModelClient)
        self.assertEqual(orchestrator.model_client.model, "gpt-x")
        self.assertEqual(orchestrator.model_client.timeout, 7.0)

    @override_settings(OPENAI_API_KEY=None)
    def test_unconfigured_orchestrator_still_builds(self) -> None:
        orchestrator = build_orchestrator()

        self.assertFalse(orchestrator.is_configured)
        self.assertEqual(orchestrator.health_check()["ai_configured"], False)
