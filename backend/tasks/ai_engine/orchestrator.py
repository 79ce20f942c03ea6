# tasks/ai_engine/orchestrator.py

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

from django.conf import settings

from api.exceptions import (
    ConfigurationError,
    InternalError,
    UpstreamAuthError,
    UpstreamQuotaError,
    ValidationError,
)

from . import prompts
from .client import (
    Completion,
    GenerationParams,
    ModelClient,
    ModelClientError,
    OpenAIModelClient,
    ProviderAuthError,
    ProviderQuotaError,
    UsageMetrics,
)
from .parser import DraftTask, parse_draft_tasks, parse_text

# Configure logging for pipeline auditing
logger = logging.getLogger(__name__)


INTENT_SUGGEST = "suggest"
INTENT_GENERATE = "generate"
INTENT_ANALYZE = "analyze"

# Fixed per intent. Generate runs cooler because it must return bare JSON.
GENERATION_PARAMS: Dict[str, GenerationParams] = {
    INTENT_SUGGEST: GenerationParams(max_tokens=500, temperature=0.7),
    INTENT_GENERATE: GenerationParams(max_tokens=800, temperature=0.5),
    INTENT_ANALYZE: GenerationParams(max_tokens=400, temperature=0.6),
}

FAILURE_MESSAGES: Dict[str, str] = {
    INTENT_SUGGEST: "Failed to get AI suggestions",
    INTENT_GENERATE: "Failed to generate tasks",
    INTENT_ANALYZE: "Failed to analyze workload",
}


@dataclass(frozen=True)
class SuggestResult:
    suggestion_text: str
    usage: UsageMetrics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suggestionText": self.suggestion_text,
            "usageMetrics": self.usage.to_dict(),
        }


@dataclass(frozen=True)
class GenerateResult:
    draft_tasks: List[DraftTask]
    usage: UsageMetrics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "draftTasks": [draft.to_dict() for draft in self.draft_tasks],
            "usageMetrics": self.usage.to_dict(),
        }


@dataclass(frozen=True)
class AnalyzeResult:
    analysis_text: str
    task_count: int
    usage: UsageMetrics

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analysisText": self.analysis_text,
            "taskCount": self.task_count,
            "usageMetrics": self.usage.to_dict(),
        }


class AIOrchestrator:
    """
    The central coordination layer for the assistant intents.

    Each entry point runs PromptBuilder -> ModelClient -> ResponseParser:
      - suggest          -> SuggestResult
      - generate_tasks   -> GenerateResult
      - analyze_workload -> AnalyzeResult

    The model client is injected; the orchestrator never opens its own
    provider connection and never touches the task store. Provider failures
    are translated into the service error taxonomy. There is a single
    attempt per request.
    """

    def __init__(self, model_client: ModelClient, api_key: Optional[str]):
        self.model_client = model_client
        self.api_key = api_key

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)

    def _ensure_configured(self) -> None:
        if not self.is_configured:
            logger.warning("Orchestrator: AI call rejected, OPENAI_API_KEY is not configured")
            raise ConfigurationError()

    def _complete(self, intent: str, prompt: prompts.Prompt) -> Completion:
        params = GENERATION_PARAMS[intent]
        try:
            completion = self.model_client.complete(
                prompt.system_instruction, prompt.user_prompt, params
            )
        except ProviderQuotaError as e:
            raise UpstreamQuotaError(details=e.provider_message) from e
        except ProviderAuthError as e:
            raise UpstreamAuthError(details=e.provider_message) from e
        except ModelClientError as e:
            raise InternalError(FAILURE_MESSAGES[intent], details=e.provider_message) from e

        logger.info(
            f"Orchestrator: {intent} completed "
            f"(total_tokens={completion.usage.total_tokens})"
        )
        return completion

    def _run(self, intent: str, build: Callable[[], prompts.Prompt]) -> Completion:
        # Input contract is checked before the credential so callers see 400s first
        prompt = build()
        self._ensure_configured()
        return self._complete(intent, prompt)

    def suggest(self, task: Mapping[str, Any], context: Optional[str] = None) -> SuggestResult:
        completion = self._run(
            INTENT_SUGGEST, lambda: prompts.build_suggest_prompt(task, context)
        )
        return SuggestResult(
            suggestion_text=parse_text(completion.text),
            usage=completion.usage,
        )

    def generate_tasks(
        self, description: str, project_context: Optional[str] = None
    ) -> GenerateResult:
        completion = self._run(
            INTENT_GENERATE,
            lambda: prompts.build_generate_prompt(description, project_context),
        )
        drafts = parse_draft_tasks(completion.text)
        logger.info(f"Orchestrator: accepted {len(drafts)} generated task(s)")
        return GenerateResult(draft_tasks=drafts, usage=completion.usage)

    def analyze_workload(self, tasks: Sequence[Mapping[str, Any]]) -> AnalyzeResult:
        if not tasks:
            raise ValidationError("Tasks array is required and must not be empty")
        completion = self._run(
            INTENT_ANALYZE, lambda: prompts.build_analyze_prompt(tasks)
        )
        return AnalyzeResult(
            analysis_text=parse_text(completion.text),
            task_count=len(tasks),
            usage=completion.usage,
        )

    def health_check(self) -> Dict[str, Any]:
        return {
            "orchestrator": "healthy",
            "ai_configured": self.is_configured,
            "model": getattr(self.model_client, "model", None),
        }


def build_orchestrator() -> AIOrchestrator:
    """Wire the production orchestrator from Django settings."""
    api_key = getattr(settings, "OPENAI_API_KEY", None)
    client = OpenAIModelClient(
        api_key=api_key or "",
        model=getattr(settings, "OPENAI_MODEL", None),
        timeout=getattr(settings, "OPENAI_TIMEOUT", None),
    )
    return AIOrchestrator(model_client=client, api_key=api_key)
