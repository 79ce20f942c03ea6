# tasks/ai_engine/__init__.py
"""
AI Engine Package
=================

Everything between an assistant request and the generative-AI provider.

Modules:
--------
- prompts: Pure prompt construction for suggest / generate / analyze
- client: ModelClient interface and the OpenAI-backed implementation
- parser: Validation of raw model output (DraftTask batches, prose)
- orchestrator: Coordination and provider-error translation

Architecture:
-------------
    PromptBuilder -> ModelClient -> ResponseParser
            \\___ AIOrchestrator ___/

The orchestrator receives its ModelClient by injection. The engine never
reads or writes the task store; workload analysis works on task summaries
handed in by the caller.

Usage:
------
    from tasks.ai_engine import build_orchestrator

    orchestrator = build_orchestrator()
    result = orchestrator.generate_tasks("Launch the company blog")
    drafts = result.draft_tasks
"""

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
from .orchestrator import (
    GENERATION_PARAMS,
    INTENT_ANALYZE,
    INTENT_GENERATE,
    INTENT_SUGGEST,
    AIOrchestrator,
    AnalyzeResult,
    GenerateResult,
    SuggestResult,
    build_orchestrator,
)
from .parser import DraftTask, parse_draft_tasks, parse_text
from .prompts import (
    Prompt,
    build_analyze_prompt,
    build_generate_prompt,
    build_suggest_prompt,
)

__all__ = [
    # Core classes
    "AIOrchestrator",
    "ModelClient",
    "OpenAIModelClient",
    "DraftTask",
    "Prompt",
    # Results and value objects
    "SuggestResult",
    "GenerateResult",
    "AnalyzeResult",
    "Completion",
    "GenerationParams",
    "UsageMetrics",
    # Errors
    "ModelClientError",
    "ProviderAuthError",
    "ProviderQuotaError",
    # Functions
    "build_orchestrator",
    "build_suggest_prompt",
    "build_generate_prompt",
    "build_analyze_prompt",
    "parse_draft_tasks",
    "parse_text",
    # Constants
    "GENERATION_PARAMS",
    "INTENT_SUGGEST",
    "INTENT_GENERATE",
    "INTENT_ANALYZE",
]
