"""
Generation Gateway for MockView

Resilient boundary to the structured-generation backend (an Ollama
``/api/generate`` endpoint). Handles:
- Transport retries with bounded exponential backoff
- Per-call timeouts
- Malformed-output retries with a simplified prompt
- A deterministic local mode for headless testing/dev
- Optional Langfuse tracing of backend calls

Callers always get either a validated result model or one of the typed
generation errors; raw ``httpx``/``json``/pydantic errors never escape.
"""

import asyncio
import json
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, cast

import httpx
from langfuse import Langfuse
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from mockview.config.settings import Settings
from mockview.core.errors import (
    GenerationError,
    GenerationUnavailable,
    MalformedGenerationOutput,
    ValidationError,
)
from mockview.core.local_generator import LocalGenerator
from mockview.models.generation import (
    CONTEXT_MODELS,
    RESULT_MODELS,
    EvaluationContext,
    FollowUpContext,
    GenerationContext,
    GenerationKind,
    GenerationResult,
    QuestionContext,
)
from mockview.prompts.evaluator import EvaluatorPrompts
from mockview.prompts.interviewer import InterviewerPrompts

logger = logging.getLogger(__name__)


class ParseErrorKind(str, Enum):
    """Why a backend payload was rejected."""

    DECODE = "decode"  # Not JSON at all
    SCHEMA = "schema"  # JSON, but wrong shape


class MalformedPayload(Exception):
    """Internal signal: payload could not be turned into the result model."""

    def __init__(self, kind: ParseErrorKind, detail: str):
        super().__init__(detail)
        self.kind = kind
        self.detail = detail


class ParseRetryState(BaseModel):
    """
    State machine for the malformed-output retry layer.

    Each rejected payload advances ``attempt`` and records the error kind.
    The first attempt uses the full prompt; later ones use the simplified one.
    """

    max_attempts: int = Field(default=3, ge=1)
    attempt: int = 0
    last_error_kind: ParseErrorKind | None = None
    last_error: str | None = None

    @property
    def exhausted(self) -> bool:
        return self.attempt >= self.max_attempts

    @property
    def use_simplified_prompt(self) -> bool:
        return self.last_error_kind is not None

    def record_failure(self, kind: ParseErrorKind, detail: str) -> None:
        self.attempt += 1
        self.last_error_kind = kind
        self.last_error = detail


class GenerationHealth(BaseModel):
    """Backend reachability report."""

    healthy: bool
    mode: str = "backend"  # "backend" or "local"
    models: list[str] = Field(default_factory=list)
    error: str | None = None


class RequiredModelsReport(BaseModel):
    """Which configured models the backend has installed."""

    all_present: bool
    missing: list[str] = Field(default_factory=list)
    present: list[str] = Field(default_factory=list)


class GenerationGateway:
    """
    Central generation component.

    Model Selection:
    - Heavy model: question, follow-up and evaluation generation
    - Light model: reserved for cheap calls (health/summary collaborators)

    Retry layers:
    - Outer: transport failures and error statuses, exponential backoff
    - Inner: malformed payloads, independent budget, simplified prompt
    """

    GENERATE_PATH = "/api/generate"
    TAGS_PATH = "/api/tags"
    HEALTH_TIMEOUT_SECONDS = 5.0

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the gateway.

        Args:
            settings: Application settings (backend host, models, retry budgets)
            client: Optional pre-built HTTP client (tests inject a mock transport)
            sleep: Coroutine used for backoff waits
        """
        self.settings = settings
        self.mock_mode = settings.mock_ai_services
        self._sleep = sleep

        self.client = client or httpx.AsyncClient(
            base_url=settings.ollama_host.rstrip("/"),
            headers={"Content-Type": "application/json"},
            timeout=settings.generation_timeout_seconds,
        )

        # Prompt templates
        self.interviewer_prompts = InterviewerPrompts()
        self.evaluator_prompts = EvaluatorPrompts()

        self.local = LocalGenerator()

        # Initialize Langfuse for observability
        self.langfuse = None
        if settings.langfuse_enabled:
            if settings.langfuse_secret_key and settings.langfuse_public_key:
                try:
                    self.langfuse = Langfuse(
                        secret_key=settings.langfuse_secret_key,
                        public_key=settings.langfuse_public_key,
                        host=settings.langfuse_base_url,
                    )
                    logger.info("Langfuse initialized for generation tracing")
                except Exception as e:
                    logger.warning(f"Failed to initialize Langfuse: {e}")
            else:
                logger.info("Langfuse keys not configured, tracing disabled")

        if self.mock_mode:
            logger.info("Generation gateway running in local mode (no backend calls)")

    async def close(self) -> None:
        """Close the HTTP client and flush Langfuse."""
        await self.client.aclose()
        if self.langfuse:
            try:
                self.langfuse.flush()
            except Exception as e:
                logger.warning(f"Failed to flush Langfuse: {e}")

    # =========================================================================
    # PUBLIC CONTRACT
    # =========================================================================

    async def generate(self, kind: GenerationKind | str, context: GenerationContext) -> GenerationResult:
        """
        Produce one structured result.

        Args:
            kind: Which result shape is wanted
            context: The matching context model for ``kind``

        Returns:
            GeneratedQuestion for question/follow_up, GeneratedEvaluation for evaluation

        Raises:
            GenerationUnavailable: Backend unreachable/erroring after all retries
            MalformedGenerationOutput: Payload never matched the schema
            ValidationError: Context does not match the requested kind
        """
        try:
            kind = GenerationKind(kind)
        except ValueError:
            raise ValidationError(f"Unknown generation kind: {kind!r}")

        expected = CONTEXT_MODELS[kind]
        if not isinstance(context, expected):
            raise ValidationError(
                f"Generation kind '{kind.value}' needs {expected.__name__}, "
                f"got {type(context).__name__}"
            )

        if self.mock_mode:
            return self.local.generate(kind, context)

        return await self._generate_structured(kind, context)

    # =========================================================================
    # INNER LAYER: MALFORMED OUTPUT
    # =========================================================================

    async def _generate_structured(self, kind: GenerationKind, context: GenerationContext) -> GenerationResult:
        """Generate one result, traced as a single Langfuse span."""
        competency = context.competency.name if isinstance(context, QuestionContext) else context.competency
        span = self._start_span(
            name=f"generate_{kind.value}",
            metadata={"model": self.settings.ollama_model_heavy, "competency": competency},
        )

        try:
            result = await self._generate_until_valid(kind, context)
        except GenerationError as e:
            self._end_span(span, error=e.message)
            raise

        self._end_span(span, output=result.model_dump(mode="json"))
        return result

    async def _generate_until_valid(self, kind: GenerationKind, context: GenerationContext) -> GenerationResult:
        """Call the backend until the payload validates or the budget runs out."""
        state = ParseRetryState(max_attempts=self.settings.malformed_output_retries)
        system = self._system_prompt(kind)

        while not state.exhausted:
            prompt = self._build_prompt(kind, context, simplified=state.use_simplified_prompt)

            # Transport failures propagate straight out as GenerationUnavailable
            raw = await self._call_backend(prompt, system=system, model=self.settings.ollama_model_heavy)

            try:
                return self._parse(kind, raw)
            except MalformedPayload as e:
                state.record_failure(e.kind, e.detail)
                logger.warning(
                    f"Malformed {kind.value} output (attempt {state.attempt}/{state.max_attempts}, "
                    f"{e.kind.value}): {e.detail[:200]}"
                )

        raise MalformedGenerationOutput(
            f"Backend returned malformed {kind.value} output {state.attempt} times "
            f"(last: {state.last_error_kind.value if state.last_error_kind else 'unknown'})",
            attempts=state.attempt,
        )

    def _system_prompt(self, kind: GenerationKind) -> str:
        if kind == GenerationKind.EVALUATION:
            return self.evaluator_prompts.SYSTEM_CONTEXT
        return self.interviewer_prompts.SYSTEM_CONTEXT

    def _build_prompt(self, kind: GenerationKind, context: GenerationContext, simplified: bool = False) -> str:
        """Pick the full or simplified prompt for a kind."""
        if kind == GenerationKind.QUESTION:
            context = cast(QuestionContext, context)
            if simplified:
                return self.interviewer_prompts.generate_simple_question_prompt(context)
            return self.interviewer_prompts.generate_question_prompt(context)

        if kind == GenerationKind.FOLLOW_UP:
            context = cast(FollowUpContext, context)
            if simplified:
                return self.interviewer_prompts.generate_simple_followup_prompt(context)
            return self.interviewer_prompts.generate_followup_prompt(context)

        context = cast(EvaluationContext, context)
        if simplified:
            return self.evaluator_prompts.generate_simple_evaluation_prompt(context)
        return self.evaluator_prompts.generate_evaluation_prompt(context)

    def _parse(self, kind: GenerationKind, raw: str) -> GenerationResult:
        """Parse raw backend text into the result model for ``kind``."""
        data = self._decode_json(raw)

        if not isinstance(data, dict):
            raise MalformedPayload(ParseErrorKind.SCHEMA, f"Expected a JSON object, got {type(data).__name__}")

        try:
            return RESULT_MODELS[kind].model_validate(data)
        except PydanticValidationError as e:
            raise MalformedPayload(ParseErrorKind.SCHEMA, str(e))

    def _decode_json(self, raw: str) -> Any:
        """Decode JSON, tolerating prose around a single object."""
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            pass

        # The model sometimes wraps the object in prose or code fences
        json_start = raw.find("{") if isinstance(raw, str) else -1
        json_end = raw.rfind("}") + 1 if isinstance(raw, str) else 0
        if json_start >= 0 and json_end > json_start:
            try:
                return json.loads(raw[json_start:json_end])
            except json.JSONDecodeError as e:
                raise MalformedPayload(ParseErrorKind.DECODE, f"Invalid JSON: {e}")

        raise MalformedPayload(ParseErrorKind.DECODE, "No JSON object in response")

    # =========================================================================
    # OUTER LAYER: TRANSPORT
    # =========================================================================

    async def _call_backend(self, prompt: str, system: str, model: str) -> str:
        """
        Send one prompt, retrying transport failures with exponential backoff.

        Returns:
            The backend's raw ``response`` text

        Raises:
            GenerationUnavailable: After ``generation_max_retries`` failed attempts
        """
        payload = {
            "model": model,
            "prompt": prompt,
            "system": system,
            "stream": False,
            "format": "json",
            "options": {
                "temperature": self.settings.generation_temperature,
                "num_predict": self.settings.generation_max_tokens,
            },
        }

        max_attempts = self.settings.generation_max_retries
        timeout = self.settings.generation_timeout_seconds
        last_error = "no attempts made"

        for attempt in range(max_attempts):
            try:
                response = await asyncio.wait_for(
                    self.client.post(self.GENERATE_PATH, json=payload),
                    timeout=timeout,
                )
                response.raise_for_status()

                body = response.json()
                text = body.get("response") if isinstance(body, dict) else None
                if not isinstance(text, str):
                    raise ValueError("Backend envelope has no 'response' text")
                return text

            except asyncio.TimeoutError:
                last_error = f"timed out after {timeout}s"
            except httpx.HTTPStatusError as e:
                last_error = f"backend returned {e.response.status_code}"
            except httpx.HTTPError as e:
                last_error = f"{type(e).__name__}: {e}"
            except ValueError as e:
                last_error = f"invalid backend envelope: {e}"

            logger.error(f"Generation backend attempt {attempt + 1}/{max_attempts} failed: {last_error}")

            if attempt < max_attempts - 1:
                delay = self.settings.generation_backoff_base_seconds * (2 ** attempt)
                if delay > 0:
                    await self._sleep(delay)

        raise GenerationUnavailable(
            f"Generation backend failed after {max_attempts} attempts: {last_error}",
            attempts=max_attempts,
        )

    # =========================================================================
    # TRACING
    # =========================================================================

    def _start_span(self, name: str, metadata: dict | None = None):
        if not self.langfuse:
            return None
        try:
            return self.langfuse.start_span(name=name, metadata=metadata or {})
        except Exception as e:
            logger.warning(f"Langfuse span start failed: {e}")
            return None

    def _end_span(self, span, output: Any = None, error: str | None = None) -> None:
        if span is None:
            return
        try:
            if error:
                span.update(level="ERROR", status_message=error)
            else:
                span.update(output=output)
            span.end()
        except Exception as e:
            logger.warning(f"Langfuse span end failed: {e}")

    def record_score(self, name: str, value: float, comment: str | None = None) -> None:
        """Attach a score to the trace store (no-op without Langfuse)."""
        if not self.langfuse:
            return
        try:
            self.langfuse.create_score(name=name, value=value, comment=comment)
        except Exception as e:
            logger.warning(f"Langfuse score failed: {e}")

    # =========================================================================
    # HEALTH
    # =========================================================================

    async def check_health(self) -> GenerationHealth:
        """Check whether the backend is reachable and list its models."""
        if self.mock_mode:
            return GenerationHealth(healthy=True, mode="local")

        try:
            response = await self.client.get(self.TAGS_PATH, timeout=self.HEALTH_TIMEOUT_SECONDS)
            if response.status_code >= 400:
                return GenerationHealth(healthy=False, error=f"HTTP {response.status_code}")

            data = response.json()
            entries = data.get("models") if isinstance(data, dict) else None
            if not isinstance(entries, list):
                return GenerationHealth(healthy=False, error="Unexpected /api/tags response shape")

            models = [m.get("name", "") for m in entries if isinstance(m, dict)]
            return GenerationHealth(healthy=True, models=models)

        except (httpx.HTTPError, ValueError) as e:
            return GenerationHealth(healthy=False, error=str(e) or type(e).__name__)

    async def check_required_models(self) -> RequiredModelsReport:
        """Report which of the configured models are installed."""
        required = [self.settings.ollama_model_light, self.settings.ollama_model_heavy]

        if self.mock_mode:
            return RequiredModelsReport(all_present=True, present=required)

        health = await self.check_health()
        if not health.healthy:
            return RequiredModelsReport(all_present=False, missing=required)

        present, missing = [], []
        for model in required:
            # Accept other tags of the same base model
            base = model.split(":")[0]
            if any(m == model or m.startswith(base + ":") for m in health.models):
                present.append(model)
            else:
                missing.append(model)

        return RequiredModelsReport(all_present=not missing, missing=missing, present=present)
