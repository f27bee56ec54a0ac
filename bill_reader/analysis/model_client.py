"""Model client abstraction layer.

Extended description:
        * Encapsulates provider/model setup (OpenAI by default, Groq optional) so
            swapping vendors only touches this file.
        * Exposes a single async API (TextGenerator.generate) returning the raw
            assistant text; decoding is left to the caller because the output is
            untrusted.
        * Bounds every call with a timeout and converts any provider failure into
            GenerationFailed so workflows can decide per stage what to do.
        * An empty reply is reported as DecodeFailed: the call succeeded but
            produced nothing a caller could decode.
"""

import asyncio
import logging
import time
from functools import lru_cache
from typing import Optional

from pydantic_ai import Agent
from pydantic_ai.exceptions import UnexpectedModelBehavior
from pydantic_ai.models import Model
from pydantic_ai.models.groq import GroqModel
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.groq import GroqProvider
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from bill_reader.core.config import Settings, get_settings
from bill_reader.core.errors import DecodeFailed, GenerationFailed

log = logging.getLogger("bill_reader.analysis")


def build_model(settings: Settings) -> Model:
    """Instantiate the configured chat model; a missing key is a startup error."""
    provider = settings.GENERATION_PROVIDER
    if provider == "groq":
        if not settings.GROQ_API_KEY:
            raise RuntimeError("GROQ_API_KEY is required when GENERATION_PROVIDER=groq.")
        return GroqModel(
            model_name=settings.GENERATION_MODEL,
            provider=GroqProvider(api_key=settings.GROQ_API_KEY),
        )
    if provider == "openai":
        if not settings.OPENAI_API_KEY:
            raise RuntimeError("OPENAI_API_KEY is required when GENERATION_PROVIDER=openai.")
        return OpenAIChatModel(
            model_name=settings.GENERATION_MODEL,
            provider=OpenAIProvider(api_key=settings.OPENAI_API_KEY),
        )
    raise RuntimeError(f"Unsupported GENERATION_PROVIDER: {provider}")


class TextGenerator:
    """Thin orchestrator around a pydantic-ai Agent with plain-text output.

    Key points:
        - One Agent per call so each stage carries its own instructions.
        - ``instructions`` plays the role of the schema hint; the user prompt
          carries the document or query.
        - A pre-built ``model`` can be injected (tests use FunctionModel).
    """

    def __init__(self, settings: Optional[Settings] = None, model: Optional[Model] = None):
        self.settings = settings or get_settings()
        self.model = model if model is not None else build_model(self.settings)
        self.timeout_s = self.settings.GENERATION_TIMEOUT_S

    def build_agent(self, instructions: str) -> Agent:
        if self.settings.DEBUG_GENERATION:
            log.debug(
                "agent_build instructions_preview=%s",
                instructions[:220].replace("\n", " "),
            )
        return Agent(self.model, instructions=instructions, output_type=str)

    async def generate(
        self,
        prompt: str,
        *,
        instructions: str,
        max_tokens: Optional[int] = None,
        stage: str = "generate",
    ) -> str:
        """Execute one model call and return the assistant text.

        Raises GenerationFailed on provider errors or timeout, and DecodeFailed
        when the model answers with no usable text.
        """
        agent = self.build_agent(instructions)
        model_settings = ModelSettings(
            temperature=self.settings.GENERATION_TEMPERATURE,
            max_tokens=max_tokens or self.settings.GENERATION_MAX_TOKENS,
        )
        t0 = time.time()
        try:
            result = await asyncio.wait_for(
                agent.run(prompt, model_settings=model_settings),
                timeout=self.timeout_s,
            )
        except asyncio.TimeoutError as exc:
            log.warning("model_run_timeout stage=%s timeout_s=%s", stage, self.timeout_s)
            raise GenerationFailed(
                f"The text generation service timed out during {stage}. Please try again."
            ) from exc
        except UnexpectedModelBehavior as exc:
            # pydantic-ai rejects an empty text reply before returning a result
            log.warning("model_run_unusable_output stage=%s error=%s", stage, exc)
            raise DecodeFailed(f"The text generation service returned nothing usable during {stage}.") from exc
        except Exception as exc:
            log.error("model_run_exception stage=%s error=%s", stage, exc, exc_info=True)
            raise GenerationFailed(f"Text generation failed during {stage}: {exc}") from exc
        latency_ms = int((time.time() - t0) * 1000)
        text = result.output
        if not isinstance(text, str) or not text.strip():
            log.warning("model_run_empty_output stage=%s latency_ms=%d", stage, latency_ms)
            raise DecodeFailed(f"The text generation service returned nothing during {stage}.")
        log.info("model_run_done stage=%s latency_ms=%d chars=%d", stage, latency_ms, len(text))
        if self.settings.DEBUG_GENERATION:
            log.debug("model_run output_preview=%s", text[:400].replace("\n", " "))
        return text


@lru_cache
def get_text_generator() -> TextGenerator:
    """Process-wide generator built on first use (FastAPI dependency)."""
    return TextGenerator(get_settings())
