"""LLM Provider with Gemini primary and OpenRouter fallback."""

import json
from functools import lru_cache
from typing import Any, Dict, List, Optional, Protocol
from loguru import logger
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type
import google.generativeai as genai
import openai

from config import settings
from utils.errors import GenerationError


class TextGenerator(Protocol):
    """Language-generation capability consumed by the synthesizer."""

    async def generate(
        self,
        prompt: str,
        grounding_context: Optional[List[Dict[str, Any]]] = None,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
    ) -> str:
        ...


def render_grounding_context(grounding_context: Optional[List[Dict[str, Any]]]) -> str:
    """Serialize grounding records as a JSON block appended to the prompt."""
    if not grounding_context:
        return ""
    payload = json.dumps(grounding_context, indent=2, default=str)
    return f"\n\nGrounding context (live data, JSON):\n```json\n{payload}\n```"


class LLMProvider:
    """
    LLM provider with Gemini as primary and OpenRouter as fallback.
    """

    def __init__(self):
        # Initialize Gemini
        if settings.GEMINI_API_KEY:
            genai.configure(api_key=settings.GEMINI_API_KEY)
            self.gemini_enabled = True
        else:
            self.gemini_enabled = False
        self._gemini_models: Dict[str, genai.GenerativeModel] = {}

        # Initialize OpenRouter client
        if settings.OPENROUTER_API_KEY:
            self.openrouter_client = openai.AsyncOpenAI(
                base_url="https://openrouter.ai/api/v1",
                api_key=settings.OPENROUTER_API_KEY,
            )
        else:
            self.openrouter_client = None

        self.default_temperature = settings.LLM_TEMPERATURE
        self.max_tokens = settings.LLM_MAX_TOKENS

    async def generate(
        self,
        prompt: str,
        grounding_context: Optional[List[Dict[str, Any]]] = None,
        system_prompt: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        """
        Generate completion using Gemini with OpenRouter fallback.

        Args:
            prompt: User prompt
            grounding_context: Structured live data the answer must be based on
            system_prompt: System instructions
            model: Gemini model name (defaults to PRIMARY_LLM_MODEL)
            temperature: Generation temperature

        Returns:
            Generated text

        Raises:
            GenerationError: If no provider produced a completion
        """
        temp = temperature if temperature is not None else self.default_temperature
        full_prompt = prompt + render_grounding_context(grounding_context)

        if not self.gemini_enabled and self.openrouter_client is None:
            raise GenerationError("No LLM provider configured (set GEMINI_API_KEY or OPENROUTER_API_KEY)")

        # Try Gemini first
        if self.gemini_enabled:
            try:
                return await self._generate_gemini(
                    full_prompt, system_prompt, temp, model or settings.PRIMARY_LLM_MODEL
                )
            except Exception as e:
                logger.warning(f"Gemini failed: {e}, trying OpenRouter fallback")

        # Fallback to OpenRouter
        if self.openrouter_client:
            try:
                return await self._generate_openrouter(full_prompt, system_prompt, temp)
            except Exception as e:
                logger.error(f"OpenRouter also failed: {e}")
                raise GenerationError(f"Language generation failed: {e}") from e

        raise GenerationError("All LLM providers failed")

    def _gemini_model(self, name: str) -> genai.GenerativeModel:
        if name not in self._gemini_models:
            self._gemini_models[name] = genai.GenerativeModel(name)
        return self._gemini_models[name]

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((ConnectionError, TimeoutError)),
        reraise=True,
    )
    async def _generate_gemini(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
        model: str,
    ) -> str:
        """Generate using Gemini API."""

        # Build the full prompt
        full_prompt = ""
        if system_prompt:
            full_prompt = f"{system_prompt}\n\n"
        full_prompt += prompt

        generation_config = genai.GenerationConfig(
            temperature=temperature,
            max_output_tokens=self.max_tokens,
        )

        response = await self._gemini_model(model).generate_content_async(
            full_prompt,
            generation_config=generation_config,
        )

        text = (response.text or "").strip()
        if not text:
            raise GenerationError("Gemini returned an empty completion")
        return text

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        retry=retry_if_exception_type((ConnectionError, TimeoutError, openai.APIConnectionError)),
        reraise=True,
    )
    async def _generate_openrouter(
        self,
        prompt: str,
        system_prompt: Optional[str],
        temperature: float,
    ) -> str:
        """Generate using OpenRouter API."""

        messages = []

        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})

        messages.append({"role": "user", "content": prompt})

        response = await self.openrouter_client.chat.completions.create(
            model=settings.FALLBACK_LLM_MODEL,
            messages=messages,
            temperature=temperature,
            max_tokens=self.max_tokens,
        )

        text = (response.choices[0].message.content or "").strip()
        if not text:
            raise GenerationError("OpenRouter returned an empty completion")
        return text


@lru_cache()
def get_llm_provider() -> LLMProvider:
    """Get cached LLM provider instance."""
    return LLMProvider()
