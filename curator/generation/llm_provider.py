"""Text generation backends behind a single interface."""

import json
import os
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional

import anthropic
import openai
from anthropic import Anthropic
from openai import OpenAI
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_random_exponential

from ..errors import ConfigurationError, GenerationError
from .models import GenerationStats, PromptRequest
from .prompts import LINK_PLACEHOLDER

# Provider name -> default base URL, default model, API key environment variables tried in order
PROVIDER_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"base_url": None, "model": "gpt-4o-mini", "key_envs": ["OPENAI_API_KEY"]},
    "grok": {"base_url": "https://api.x.ai/v1", "model": "grok-3-mini", "key_envs": ["GROK_API_KEY", "XAI_API_KEY"]},
    "anthropic": {"base_url": None, "model": "claude-sonnet-4-20250514", "key_envs": ["ANTHROPIC_API_KEY"]},
}
PROVIDER_ALIASES = {"xai": "grok", "claude": "anthropic"}


class TextGenerator(ABC):
    """Abstract base class for text generation backends."""

    name = "base"

    def __init__(self) -> None:
        self.stats = GenerationStats(model=getattr(self, "model", ""))

    @abstractmethod
    def _complete(self, request: PromptRequest) -> str:
        """Backend call returning raw text; may raise backend exceptions."""

    def generate(self, request: PromptRequest) -> str:
        """
        Generate text for a prompt.

        Args:
            request: Prompt text plus generation parameters

        Returns:
            Generated text, stripped

        Raises:
            GenerationError: backend unreachable, error status, or no usable content
        """
        self.stats.api_calls += 1
        try:
            text = self._complete(request)
        except GenerationError:
            self.stats.failures += 1
            raise

        if not text or not text.strip():
            self.stats.failures += 1
            raise GenerationError(f"Empty response from {self.name}", backend=self.name)

        return text.strip()

    def get_usage_stats(self) -> Dict:
        """Get usage statistics."""
        return self.stats.model_dump()


def _retrying(max_attempts: int, is_transient: Callable[[BaseException], bool]) -> Retrying:
    return Retrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_random_exponential(multiplier=1, max=30),
        retry=retry_if_exception(is_transient),
        reraise=True,
    )


def _openai_transient(error: BaseException) -> bool:
    if isinstance(error, (openai.APIConnectionError, openai.RateLimitError)):
        return True
    return isinstance(error, openai.APIStatusError) and error.status_code >= 500


def _anthropic_transient(error: BaseException) -> bool:
    if isinstance(error, (anthropic.APIConnectionError, anthropic.RateLimitError)):
        return True
    # 529 overloaded lands here too
    return isinstance(error, anthropic.APIStatusError) and error.status_code >= 500


class OpenAICompatibleGenerator(TextGenerator):
    """OpenAI chat completions, also used for OpenAI-compatible APIs like xAI Grok."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        max_retries: int = 3,
        timeout: float = 120.0,
    ) -> None:
        """
        Initialize OpenAI-compatible backend.

        Args:
            api_key: API key
            model: Model name to use
            base_url: Custom base URL (Grok, proxies, tests)
            temperature: Default sampling temperature
            max_tokens: Default completion token cap
            max_retries: Attempts on transient failures
            timeout: Request timeout in seconds
        """
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        # Retries are handled here, not inside the SDK
        self.client = OpenAI(api_key=api_key, base_url=base_url, max_retries=0, timeout=timeout)
        super().__init__()

    def _complete(self, request: PromptRequest) -> str:
        try:
            for attempt in _retrying(self.max_retries, _openai_transient):
                with attempt:
                    response = self.client.chat.completions.create(
                        model=self.model,
                        messages=[{"role": "user", "content": request.text}],
                        temperature=request.temperature if request.temperature is not None else self.temperature,
                        max_tokens=request.max_tokens or self.max_tokens,
                    )
        except openai.OpenAIError as e:
            raise GenerationError(f"{self.name} request failed: {e}", backend=self.name) from e

        if response.usage:
            self.stats.tokens_used += response.usage.total_tokens

        if not response.choices:
            raise GenerationError(f"No choices returned by {self.name}", backend=self.name)

        return response.choices[0].message.content or ""


class AnthropicGenerator(TextGenerator):
    """Anthropic Messages API backend."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str,
        model: str = "claude-sonnet-4-20250514",
        base_url: Optional[str] = None,
        temperature: float = 0.7,
        max_tokens: int = 4096,
        max_retries: int = 3,
        timeout: float = 120.0,
    ) -> None:
        """Initialize Anthropic backend."""
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self.client = Anthropic(api_key=api_key, base_url=base_url, max_retries=0, timeout=timeout)
        super().__init__()

    def _complete(self, request: PromptRequest) -> str:
        try:
            for attempt in _retrying(self.max_retries, _anthropic_transient):
                with attempt:
                    message = self.client.messages.create(
                        model=self.model,
                        max_tokens=request.max_tokens or self.max_tokens,
                        temperature=request.temperature if request.temperature is not None else self.temperature,
                        messages=[{"role": "user", "content": request.text}],
                    )
        except anthropic.AnthropicError as e:
            raise GenerationError(f"{self.name} request failed: {e}", backend=self.name) from e

        if message.usage:
            self.stats.tokens_used += message.usage.input_tokens + message.usage.output_tokens

        texts = [block.text for block in message.content if block.type == "text"]
        if not texts:
            raise GenerationError(f"No text response from {self.name}", backend=self.name)
        return "\n".join(texts)


class MockGenerator(TextGenerator):
    """Deterministic offline backend for tests and dry development runs."""

    name = "mock"
    model = "mock"

    def __init__(self) -> None:
        """Initialize mock provider."""
        super().__init__()
        self.calls: List[PromptRequest] = []

    def _complete(self, request: PromptRequest) -> str:
        self.calls.append(request)
        ctx = request.context
        title = ctx.get("title", "Untitled")

        if request.kind == "search":
            return "[]"

        if request.kind == "review":
            return json.dumps({
                "score": 82,
                "issues": [],
                "suggestions": ["Add one number from a real store"],
            })

        if request.kind in ("blog", "rewrite"):
            paragraph = (
                f"I read {title} this week and it changed how I think about page speed. "
                "Most stores ship too much code on every page and pay for it in lost orders. "
                "I start with the numbers, fix the slowest template first and measure again. "
            )
            tags = ", ".join(f'"{t}"' for t in ctx.get("topics", [])[:3])
            return (
                "---\n"
                f'title: "{title[:55]}"\n'
                f'date: "{ctx.get("date", "")}"\n'
                f'description: "My take on {title[:100]}"\n'
                'category: "Industry Insights"\n'
                f"tags: [{tags}]\n"
                'readTime: "2 min read"\n'
                'status: "draft"\n'
                "---\n\n"
                "## What this means for your store\n\n"
                + "\n\n".join([paragraph] * 4)
                + "\n\n### Key Takeaways\n\n- Measure first\n- Fix the slowest page\n- Measure again\n"
            )

        if request.kind == "linkedin":
            return (
                f"Quick tip from {ctx.get('source', 'my feed')}:\n\n"
                f"{title}. I tested this on two stores last month and the results were real. "
                "Start with one page, measure, then roll it out."
            )

        return f"Worth a read: {title} {LINK_PLACEHOLDER}"


def build_generator(llm_config: Dict[str, Any]) -> TextGenerator:
    """
    Create the text generator selected by configuration.

    Raises:
        ConfigurationError: unknown provider or missing API key
    """
    provider = str(llm_config.get("provider", "openai")).lower()
    provider = PROVIDER_ALIASES.get(provider, provider)

    if provider == "mock":
        return MockGenerator()

    if provider not in PROVIDER_DEFAULTS:
        raise ConfigurationError(f"Unknown LLM provider: {provider}")

    defaults = PROVIDER_DEFAULTS[provider]
    api_key = llm_config.get("api_key")
    if not api_key:
        for env_name in defaults["key_envs"]:
            api_key = os.environ.get(env_name)
            if api_key:
                break
    if not api_key:
        env_names = [llm_config.get("api_key_env")] + defaults["key_envs"]
        wanted = " or ".join(dict.fromkeys(e for e in env_names if e))
        raise ConfigurationError(f"No API key for {provider}. Set {wanted}.")

    kwargs = {
        "api_key": api_key,
        "model": llm_config.get("model") or defaults["model"],
        "base_url": llm_config.get("base_url") or defaults["base_url"],
        "temperature": llm_config.get("temperature", 0.7),
        "max_tokens": llm_config.get("max_tokens", 4096),
        "max_retries": llm_config.get("max_retries", 3),
        "timeout": llm_config.get("timeout", 120.0),
    }

    if provider == "anthropic":
        return AnthropicGenerator(**kwargs)

    generator = OpenAICompatibleGenerator(**kwargs)
    generator.name = provider
    return generator
