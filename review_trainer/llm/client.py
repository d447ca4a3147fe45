import logging
from collections.abc import Awaitable, Callable

from openai import AsyncOpenAI

from review_trainer.config import Settings, get_settings
from review_trainer.llm.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

# Prompt text in, raw model text out. Any exception means "no response".
Completer = Callable[[str], Awaitable[str]]


class ChatCompletionClient:
    """Completer backed by an OpenAI-compatible chat completions endpoint.

    Makes exactly one request per call; the SDK's own retries are disabled.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client = AsyncOpenAI(
            base_url=settings.llm_base_url,
            api_key=settings.llm_api_key,
            timeout=settings.llm_timeout_seconds,
            max_retries=0,
        )

    async def __call__(self, prompt: str) -> str:
        response = await self._client.chat.completions.create(
            model=self.settings.llm_model,
            max_tokens=self.settings.llm_max_output_tokens,
            temperature=self.settings.llm_temperature,
            top_p=1.0,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        )
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def aclose(self) -> None:
        await self._client.close()


def build_completer(settings: Settings | None = None) -> ChatCompletionClient | None:
    """Return the configured completer, or None when settings are incomplete."""
    settings = settings or get_settings()
    if not settings.is_llm_configured:
        logger.warning(
            "LLM not fully configured. base_url=%s model=%s api_key_present=%s",
            settings.llm_base_url,
            settings.llm_model,
            "YES" if settings.llm_api_key else "NO",
        )
        return None
    return ChatCompletionClient(settings)
