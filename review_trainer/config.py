from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    llm_base_url: str = "https://openrouter.ai/api/v1"  # any OpenAI-compatible endpoint
    llm_api_key: str = ""
    llm_model: str = "anthropic/claude-sonnet-4"
    llm_max_output_tokens: int = 800
    llm_temperature: float = 0.2
    llm_timeout_seconds: float = 60.0
    cors_allowed_origins: list[str] = ["http://localhost:5173"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @property
    def is_llm_configured(self) -> bool:
        """True when endpoint, key and model are all present.

        A partially configured deployment is treated as unconfigured so the
        grader degrades to a fallback result instead of failing mid-request.
        """
        return all(
            value.strip()
            for value in (self.llm_base_url, self.llm_api_key, self.llm_model)
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
