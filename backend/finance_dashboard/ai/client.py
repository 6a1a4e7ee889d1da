import logging
from typing import Optional, Dict, Any

import litellm

from finance_dashboard.config import Settings

logger = logging.getLogger(__name__)

litellm.drop_params = True

PLACEHOLDER_KEYS = {"", "your-gemini-api-key-here", "your-api-key-here"}

PROVIDER_ENV_KEYS = {
    "gemini": "GEMINI_API_KEY",
    "openrouter": "OPENROUTER_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
}


class AIClient:
    """
    Thin wrapper around litellm for one configured provider.

    Built once at application startup and handed to the parsing service.
    """

    def __init__(self, settings: Settings):
        self.provider = settings.ai_provider
        self.model = self._get_model_string(settings.ai_model)
        self.api_key = self._get_api_key(settings)
        self.api_base = self._get_api_base(settings)

    def _get_model_string(self, model: str) -> str:
        if self.provider in ("gemini", "openrouter", "ollama"):
            prefix = f"{self.provider}/"
            if not model.startswith(prefix):
                return f"{prefix}{model}"
        return model

    def _get_api_key(self, settings: Settings) -> Optional[str]:
        key = getattr(settings, f"{self.provider}_api_key", None)
        if key is None or key.strip() in PLACEHOLDER_KEYS:
            return None
        return key

    def _get_api_base(self, settings: Settings) -> Optional[str]:
        if self.provider == "openrouter":
            return "https://openrouter.ai/api/v1"
        elif self.provider == "ollama":
            return settings.ai_base_url or "http://localhost:11434"
        return settings.ai_base_url

    @property
    def is_configured(self) -> bool:
        if self.provider == "ollama":
            return True
        return self.api_key is not None

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.1,
        max_tokens: int = 1000,
        json_mode: bool = False
    ) -> str:
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt}
        ]

        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }

        if self.api_key:
            kwargs["api_key"] = self.api_key
        if self.api_base:
            kwargs["api_base"] = self.api_base
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await litellm.acompletion(**kwargs)
            return response.choices[0].message.content or ""
        except Exception as e:
            logger.error(f"AI completion error ({self.provider}): {e}")
            raise


def strip_code_fences(raw: str) -> str:
    cleaned = raw.strip()
    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]
    return cleaned.strip()


def build_ai_client(settings: Settings) -> AIClient:
    client = AIClient(settings)
    if client.is_configured:
        logger.info(f"AI parsing enabled with {client.model}")
    else:
        env_key = PROVIDER_ENV_KEYS.get(client.provider, "API key")
        logger.warning(f"{env_key} not configured, transactions will use keyword parsing")
    return client
