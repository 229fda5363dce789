import logging
from typing import Any, Protocol
from pydantic import SecretStr
from langchain_google_genai import ChatGoogleGenerativeAI
from soil_advisor.config import Settings
from soil_advisor.errors import CompletionError

logger = logging.getLogger(__name__)


class CompletionProvider(Protocol):
    async def complete(self, prompt: str) -> str: ...


def _content_text(content: Any) -> str:
    # Gemini may hand back a list of parts instead of a plain string
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type", "text") == "text":
                parts.append(part.get("text", ""))
        return "".join(parts)
    return ""


class GeminiCompletion:
    """Prompt in, text out, over LangChain's Gemini chat model."""

    def __init__(self, settings: Settings):
        self.model = settings.gemini_model
        self._llm = ChatGoogleGenerativeAI(
            model=settings.gemini_model,
            temperature=settings.gemini_temperature,
            api_key=SecretStr(settings.gemini_api_key),
            max_retries=settings.gemini_max_retries,
        )

    async def complete(self, prompt: str) -> str:
        try:
            resp = await self._llm.ainvoke(prompt)
        except Exception as exc:
            raise CompletionError("Completion request failed", str(exc)) from exc
        text = _content_text(getattr(resp, "content", "") or "")
        logger.debug("Raw response from %s: %s", self.model, text)
        return text
