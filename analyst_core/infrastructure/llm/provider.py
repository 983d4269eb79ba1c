import os

from langchain_openai import ChatOpenAI

from ...config.llm_config import (
    DEFAULT_MODEL,
    LLM_MAX_RETRIES,
    LLM_TIMEOUT,
    OPENROUTER_BASE_URL,
)


def has_llm_credentials() -> bool:
    return bool(os.getenv("OPENROUTER_API_KEY") or os.getenv("OPENAI_API_KEY"))


def get_llm(
    model: str = DEFAULT_MODEL, temperature: float = 0, timeout: float = LLM_TIMEOUT
) -> ChatOpenAI:
    """
    Build the chat model used by the stock analyst.
    OpenRouter is preferred when OPENROUTER_API_KEY is set, otherwise OpenAI.
    """
    settings: dict[str, object] = {
        "model": model,
        "temperature": temperature,
        "timeout": timeout,
        "max_retries": LLM_MAX_RETRIES,
    }

    or_key = os.getenv("OPENROUTER_API_KEY")
    if or_key:
        return ChatOpenAI(base_url=OPENROUTER_BASE_URL, api_key=or_key, **settings)

    # Fallback to OpenAI
    return ChatOpenAI(api_key=os.getenv("OPENAI_API_KEY"), **settings)
