from lexscan.services.llm.base import LLMProvider

DEFAULT_MODELS = {
    "gemini": "gemini-1.5-flash",
    "openai": "gpt-4o-mini",
}


def create_llm_provider(settings) -> LLMProvider:
    """Create and return the configured LLM provider.

    Reads LLM_PROVIDER from settings; LLM_MODEL falls back to the provider's
    default model when unset. The OpenAI client refuses an empty key at
    construction, so a missing key becomes a placeholder and calls fail
    with an authentication error instead.
    """
    model = settings.LLM_MODEL or DEFAULT_MODELS.get(settings.LLM_PROVIDER)

    if settings.LLM_PROVIDER == "gemini":
        from lexscan.services.llm.gemini_provider import GeminiProvider
        return GeminiProvider(
            api_key=settings.GEMINI_API_KEY or "missing",
            model=model,
            max_attempts=settings.LLM_MAX_ATTEMPTS,
        )

    if settings.LLM_PROVIDER == "openai":
        from lexscan.services.llm.openai_provider import OpenAIProvider
        return OpenAIProvider(
            api_key=settings.OPENAI_API_KEY or "missing",
            model=model,
            max_attempts=settings.LLM_MAX_ATTEMPTS,
        )

    raise ValueError(f"Unsupported LLM provider: {settings.LLM_PROVIDER!r}")
