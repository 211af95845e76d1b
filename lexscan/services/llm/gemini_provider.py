from lexscan.services.llm.openai_provider import OpenAIProvider

GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"


class GeminiProvider(OpenAIProvider):
    """Gemini through Google's OpenAI-compatible endpoint."""

    def __init__(self, api_key: str, model: str, max_attempts: int = 1):
        super().__init__(api_key=api_key, model=model, base_url=GEMINI_OPENAI_BASE_URL, max_attempts=max_attempts)
