"""Network configuration constants for the quiz application."""

DEFAULT_HOST: str = "0.0.0.0"
DEFAULT_PORT: int = 8000
DEFAULT_PUBLIC_URL: str = "http://127.0.0.1:8000"

DEFAULT_LLM_BASE_URL: str = "https://api.openai.com/v1"
DEFAULT_LLM_MODEL: str = "gpt-4o"
DEFAULT_LLM_TEMPERATURE: float = 0.7
LLM_REQUEST_TIMEOUT_SECONDS: float = 60.0

# "limits" notation: generations per client per window.
GENERATION_RATE_LIMIT: str = "10/hour"
