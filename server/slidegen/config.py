from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # LLM provider used for deck generation: "groq", "xai", "gemini", or "claude"
    llm_provider: str = "groq"

    # Provider API keys (only the selected provider's key is required)
    groq_api_key: str = ""
    xai_api_key: str = ""
    gemini_api_key: str = ""
    anthropic_api_key: str = ""

    # Groq (OpenAI-compatible chat completions)
    groq_base_url: str = "https://api.groq.com/openai/v1"
    groq_model: str = "llama-3.3-70b-versatile"
    groq_vision_model: str = "llama-3.2-11b-vision-preview"

    # xAI (OpenAI-compatible chat completions)
    xai_base_url: str = "https://api.x.ai/v1"
    xai_model: str = "grok-2-1212"
    xai_vision_model: str = "grok-2-vision-1212"

    # Gemini
    gemini_model: str = "gemini-2.5-flash"
    gemini_vision_model: str = "gemini-2.5-flash"

    # Claude
    claude_model: str = "claude-sonnet-4-20250514"
    claude_vision_model: str = "claude-sonnet-4-20250514"

    # Transport timeout for one generation round-trip
    request_timeout_secs: float = 120.0

    # Uploads larger than this are skipped (10 MB)
    max_upload_bytes: int = 10 * 1024 * 1024

    # Local file storage for exported decks
    storage_dir: str = "./data"

    # App
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    debug: bool = True

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()
