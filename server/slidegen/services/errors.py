"""Error taxonomy for deck generation.

Every failure the pipeline can surface derives from ``GenerationError`` so
callers (the HTTP layer, scripts) can catch one type and map the subclasses.
"""

from typing import Optional


class GenerationError(Exception):
    """Base class for all deck generation failures."""


class ConfigurationError(GenerationError):
    """Provider is misconfigured (unknown provider, missing credential)."""


class AuthError(ConfigurationError):
    """API key is absent, or the provider rejected it."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InputError(GenerationError):
    """The user input cannot produce a generation request."""


class ProviderError(GenerationError):
    """The model provider answered with a non-success status."""

    def __init__(self, status_code: Optional[int], message: str):
        self.status_code = status_code
        self.message = message
        prefix = f"{status_code} " if status_code is not None else ""
        super().__init__(f"Provider error: {prefix}{message}")


class MalformedResponseError(GenerationError):
    """The model's output could not be turned into a Deck."""

    user_message = "The AI returned an invalid response format. Please try again."

    def __init__(self, kind: str, detail: str):
        self.kind = kind  # "syntax_error" | "schema_error"
        self.detail = detail
        super().__init__(f"{self.user_message} ({kind}: {detail})")
