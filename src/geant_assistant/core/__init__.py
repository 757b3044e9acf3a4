from .errors import (
    AssistantError,
    InvalidInputError,
    ConfigurationError,
    ProviderError,
    GenerationError,
    DegradedRetrievalError,
    FailurePolicy,
)

__all__ = [
    "AssistantError",
    "InvalidInputError",
    "ConfigurationError",
    "ProviderError",
    "GenerationError",
    "DegradedRetrievalError",
    "FailurePolicy",
]
