from typing import Optional

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Vector index (Qdrant)
    qdrant_url: str = "http://localhost:6333"
    qdrant_api_key: Optional[SecretStr] = None
    qdrant_collection: str = "geant_documents"
    qdrant_timeout: float = 30.0

    # Embedding provider (Hugging Face inference router)
    hf_api_key: Optional[SecretStr] = None
    embedding_url: str = (
        "https://router.huggingface.co/hf-inference/models/"
        "sentence-transformers/all-MiniLM-L6-v2/pipeline/feature-extraction"
    )
    embedding_timeout: float = 30.0
    embedding_failure_policy: str = "propagate"  # "propagate" or "degrade"

    # Completion provider (Groq, OpenAI-compatible)
    groq_api_key: Optional[SecretStr] = None
    llm_base_url: str = "https://api.groq.com/openai/v1/chat/completions"
    llm_model: str = "llama-3.1-8b-instant"
    llm_temperature: float = 0.4
    llm_max_tokens: int = 1024
    llm_timeout: float = 60.0

    # Retrieval tuning
    similarity_threshold: float = 0.3
    search_top_k: int = 5
    max_sources: int = 3

    # Chat sessions (caller-side question cap)
    max_questions_per_session: int = 5
    max_sessions: int = 1000

    validate_on_startup: bool = True
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore"
    )

settings = Settings()
