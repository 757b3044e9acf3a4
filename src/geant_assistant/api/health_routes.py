from fastapi import APIRouter
from ..config import settings

router = APIRouter(tags=["health"])


def _configured(secret) -> bool:
    return secret is not None and bool(secret.get_secret_value())


@router.get("/health")
def health():
    """
    Liveness plus a credential checklist. Only presence is reported, never
    the values.
    """
    return {
        "status": "ok",
        "collection": settings.qdrant_collection,
        "model": settings.llm_model,
        "credentials": {
            "embedding": _configured(settings.hf_api_key),
            "completion": _configured(settings.groq_api_key),
            "vector_index": _configured(settings.qdrant_api_key),
        },
    }
