import os

# Must be set before geant_assistant.config is imported.
os.environ.setdefault("HF_API_KEY", "hf_test_key")
os.environ.setdefault("GROQ_API_KEY", "gsk_test_key")
os.environ.setdefault("QDRANT_URL", "http://qdrant.test:6333")
os.environ.setdefault("QDRANT_API_KEY", "qdrant_test_key")

import pytest

from geant_assistant.retrieval.models import DocumentPayload, SearchResult


def make_result(record_id, score, title=None, content="", **payload) -> SearchResult:
    return SearchResult(
        id=f"{record_id}-{score}",
        score=score,
        payload=DocumentPayload(
            record_id=record_id,
            title=title,
            content=content,
            **payload,
        ),
    )


@pytest.fixture
def eduroam_results():
    """Three hits above threshold; the first two are chunks of one work."""
    return [
        make_result(
            "A",
            0.81,
            title="eduroam Service Definition",
            content="eduroam is the secure roaming access service.",
            authors="GÉANT Project",
            url="https://zenodo.org/records/1",
            doi="10.5281/zenodo.1",
        ),
        make_result(
            "A",
            0.55,
            title="eduroam Service Definition",
            content="Institutions join through their national roaming operator.",
            authors="GÉANT Project",
            url="https://zenodo.org/records/1",
            doi="10.5281/zenodo.1",
        ),
        make_result(
            "B",
            0.32,
            title="Campus Network Best Practices",
            content="Roaming and federated Wi-Fi deployment guidance.",
        ),
    ]
