import asyncio
import json

import httpx
import pytest

from geant_assistant.core.errors import DegradedRetrievalError, FailurePolicy
from geant_assistant.retrieval.retriever import Retriever


QDRANT_HITS = {
    "result": [
        {
            "id": 11,
            "score": 0.81,
            "payload": {
                "record_id": "A",
                "title": "eduroam Service Definition",
                "content": "eduroam is the secure roaming access service.",
                "authors": "GÉANT Project",
                "zenodo_url": "https://zenodo.org/records/1",
                "doi": "10.5281/zenodo.1",
                "chunk_index": 0,
            },
        },
        {
            "id": 12,
            "score": 0.32,
            "payload": {
                "record_id": "B",
                "file_name": "campus-best-practices.pdf",
                "content": "Federated Wi-Fi guidance.",
            },
        },
    ],
    "status": "ok",
    "time": 0.002,
}


def make_retriever(handler, **kwargs) -> Retriever:
    return Retriever(
        url="http://qdrant.test:6333/",
        api_key="qd_key",
        collection="geant_documents",
        transport=httpx.MockTransport(handler),
        **kwargs,
    )


def test_search_sends_threshold_limit_and_collection():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json=QDRANT_HITS)

    results = asyncio.run(make_retriever(handler).search([0.1, 0.2]))

    request = calls[0]
    assert request.url.path == "/collections/geant_documents/points/search"
    assert request.headers["api-key"] == "qd_key"
    assert json.loads(request.content) == {
        "vector": [0.1, 0.2],
        "limit": 5,
        "with_payload": True,
        "score_threshold": 0.3,
    }
    assert [r.score for r in results] == [0.81, 0.32]
    assert results[0].payload.url == "https://zenodo.org/records/1"
    assert results[1].payload.display_title == "campus-best-practices.pdf"


def test_top_k_overrides_default_limit():
    calls = []

    def handler(request):
        calls.append(json.loads(request.content))
        return httpx.Response(200, json={"result": []})

    asyncio.run(make_retriever(handler).search([0.1], top_k=2))

    assert calls[0]["limit"] == 2


def test_no_hits_above_threshold_gives_empty_list():
    results = asyncio.run(
        make_retriever(lambda request: httpx.Response(200, json={"result": []})).search([0.1])
    )
    assert results == []


def test_network_failure_degrades_to_empty_list():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    assert asyncio.run(make_retriever(handler).search([0.1])) == []


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(500, text="internal"),
        httpx.Response(404, json={"status": {"error": "Collection not found"}}),
        httpx.Response(200, text="not json"),
        httpx.Response(200, json={"status": "ok"}),
        httpx.Response(200, json={"result": [{"id": 1}]}),
    ],
)
def test_provider_failures_degrade_to_empty_list(response):
    assert asyncio.run(make_retriever(lambda request: response).search([0.1])) == []


def test_propagate_policy_raises_degraded_retrieval_error():
    retriever = make_retriever(
        lambda request: httpx.Response(500, text="internal"),
        failure_policy=FailurePolicy.PROPAGATE,
    )

    with pytest.raises(DegradedRetrievalError):
        asyncio.run(retriever.search([0.1]))


def test_malformed_hit_is_skipped_without_dropping_good_hits():
    body = {
        "result": [
            {"id": 1, "score": 0.74, "payload": {"record_id": "A", "content": "eduroam text"}},
            {"id": 2, "score": 0.61},
            {"id": 3, "score": 0.42, "payload": {"record_id": "C", "content": "more text"}},
        ]
    }

    results = asyncio.run(
        make_retriever(lambda request: httpx.Response(200, json=body)).search([0.1])
    )

    assert [r.payload.record_id for r in results] == ["A", None, "C"]

    body["result"][1] = {"id": 2, "score": "high"}
    results = asyncio.run(
        make_retriever(lambda request: httpx.Response(200, json=body)).search([0.1])
    )

    assert [r.payload.record_id for r in results] == ["A", "C"]


def test_null_content_is_kept_as_empty_evidence():
    body = {
        "result": [
            {"id": 1, "score": 0.74, "payload": {"record_id": "A", "content": "eduroam text"}},
            {"id": 2, "score": 0.52, "payload": {"record_id": "B", "content": None}},
        ]
    }

    results = asyncio.run(
        make_retriever(lambda request: httpx.Response(200, json=body)).search([0.1])
    )

    assert len(results) == 2
    assert results[1].payload.content == ""


def test_creator_objects_are_reduced_to_author_names():
    body = {
        "result": [
            {
                "id": 1,
                "score": 0.66,
                "payload": {
                    "record_id": "A",
                    "title": "eduGAIN Policy Framework",
                    "content": "eduGAIN interconnects identity federations.",
                    "authors": [
                        {"name": "Doe, J.", "affiliation": "GÉANT"},
                        {"affiliation": "SURF"},
                        "Roe, R.",
                    ],
                },
            }
        ]
    }

    results = asyncio.run(
        make_retriever(lambda request: httpx.Response(200, json=body)).search([0.1])
    )

    assert len(results) == 1
    assert results[0].payload.authors == ["Doe, J.", "Roe, R."]
