import pytest
from pydantic import ValidationError

from geant_assistant.api.models import ChatMessage, ChatRequest, ChatResponse
from geant_assistant.retrieval.models import SourceRef


def test_chat_request_session_is_optional():
    """Verify a bare message is a valid request."""
    req = ChatRequest(message="What is eduroam?")
    assert req.session_id is None


def test_chat_request_rejects_non_string_message():
    """Verify numbers are not coerced into questions."""
    with pytest.raises(ValidationError):
        ChatRequest(message=42)


def test_chat_message_role_is_restricted():
    """Verify only user and assistant turns are stored."""
    with pytest.raises(ValidationError):
        ChatMessage(role="system", content="hello")


def test_chat_response_omits_absent_source_fields():
    resp = ChatResponse(answer="a", sources=[SourceRef(title="Doc")])
    assert resp.model_dump(exclude_none=True) == {
        "answer": "a",
        "sources": [{"title": "Doc"}],
    }
