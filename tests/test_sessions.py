import pytest

from geant_assistant.retrieval.models import SourceRef
from geant_assistant.sessions.store import ChatSession, QuestionLimitReached, SessionStore


def test_session_counts_turns_up_to_cap():
    session = ChatSession("s", max_turns=2)

    session.record_turn("q1", "a1")
    session.record_turn("q2", "a2", [SourceRef(title="Doc")])

    assert session.turn_count == 2
    assert session.remaining == 0
    assert not session.can_ask()
    assert [m.content for m in session.messages] == ["q1", "a1", "q2", "a2"]
    assert session.messages[3].sources == [SourceRef(title="Doc")]

    with pytest.raises(QuestionLimitReached):
        session.record_turn("q3", "a3")


def test_messages_are_copied_on_read():
    session = ChatSession("s", max_turns=5)
    session.record_turn("q", "a")

    session.messages.clear()

    assert len(session.messages) == 2


def test_store_reset_and_clear():
    store = SessionStore(max_turns=1)
    store.record_turn("a", "q", "a")
    store.record_turn("b", "q", "a")

    assert not store.can_ask("a")
    store.reset("a")
    assert store.can_ask("a")
    assert not store.has_session("a")

    store.clear_all()
    assert len(store) == 0


def test_store_evicts_oldest_session():
    store = SessionStore(max_turns=5, max_sessions=2)
    for sid in ("a", "b", "c"):
        store.get_or_create(sid)

    assert len(store) == 2
    assert not store.has_session("a")
    assert store.has_session("c")


def test_reservation_holds_budget_until_recorded_or_released():
    store = SessionStore(max_turns=1)

    store.reserve_turn("s")
    assert not store.can_ask("s")
    with pytest.raises(QuestionLimitReached):
        store.reserve_turn("s")

    store.release_turn("s")
    assert store.can_ask("s")

    store.reserve_turn("s")
    status = store.record_turn("s", "q", "a")
    assert status.turn_count == 1
    assert status.remaining == 0
