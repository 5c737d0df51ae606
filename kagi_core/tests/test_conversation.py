import threading

from kagi_core.domain.conversation import ConversationSession
from kagi_core.domain.models import BRANCH_SENTINEL
from kagi_core.providers.kagi_assistant import build_payload


def test_session_state_machine():
    s = ConversationSession()
    assert s.state == "new" and s.thread_id is None
    s.advance("t1")
    assert s.state == "continued" and s.thread_id == "t1"
    s.advance("t2")
    assert s.thread_id == "t2"
    s.reset()
    assert s.state == "new" and not s.is_continued
    s.reset()
    assert s.thread_id is None


def test_session_exclusive_blocks_other_threads():
    s = ConversationSession()
    seen = []

    def worker():
        with s.exclusive():
            seen.append(s.thread_id)

    with s.exclusive():
        t = threading.Thread(target=worker)
        t.start()
        t.join(timeout=0.2)
        assert t.is_alive()
        s.advance("t1")
    t.join(timeout=2)
    assert seen == ["t1"]


def test_payload_for_new_thread():
    wire = build_payload("hi", "m1", True, None).to_wire()
    assert wire["focus"] == {"thread_id": None, "branch_id": BRANCH_SENTINEL, "prompt": "hi"}
    assert wire["profile"] == {
        "id": None,
        "personalizations": True,
        "internet_access": True,
        "model": "m1",
        "lens_id": None,
    }
    assert wire["threads"] == [{"tag_ids": [], "saved": False, "shared": False}]


def test_payload_for_continuation_has_fresh_message_id():
    first = build_payload("again", "m1", False, "T").to_wire()
    second = build_payload("again", "m1", False, "T").to_wire()
    assert first["focus"]["thread_id"] == "T"
    assert first["focus"]["branch_id"] == "00000000-0000-4000-0000-000000000000"
    assert first["focus"]["message_id"]
    assert first["focus"]["message_id"] != second["focus"]["message_id"]
    assert first["profile"]["internet_access"] is False
