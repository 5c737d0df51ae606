from kagi_core.api import service
from kagi_core.domain.conversation import ConversationSession
from kagi_core.domain.exceptions import ConfigurationError
from kagi_core.providers.registry import AssistantConfig
from kagi_core.tools.definitions import ASSISTANT_TOOL, ToolCall, kagi_tool_defs
from kagi_core.tools.executor import ToolExecutor, default_tools


RAW = 'noise thread.json: {"id":"abc"} more noise new_message.json: {"state":"done","reply":"<p>Hi</p>"}'


class FakeTransport:
    name = "fake"

    def __init__(self, raw):
        self.raw = raw
        self.payloads = []

    def send(self, payload):
        self.payloads.append(payload.to_wire())
        return self.raw


def _patch_assistant(monkeypatch, raw=RAW):
    transport = FakeTransport(raw)
    config = AssistantConfig(session_token="t", search_cookie="c", available_models=["a", "b"])
    monkeypatch.setattr(service, "load_assistant_config", lambda: config)
    monkeypatch.setattr(service, "create_assistant_client", lambda cfg: transport)
    return transport


def test_converse_returns_formatted_reply(monkeypatch):
    _patch_assistant(monkeypatch)
    session = ConversationSession()
    assert service.converse("hello", session=session) == "Hi"
    assert session.thread_id == "abc"


def test_converse_errors_become_text(monkeypatch):
    _patch_assistant(monkeypatch, raw="no markers at all")
    assert service.converse("hello", session=ConversationSession()) == "Error: Failed to parse assistant response"
    assert service.converse("hello", model="zzz", session=ConversationSession()) == (
        'Error: Invalid model "zzz". Available models: a, b'
    )


def test_converse_uses_process_session(monkeypatch):
    transport = _patch_assistant(monkeypatch)
    monkeypatch.setattr(service, "_session", None)
    service.converse("one")
    service.converse("two", new_conversation=False)
    assert service.get_default_session().thread_id == "abc"
    assert transport.payloads[1]["focus"]["thread_id"] == "abc"


def test_search_and_summarize_validation_errors():
    assert service.search_fetch([]) == "Error: Search called with no queries."
    assert service.summarize("") == "Error: Summarizer called with no URL."


def test_tool_executor_dispatches(monkeypatch):
    _patch_assistant(monkeypatch)
    monkeypatch.setattr(service, "_session", None)
    executor = ToolExecutor(default_tools())
    res = executor.execute(ToolCall(id="1", name=ASSISTANT_TOOL, arguments={"prompt": "hi", "format": "html"}))
    assert res.content == "<p>Hi</p>"
    assert not res.is_error
    missing = executor.execute(ToolCall(id="2", name="nope"))
    assert missing.is_error
    assert missing.content == "Error: Tool not registered: nope"


def test_tool_defs_schema():
    defs = {d.name: d for d in kagi_tool_defs(["a", "b"], "b")}
    assert set(defs) == {"kagi_search_fetch", "kagi_summarizer", "kagi_assistant"}
    schema = defs["kagi_assistant"].input_schema()
    assert schema["required"] == ["prompt"]
    assert schema["properties"]["model"]["enum"] == ["a", "b"]
    assert schema["properties"]["model"]["default"] == "b"
    assert schema["properties"]["format"]["default"] == "markdown"


def test_tool_defs_default_stays_within_enum():
    defs = {d.name: d for d in kagi_tool_defs(["a", "b"], "zzz")}
    model = defs["kagi_assistant"].input_schema()["properties"]["model"]
    assert model["default"] == "a"


def test_converse_checks_prompt_before_loading_config(monkeypatch):
    def no_config():
        raise ConfigurationError(code="MISSING_SESSION_TOKEN", message="token missing")

    monkeypatch.setattr(service, "load_assistant_config", no_config)
    assert service.converse("", session=ConversationSession()) == "Error: Assistant called with no prompt."
    assert service.converse("   ", session=ConversationSession()) == "Error: Assistant called with no prompt."
    assert service.converse("hi", session=ConversationSession()) == "Error: token missing"
