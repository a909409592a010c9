import pytest
import requests

from visualcodex.config.manager import ConfigSnapshot
from visualcodex.errors import AuthError, NetworkError, ProviderError
from visualcodex.llm import LLMClient, PayloadBuilder, create_llm_client, create_payload_builder


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, text=""):
        self.status_code = status_code
        self._json_data = json_data
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json_data is None:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json_data


class FakeSession:
    def __init__(self, response=None, error=None):
        self.headers = {}
        self.response = response
        self.error = error
        self.posts = []

    def post(self, url, json=None, timeout=None):
        self.posts.append({"url": url, "json": json, "timeout": timeout})
        if self.error:
            raise self.error
        return self.response


def chat_reply(content):
    return {"choices": [{"message": {"role": "assistant", "content": content}}]}


def make_client(session, **kwargs):
    return LLMClient("sk-test", PayloadBuilder(), session=session, **kwargs)


def test_returns_reply_content() -> None:
    session = FakeSession(FakeResponse(json_data=chat_reply("Hello!")))

    assert make_client(session).complete_chat("sys", "user", "gpt-4o") == "Hello!"


def test_sends_two_message_payload_with_bearer_token() -> None:
    session = FakeSession(FakeResponse(json_data=chat_reply("ok")))
    client = make_client(session, endpoint="https://llm.test/v1/chat", timeout=30)

    client.complete_chat("system text", "user text", "gpt-test")

    post = session.posts[0]
    assert post["url"] == "https://llm.test/v1/chat"
    assert post["timeout"] == 30
    assert post["json"] == {
        "model": "gpt-test",
        "messages": [
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ],
        "temperature": 0.9,
        "max_tokens": 4000,
    }
    assert session.headers["Authorization"] == "Bearer sk-test"
    assert session.headers["Content-Type"] == "application/json"


def test_empty_key_is_rejected_up_front() -> None:
    with pytest.raises(AuthError):
        LLMClient("", PayloadBuilder(), session=FakeSession())


@pytest.mark.parametrize(
    "error",
    [requests.ConnectionError("refused"), requests.Timeout("slow")],
)
def test_transport_failures_are_network_errors(error) -> None:
    client = make_client(FakeSession(error=error))

    with pytest.raises(NetworkError):
        client.complete_chat("sys", "user", "gpt-4o")


@pytest.mark.parametrize("status", [401, 403])
def test_rejected_credential_is_auth_error(status) -> None:
    response = FakeResponse(status, {"error": {"message": "Incorrect API key provided"}})
    client = make_client(FakeSession(response))

    with pytest.raises(AuthError, match="Incorrect API key"):
        client.complete_chat("sys", "user", "gpt-4o")


def test_error_body_message_is_reported_verbatim() -> None:
    response = FakeResponse(400, {"error": {"message": "The model `nope` does not exist"}})
    client = make_client(FakeSession(response))

    with pytest.raises(ProviderError) as excinfo:
        client.complete_chat("sys", "user", "nope")

    assert str(excinfo.value) == "The model `nope` does not exist"
    assert excinfo.value.status_code == 400


def test_error_body_without_message() -> None:
    client = make_client(FakeSession(FakeResponse(200, {"error": "bad"})))

    with pytest.raises(ProviderError, match="API error"):
        client.complete_chat("sys", "user", "gpt-4o")


def test_non_json_error_page_is_provider_error() -> None:
    client = make_client(FakeSession(FakeResponse(502, None, "<html>Bad Gateway</html>")))

    with pytest.raises(ProviderError, match="HTTP 502"):
        client.complete_chat("sys", "user", "gpt-4o")


def test_non_json_success_body_is_provider_error() -> None:
    client = make_client(FakeSession(FakeResponse(200, None, "not json")))

    with pytest.raises(ProviderError, match="Failed to parse response"):
        client.complete_chat("sys", "user", "gpt-4o")


@pytest.mark.parametrize(
    "body",
    [{}, {"choices": []}, {"choices": [{"message": {"content": None}}]}],
)
def test_body_without_reply_text_is_provider_error(body) -> None:
    client = make_client(FakeSession(FakeResponse(200, body)))

    with pytest.raises(ProviderError, match="Invalid response from API"):
        client.complete_chat("sys", "user", "gpt-4o")


def test_factory_applies_snapshot_settings() -> None:
    snapshot = ConfigSnapshot(endpoint="https://llm.test/chat", temperature=0.2,
                              max_tokens=128, request_timeout=5)
    session = FakeSession(FakeResponse(json_data=chat_reply("ok")))

    client = create_llm_client(snapshot, "sk-snap", session=session)
    client.complete_chat("s", "u", "m")

    post = session.posts[0]
    assert post["url"] == "https://llm.test/chat"
    assert post["timeout"] == 5
    assert post["json"]["temperature"] == 0.2
    assert post["json"]["max_tokens"] == 128
    assert session.headers["Authorization"] == "Bearer sk-snap"


def test_follow_up_prompt_joins_results_and_keeps_braces() -> None:
    prompt = PayloadBuilder().build_follow_up_prompt(["File content (a.json):\n\n{\"k\": 1}", "second"])

    assert "File content (a.json):\n\n{\"k\": 1}\n\nsecond" in prompt


def test_custom_system_prompt_is_formatted_with_directory() -> None:
    builder = PayloadBuilder("Work inside {current_directory} only.")

    assert builder.build_system_prompt("/srv/repo") == "Work inside /srv/repo only."


def test_payload_builder_factory_carries_sampling_settings() -> None:
    builder = create_payload_builder("Repo: {current_directory}", temperature=0.3, max_tokens=64)

    payload = builder.build_payload("sys", "user", "gpt-4o")

    assert builder.build_system_prompt("/srv/app") == "Repo: /srv/app"
    assert payload["temperature"] == 0.3
    assert payload["max_tokens"] == 64
