import json

import requests

from greeting_card_api.client import GreetingClient


class FakeResponse:
    def __init__(self, status_code, payload=None, text=None):
        self.status_code = status_code
        self._payload = payload
        if payload is not None:
            self.text = json.dumps(payload)
        else:
            self.text = text or ""
        self.content = self.text.encode("utf-8")

    def json(self):
        return json.loads(self.text)


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        if self.exc:
            raise self.exc
        return self.response


def test_create_greeting_posts_only_given_fields():
    session = FakeSession(FakeResponse(201, {"success": True, "id": "abc", "url": "http://x/?id=abc"}))
    client = GreetingClient(base_url="http://x/", session=session)

    data, error = client.create_greeting("Alex", "Sam", "Hi", day_index=2)

    assert error is None
    assert data["id"] == "abc"
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "http://x/api/create"
    assert call["json"] == {"sender": "Alex", "receiver": "Sam", "message": "Hi", "day_index": 2}


def test_create_greeting_reports_validation_error():
    session = FakeSession(
        FakeResponse(400, {"error": "missing_fields", "message": "Both sender and receiver names are required"})
    )
    client = GreetingClient(base_url="http://x", session=session)

    data, error = client.create_greeting("", "Sam")

    assert data is None
    assert error == {
        "status_code": 400,
        "error": "missing_fields",
        "message": "Both sender and receiver names are required",
    }


def test_get_greeting_not_found_means_defaults():
    session = FakeSession(FakeResponse(404, {"error": "not_found", "message": "Greeting not found"}))
    client = GreetingClient(base_url="http://x", session=session)

    assert client.get_greeting("missing") == (None, None)
    assert session.calls[0]["params"] == {"id": "missing"}


def test_get_greeting_server_error_is_reported():
    session = FakeSession(FakeResponse(502, text="Bad Gateway"))
    client = GreetingClient(base_url="http://x", session=session)

    data, error = client.get_greeting("abc")

    assert data is None
    assert error["status_code"] == 502
    assert error["error"] == "http_error"
    assert error["message"] == "Bad Gateway"


def test_network_failure_is_reported():
    session = FakeSession(exc=requests.ConnectionError("refused"))
    client = GreetingClient(base_url="http://x", session=session)

    data, error = client.get_greeting("abc")

    assert data is None
    assert error["status_code"] is None
    assert error["error"] == "network_error"


def test_client_against_running_app(memory_client):
    client = GreetingClient(base_url="http://testserver", session=memory_client)

    created, error = client.create_greeting("Alex", "Sam", "Be mine", memories=["one"])
    assert error is None

    greeting, error = client.get_greeting(created["id"])
    assert error is None
    assert greeting["sender"] == "Alex"
    assert greeting["message"] == "Be mine"
    assert greeting["memories"] == ["one"]

    assert client.get_greeting("nobody") == (None, None)
