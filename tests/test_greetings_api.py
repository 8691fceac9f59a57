import pytest
from fastapi.testclient import TestClient

from greeting_card_api.app.core.errors import GreetingStoreError
from greeting_card_api.app.main import create_app
from greeting_card_api.app.services.greeting_store import GreetingStore


def _create(client, **body):
    payload = {"sender": "Alex", "receiver": "Sam", "message": "Happy Valentine's Day!"}
    payload.update(body)
    return client.post("/api/create", json=payload)


def test_create_then_get_round_trip(client):
    created = _create(client, message="  See you tonight  ")
    assert created.status_code == 201
    body = created.json()
    assert body["success"] is True
    assert body["url"] == f"http://testserver/?id={body['id']}"

    fetched = client.get("/api/get", params={"id": body["id"]})
    assert fetched.status_code == 200
    greeting = fetched.json()
    assert greeting["sender"] == "Alex"
    assert greeting["receiver"] == "Sam"
    assert greeting["message"] == "See you tonight"
    assert greeting["day_index"] == 0
    assert greeting["created_at"]


def test_round_trip_keeps_optional_fields(client):
    created = _create(
        client,
        day_index=7,
        subtitle="Forever",
        quote="You are my today",
        memories="Our first coffee\n\n  The rainy walk home \n",
    )
    assert created.status_code == 201

    greeting = client.get("/api/get", params={"id": created.json()["id"]}).json()
    assert greeting["day_index"] == 7
    assert greeting["subtitle"] == "Forever"
    assert greeting["quote"] == "You are my today"
    assert greeting["memories"] == ["Our first coffee", "The rainy walk home"]


def test_names_are_trimmed(client):
    created = _create(client, sender="  Alex  ", receiver="\tSam\n")
    greeting = client.get("/api/get", params={"id": created.json()["id"]}).json()
    assert greeting["sender"] == "Alex"
    assert greeting["receiver"] == "Sam"


@pytest.mark.parametrize(
    "body",
    [
        {"receiver": "Sam"},
        {"sender": "Alex"},
        {"sender": "", "receiver": "Sam"},
        {"sender": "Alex", "receiver": "   "},
        {},
    ],
)
def test_create_requires_sender_and_receiver(client, body):
    response = client.post("/api/create", json=body)
    assert response.status_code == 400
    assert response.json()["error"] == "missing_fields"
    assert response.json()["message"]


def test_message_length_boundary(client):
    assert _create(client, message="a" * 500).status_code == 201

    response = _create(client, message="a" * 501)
    assert response.status_code == 400
    assert response.json() == {
        "error": "validation_error",
        "message": "Message must be 500 characters or less",
    }


@pytest.mark.parametrize("field", ["sender", "receiver"])
def test_name_length_limit(client, field):
    assert _create(client, **{field: "n" * 100}).status_code == 201
    response = _create(client, **{field: "n" * 101})
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


@pytest.mark.parametrize("day_index", [-1, 8])
def test_day_index_out_of_range(client, day_index):
    response = _create(client, day_index=day_index)
    assert response.status_code == 400
    assert "Day index" in response.json()["message"]


def test_day_index_accepts_numeric_string(client):
    created = _create(client, day_index="3")
    assert created.status_code == 201
    greeting = client.get("/api/get", params={"id": created.json()["id"]}).json()
    assert greeting["day_index"] == 3


def test_too_many_memory_lines(client):
    response = _create(client, memories=[f"line {i}" for i in range(21)])
    assert response.status_code == 400


def test_malformed_body_is_a_validation_error(client):
    response = client.post(
        "/api/create",
        content="not json",
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_non_string_sender_is_rejected(client):
    response = _create(client, sender=123)
    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"


def test_get_unknown_id_is_404(client):
    response = client.get("/api/get", params={"id": "doesNotExist"})
    assert response.status_code == 404
    assert response.json() == {"error": "not_found", "message": "Greeting not found"}


def test_get_without_id_is_400(client):
    response = client.get("/api/get")
    assert response.status_code == 400
    assert response.json()["error"] == "missing_id"


@pytest.mark.parametrize("bad_id", ["ab cd", "ab/cd", "ab.cd", "<script>", "abc\n", "x" * 65])
def test_get_with_malformed_id_is_400(client, bad_id):
    response = client.get("/api/get", params={"id": bad_id})
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_id"


def test_get_sets_cache_headers(client):
    greeting_id = _create(client).json()["id"]
    response = client.get("/api/get", params={"id": greeting_id})
    assert response.headers["cache-control"] == "s-maxage=3600, stale-while-revalidate"


def test_sequential_creates_get_distinct_ids(client):
    first = _create(client).json()["id"]
    second = _create(client).json()["id"]
    assert first != second
    assert len(first) == 8


def test_share_url_honours_proxy_headers(client):
    response = client.post(
        "/api/create",
        json={"sender": "Alex", "receiver": "Sam"},
        headers={"X-Forwarded-Proto": "https", "X-Forwarded-Host": "cards.example.com"},
    )
    body = response.json()
    assert body["url"] == f"https://cards.example.com/?id={body['id']}"


def test_share_url_uses_public_base_url(settings, memory_store):
    settings.public_base_url = "https://love.example.org/"
    client = TestClient(create_app(settings=settings, store=memory_store))
    body = _create(client).json()
    assert body["url"] == f"https://love.example.org/?id={body['id']}"


def test_wrong_method_is_405(client):
    response = client.get("/api/create")
    assert response.status_code == 405
    assert response.json()["error"] == "method_not_allowed"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class BrokenStore(GreetingStore):
    async def insert(self, greeting_id, greeting):
        raise GreetingStoreError("disk on fire")

    async def get(self, greeting_id):
        raise GreetingStoreError("disk on fire")


@pytest.fixture
def broken_client(settings):
    return TestClient(create_app(settings=settings, store=BrokenStore()))


def test_store_failure_on_create_is_500_with_generic_message(broken_client):
    response = _create(broken_client)
    assert response.status_code == 500
    assert response.json() == {
        "error": "store_error",
        "message": "Failed to access greeting storage",
    }
    assert "disk on fire" not in response.text


def test_store_failure_on_get_is_500(broken_client):
    response = broken_client.get("/api/get", params={"id": "abc123"})
    assert response.status_code == 500
    assert response.json()["error"] == "store_error"


def test_validation_happens_before_the_store(broken_client):
    # A broken store must not turn client mistakes into server errors.
    assert broken_client.post("/api/create", json={}).status_code == 400
    assert broken_client.get("/api/get", params={"id": "a b"}).status_code == 400
