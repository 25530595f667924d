import asyncio
import threading

from scheduling import auth

EMAIL = "user@example.com"
PASSWORD = "super-secret-password"

APPOINTMENT_FIELDS = """
    id title description startTime endTime status
    clientName clientEmail location notes createdAt updatedAt
"""

REGISTER = """
mutation Register($email: String!, $password: String!, $name: String) {
  register(email: $email, password: $password, name: $name) {
    token
    user { id email name role createdAt }
  }
}
"""

LOGIN = """
mutation Login($email: String!, $password: String!) {
  login(email: $email, password: $password) { token user { id email } }
}
"""

ME = "query { me { id email name } }"

CREATE = f"""
mutation Create($input: CreateAppointmentInput!) {{
  createAppointment(input: $input) {{ {APPOINTMENT_FIELDS} }}
}}
"""

UPDATE = f"""
mutation Update($id: ID!, $input: UpdateAppointmentInput!) {{
  updateAppointment(id: $id, input: $input) {{ {APPOINTMENT_FIELDS} }}
}}
"""

GET = f"""
query Get($id: ID!) {{
  appointment(id: $id) {{ {APPOINTMENT_FIELDS} }}
}}
"""

LIST = "query { appointments { id title startTime } }"

DELETE = "mutation Delete($id: ID!) { deleteAppointment(id: $id) }"


def execute(client, query, variables=None, token=None):
    headers = {"Authorization": f"Bearer {token}"} if token else {}
    response = client.post("/graphql", json={"query": query, "variables": variables or {}}, headers=headers)
    assert response.status_code == 200
    return response.json()


def create(client, **overrides):
    values = {
        "title": "Initial consultation",
        "startTime": "2024-01-01T10:00:00Z",
        "endTime": "2024-01-01T11:00:00Z",
        "clientName": "Jane Doe",
        "clientEmail": "Jane@Example.com",
    }
    values.update(overrides)
    return execute(client, CREATE, {"input": values})


def error_code(result):
    return result["errors"][0]["extensions"]["code"]


def test_healthz(client):
    response = client.get("/healthz")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_register_login_and_me(client):
    registered = execute(client, REGISTER, {"email": EMAIL, "password": PASSWORD, "name": "Test User"})
    user = registered["data"]["register"]["user"]
    assert user["email"] == EMAIL
    assert user["name"] == "Test User"
    assert user["role"] == "user"

    login = execute(client, LOGIN, {"email": EMAIL, "password": PASSWORD})
    token = login["data"]["login"]["token"]
    assert login["data"]["login"]["user"]["id"] == user["id"]

    me = execute(client, ME, token=token)
    assert me["data"]["me"] == {"id": user["id"], "email": EMAIL, "name": "Test User"}


def test_me_is_null_without_valid_token(client):
    assert execute(client, ME)["data"]["me"] is None
    assert execute(client, ME, token="garbage")["data"]["me"] is None


def test_register_duplicate_email(client):
    execute(client, REGISTER, {"email": EMAIL, "password": PASSWORD})
    result = execute(client, REGISTER, {"email": EMAIL, "password": PASSWORD})

    assert result["errors"][0]["message"] == "Email already in use"
    assert error_code(result) == "DUPLICATE_EMAIL"


def test_login_with_wrong_password(client):
    execute(client, REGISTER, {"email": EMAIL, "password": PASSWORD})
    result = execute(client, LOGIN, {"email": EMAIL, "password": "wrong-password"})

    assert result["errors"][0]["message"] == "Invalid credentials"
    assert error_code(result) == "INVALID_CREDENTIALS"
    assert "$2" not in str(result)


def test_create_appointment_returns_wire_shape(client):
    result = create(client, location="Room 4")
    appointment = result["data"]["createAppointment"]

    assert appointment["title"] == "Initial consultation"
    assert appointment["clientEmail"] == "jane@example.com"
    assert appointment["status"] == "scheduled"
    assert appointment["startTime"] == "2024-01-01T10:00:00.000000Z"
    assert appointment["endTime"] == "2024-01-01T11:00:00.000000Z"
    assert appointment["location"] == "Room 4"
    assert appointment["description"] == ""
    assert appointment["notes"] == ""
    assert appointment["createdAt"] and appointment["updatedAt"]

    fetched = execute(client, GET, {"id": appointment["id"]})
    assert fetched["data"]["appointment"] == appointment


def test_create_appointment_errors(client):
    bad_date = create(client, startTime="whenever")
    assert bad_date["errors"][0]["message"] == "Invalid date format"
    assert error_code(bad_date) == "INVALID_DATE"

    bad_range = create(client, endTime="2024-01-01T09:00:00Z")
    assert bad_range["errors"][0]["message"] == "End time must be after start time"
    assert error_code(bad_range) == "INVALID_RANGE"

    blank_title = create(client, title=" ")
    assert blank_title["errors"][0]["message"].startswith("Validation error:")
    assert error_code(blank_title) == "VALIDATION_ERROR"

    assert execute(client, LIST)["data"]["appointments"] == []


def test_appointments_are_listed_by_start_time(client):
    create(client, title="B", startTime="2024-01-01T10:00:00Z", endTime="2024-01-01T10:30:00Z")
    create(client, title="A", startTime="2024-01-01T09:00:00Z", endTime="2024-01-01T09:30:00Z")

    titles = [item["title"] for item in execute(client, LIST)["data"]["appointments"]]
    assert titles == ["A", "B"]


def test_update_appointment_partial(client):
    appointment_id = create(client)["data"]["createAppointment"]["id"]

    rejected = execute(client, UPDATE, {"id": appointment_id, "input": {"endTime": "2024-01-01T09:30:00Z"}})
    assert error_code(rejected) == "INVALID_RANGE"

    result = execute(
        client,
        UPDATE,
        {"id": appointment_id, "input": {"endTime": "2024-01-01T12:00:00Z", "status": "completed"}},
    )
    updated = result["data"]["updateAppointment"]
    assert updated["startTime"] == "2024-01-01T10:00:00.000000Z"
    assert updated["endTime"] == "2024-01-01T12:00:00.000000Z"
    assert updated["status"] == "completed"
    assert updated["title"] == "Initial consultation"


def test_unknown_appointment_id(client):
    fetched = execute(client, GET, {"id": "missing"})
    assert fetched["data"]["appointment"] is None
    assert fetched["errors"][0]["message"] == "Appointment not found"
    assert error_code(fetched) == "NOT_FOUND"

    updated = execute(client, UPDATE, {"id": "missing", "input": {"title": "x"}})
    assert error_code(updated) == "NOT_FOUND"

    deleted = execute(client, DELETE, {"id": "missing"})
    assert error_code(deleted) == "NOT_FOUND"


def test_delete_appointment(client):
    appointment_id = create(client)["data"]["createAppointment"]["id"]

    assert execute(client, DELETE, {"id": appointment_id})["data"]["deleteAppointment"] is True
    assert error_code(execute(client, GET, {"id": appointment_id})) == "NOT_FOUND"


def test_service_calls_run_off_the_event_loop(client, monkeypatch):
    seen = {}
    real_hash = auth.get_password_hash

    def recording_hash(password):
        try:
            asyncio.get_running_loop()
            seen["loop"] = True
        except RuntimeError:
            seen["loop"] = False
        seen["thread"] = threading.current_thread().name
        return real_hash(password)

    monkeypatch.setattr(auth, "get_password_hash", recording_hash)

    result = execute(client, REGISTER, {"email": EMAIL, "password": PASSWORD})

    assert "errors" not in result
    assert seen["loop"] is False
