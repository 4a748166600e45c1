import pytest
import requests

from botpanel.core.exceptions import (
    AuthenticationError,
    DecodeError,
    NotFoundError,
    ServerError,
    ServerUnreachableError,
)
from botpanel.services.api_client import APIClient, normalize_base_url


@pytest.mark.parametrize("raw, expected", [
    ("http://127.0.0.1:5000", "http://127.0.0.1:5000"),
    ("http://127.0.0.1:5000/", "http://127.0.0.1:5000"),
    ("  192.168.0.10:5000 ", "http://192.168.0.10:5000"),
    ("https://bots.example.org/api/", "https://bots.example.org/api"),
])
def test_normalize_base_url(raw, expected):
    assert normalize_base_url(raw) == expected


def test_normalize_base_url_rejects_empty():
    with pytest.raises(ValueError):
        normalize_base_url("  ")


@pytest.mark.parametrize("raw", [
    "http://",
    "https://",
    "not an ip",
    "http://bad host:5000",
    "ftp://files.example.org",
    "http://:5000",
    "http://127.0.0.1:port",
])
def test_normalize_base_url_rejects_malformed_addresses(raw):
    with pytest.raises(ValueError, match="Invalid server address"):
        normalize_base_url(raw)


def test_from_bot_uses_bot_config(bot):
    client = APIClient.from_bot(bot, session=object())
    assert client.base_url == "http://127.0.0.1:5000"
    assert client.api_key == "025002"


def test_requests_carry_api_key_and_timeout(client, session):
    session.add("GET", "/status", {"running": True})
    client.get_status()
    assert session.last["headers"] == {"X-API-Key": "025002"}
    assert session.last["timeout"] == 3


def test_get_status(client, session):
    session.add("GET", "/status", {
        "running": True, "developer_mode": True, "bot_name": "Tutor", "uptime": 12})
    status = client.get_status()
    assert status.running is True
    assert status.developer_mode is True
    assert status.bot_name == "Tutor"


def test_ping(client, session):
    session.add("GET", "/status", {"running": False})
    assert client.ping() is True
    session.fail("GET", "/status", requests.exceptions.ConnectionError("refused"))
    assert client.ping() is False


def test_ping_propagates_auth_failure(client, session):
    session.add("GET", "/status", {"detail": "bad key"}, status_code=401)
    with pytest.raises(AuthenticationError):
        client.ping()


def test_start_and_stop_bot(client, session):
    session.add("POST", "/bot/start", {"success": True, "message": "started"})
    session.add("POST", "/bot/stop", {"success": True})
    result = client.start_bot("tok", developer_mode=True)
    assert result.success and result.message == "started"
    assert session.last["json"] == {"token": "tok", "developer_mode": True}
    assert client.stop_bot().success is True


def test_set_bot_name(client, session):
    session.add("POST", "/bot/name", {"success": True})
    client.set_bot_name("Tutor Bot")
    assert session.last["json"] == {"name": "Tutor Bot"}


def test_fetch_members_accepts_wrapped_and_bare_lists(client, session):
    session.add("GET", "/members", {"members": [
        {"id": 1234567890, "name": "anna", "display_name": "Anna", "roles": ["Group A"]},
        {"id": "42", "name": "ben"},
    ]})
    members = client.fetch_members()
    assert [m.id for m in members] == ["1234567890", "42"]
    assert members[0].label == "Anna"
    assert members[1].label == "ben"
    assert members[1].roles == []

    session.add("GET", "/members", [{"id": "7", "name": "carl"}])
    assert client.fetch_members(role="Group A")[0].name == "carl"
    assert session.last["params"] == {"role": "Group A"}


def test_fetch_roles_and_channels(client, session):
    session.add("GET", "/roles", {"roles": [{"id": "1", "name": "Tutor", "color": 3447003}]})
    session.add("GET", "/channels", [
        {"id": "10", "name": "general", "type": "text", "category": "Course"},
        {"id": "11", "name": "Lounge", "type": "voice"},
    ])
    assert client.fetch_roles()[0].color == 3447003
    channels = client.fetch_channels()
    assert [c.type for c in channels] == ["text", "voice"]
    assert channels[1].category is None


def test_list_with_wrong_shape_is_decode_error(client, session):
    session.add("GET", "/roles", {"items": []})
    with pytest.raises(DecodeError):
        client.fetch_roles()


def test_missing_field_is_decode_error(client, session):
    session.add("GET", "/channels", [{"id": "10"}])
    with pytest.raises(DecodeError):
        client.fetch_channels()


def test_non_json_body_is_decode_error(client, session):
    session.add("GET", "/status", None, text="<html>oops</html>")
    with pytest.raises(DecodeError):
        client.get_status()


def test_assign_and_remove_role(client, session):
    session.add("POST", "/roles/assign", {"role": "Tutor", "assigned": ["1"], "failed": ["2"]})
    session.add("POST", "/roles/remove", {"role": "Tutor", "assigned": ["1", "2"]})
    assignment = client.assign_role("Tutor", ["1", "2"])
    assert assignment.assigned == ["1"] and assignment.failed == ["2"]
    assert session.last["json"] == {"role": "Tutor", "members": ["1", "2"]}
    assert client.remove_role("Tutor", ["1", "2"]).failed == []


def test_role_change_requires_members(client, session):
    with pytest.raises(ValueError):
        client.assign_role("Tutor", [])
    with pytest.raises(ValueError):
        client.remove_role("", ["1"])
    assert session.calls == []


def test_clear_messages(client, session):
    session.add("POST", "/messages/clear", {"channel_id": 10, "deleted": 25})
    result = client.clear_messages("10", limit=25)
    assert result.deleted == 25
    assert result.channel_id == "10"
    assert session.last["json"] == {"channel_id": "10", "limit": 25}

    client.clear_messages("10")
    assert session.last["json"]["limit"] is None


@pytest.mark.parametrize("limit", [0, -5])
def test_clear_messages_rejects_non_positive_limit(client, session, limit):
    with pytest.raises(ValueError):
        client.clear_messages("10", limit=limit)
    assert session.calls == []


def test_send_message(client, session):
    session.add("POST", "/messages/send", {"success": True})
    assert client.send_message("10", "Hello").success
    with pytest.raises(ValueError):
        client.send_message("10", "  ")


def test_validate_group(client, session):
    session.add("GET", "/groups/validate", {"name": "Group A", "valid": True})
    assert client.validate_group("Group A").valid is True
    assert session.last["params"] == {"name": "Group A"}


def test_attendance_round(client, session):
    session.add("POST", "/attendance/start", {"success": True})
    session.add("POST", "/attendance/stop", {
        "filename": "group-a_2025-04-15.json",
        "group": "Group A",
        "created_at": "2025-04-15T10:00:00",
        "entries": [
            {"member": "anna", "present": True, "timestamp": "2025-04-15T10:02:00"},
            {"member": "ben", "present": False},
        ],
    })
    assert client.start_attendance("Group A", "10").success
    assert session.last["json"] == {"group": "Group A", "channel_id": "10"}

    attendance_file = client.stop_attendance("Group A")
    assert attendance_file.created_at.year == 2025
    assert attendance_file.present_count == 1
    assert attendance_file.entries[1].timestamp is None


def test_attendance_files(client, session):
    session.add("GET", "/attendance/files", {"files": [{"filename": "a.json", "group": "A"}]})
    session.add("GET", "/attendance/files/week%201.json", {"filename": "week 1.json"})
    session.add("DELETE", "/attendance/files/a.json", {"success": True})

    assert client.fetch_attendance_files()[0].entries == []
    assert client.fetch_attendance_file("week 1.json").filename == "week 1.json"
    assert client.delete_attendance_file("a.json").success


def test_file_names_are_quoted(client, session):
    session.add("GET", "/surveys/files/..%2Fsecret", {"filename": "x"})
    client.fetch_survey_file("../secret")
    assert session.last["path"] == "/surveys/files/..%2Fsecret"
    with pytest.raises(ValueError):
        client.fetch_survey_file(" ")


def test_create_survey_cleans_options(client, session):
    session.add("POST", "/surveys", {"success": True, "message": "posted"})
    result = client.create_survey(" Lunch? ", ["Pizza", " pizza", "Pizza ", "", "Salad"], "10", 30)
    assert result.message == "posted"
    assert session.last["json"] == {
        "title": "Lunch?",
        "options": ["Pizza", "pizza", "Salad"],
        "channel_id": "10",
        "duration": 30,
    }


@pytest.mark.parametrize("title, options, duration", [
    ("", ["a", "b"], None),
    ("Q", ["a"], None),
    ("Q", ["a", " a ", ""], None),
    ("Q", ["a", "b"], 0),
])
def test_create_survey_validation(client, session, title, options, duration):
    with pytest.raises(ValueError):
        client.create_survey(title, options, "10", duration)
    assert session.calls == []


def test_survey_files(client, session):
    session.add("GET", "/surveys/files", [{"filename": "s1.json", "title": "Lunch?"}])
    session.add("GET", "/surveys/files/s1.json", {
        "filename": "s1.json",
        "title": "Lunch?",
        "results": [{"option": "Pizza", "votes": 3}, {"option": "Salad", "votes": 1}],
    })
    session.add("DELETE", "/surveys/files/s1.json", {"success": True})

    assert client.fetch_survey_files()[0].title == "Lunch?"
    assert client.fetch_survey_file("s1.json").total_votes == 4
    assert client.delete_survey_file("s1.json").success


@pytest.mark.parametrize("status_code, error", [
    (401, AuthenticationError),
    (403, AuthenticationError),
    (404, NotFoundError),
    (500, ServerError),
    (409, ServerError),
])
def test_status_codes_map_to_errors(client, session, status_code, error):
    session.add("POST", "/bot/stop", {"detail": "nope"}, status_code=status_code)
    with pytest.raises(error) as excinfo:
        client.stop_bot()
    assert excinfo.value.status_code == status_code


def test_server_error_carries_detail(client, session):
    session.add("POST", "/bot/start", {"error": "Bot already running"}, status_code=409)
    with pytest.raises(ServerError, match="Bot already running"):
        client.start_bot("tok")


def test_server_error_with_plain_text(client, session):
    session.add("POST", "/bot/start", None, status_code=502, text="Bad Gateway")
    with pytest.raises(ServerError, match="Bad Gateway"):
        client.start_bot("tok")


@pytest.mark.parametrize("exc", [
    requests.exceptions.ConnectionError("refused"),
    requests.exceptions.Timeout("slow"),
])
def test_network_failures_are_unreachable(client, session, exc):
    session.fail("GET", "/roles", exc)
    with pytest.raises(ServerUnreachableError) as excinfo:
        client.fetch_roles()
    assert excinfo.value.status_code is None
