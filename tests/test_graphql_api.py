import pytest

from conftest import PASSWORD, code_of, error_of
from meeting_scheduler.auth.utils import authenticate
from meeting_scheduler.models.user import Role, User
from meeting_scheduler.services import meeting_service

ME = "query { me { id name email } }"
MY_PROFILE = "query { myProfile { id name email address dob imageUrl imageSizes { thumb } role createdEventIds createdEvents { id title } } }"
COUNT_USERS = "query { countUsers }"

CREATE_MEETING = """
mutation CreateMeeting($input: CreateMeetingInput!) {
  createMeeting(input: $input) {
    id title description startTime endTime meetingUrl
    attendees { id }
    createdBy { id name }
  }
}
"""
UPDATE_MEETING = """
mutation UpdateMeeting($id: ID!, $input: UpdateMeetingInput!) {
  updateMeeting(id: $id, input: $input) { id title startTime endTime }
}
"""
DELETE_MEETING = "mutation DeleteMeeting($id: ID!) { deleteMeeting(id: $id) }"
MEETING = "query Meeting($id: ID!) { meeting(id: $id) { id title } }"
COUNT_MEETINGS = "query { countMeetings }"

CREATE_EVENT = """
mutation CreateEvent($input: EventInput!) {
  createEvent(eventInput: $input) { id title description date price createdBy { id } }
}
"""
UPDATE_EVENT = """
mutation UpdateEvent($id: ID!, $input: EventInput!) {
  updateEvent(id: $id, eventInput: $input) { id title price }
}
"""
DELETE_EVENT = "mutation DeleteEvent($id: ID!) { deleteEvent(id: $id) }"
EVENTS = "query Events($filter: EventFilterInput) { events(filter: $filter) { id title } }"

BOOK_EVENT = "mutation BookEvent($eventId: ID!) { bookEvent(eventId: $eventId) { id event { id } user { id } } }"
CANCEL_BOOKING = "mutation Cancel($bookingId: ID!) { cancelBooking(bookingId: $bookingId) { id title } }"
BOOKINGS = "query { bookings { id } }"

STANDUP = {"title": "Standup", "startTime": "2025-01-06T09:00:00Z", "endTime": "2025-01-06T09:30:00Z", "attendeeIds": []}
GALA = {"title": "Gala", "description": "Annual dinner", "date": "2025-03-01T18:00:00Z", "price": 25.5}


def create_meeting(gql, token, **overrides):
    return gql.execute(CREATE_MEETING, {"input": {**STANDUP, **overrides}}, token=token)


def create_event(gql, token, **overrides):
    result = gql.execute(CREATE_EVENT, {"input": {**GALA, **overrides}}, token=token)
    return result["data"]["createEvent"]


# -------------------------
# Credentials
# -------------------------
def test_register_then_login(gql):
    registered = gql.register("Alice", "alice@example.com")["data"]["register"]
    assert registered["email"] == "alice@example.com"
    assert registered["imageUrl"] is None

    payload = gql.login("alice@example.com")["data"]["login"]
    assert payload["user"]["id"] == registered["id"]
    assert payload["tokenExpiration"] == 7 * 24 * 60 * 60
    assert authenticate(payload["token"]) == registered["id"]

    me = gql.execute(ME, token=payload["token"])["data"]["me"]
    assert me == {"id": registered["id"], "name": "Alice", "email": "alice@example.com"}


def test_register_with_used_email_conflicts(gql):
    _, token = gql.signup("Alice", "alice@example.com")

    result = gql.register("Alice Again", "ALICE@example.com")
    assert code_of(result) == "CONFLICT"
    assert error_of(result)["message"] == "Email already in use"
    assert gql.execute(COUNT_USERS, token=token)["data"]["countUsers"] == 1


def test_register_validation_failure_has_field_details(gql):
    result = gql.register("A", "alice@example.com", password="weak")
    error = error_of(result)

    assert error["extensions"]["code"] == "BAD_USER_INPUT"
    assert error["extensions"]["requestId"]
    fields = {detail["field"] for detail in error["extensions"]["details"]}
    assert fields == {"name", "password"}


@pytest.mark.parametrize("email, password", [("alice@example.com", "Wrong123!"), ("nobody@example.com", PASSWORD)])
def test_login_failures_look_the_same(gql, email, password):
    gql.register("Alice", "alice@example.com")
    result = gql.login(email, password)
    assert code_of(result) == "BAD_USER_INPUT"
    assert error_of(result)["message"] == "Invalid credentials"
    assert "details" not in error_of(result)["extensions"]


@pytest.mark.parametrize("token", [None, "garbage", "Bearer-less"])
def test_protected_operations_require_a_valid_token(gql, token):
    result = gql.execute("query { meetings { id } }", token=token)
    assert code_of(result) == "UNAUTHENTICATED"

    result = create_meeting(gql, token)
    assert code_of(result) == "UNAUTHENTICATED"


# -------------------------
# Meetings
# -------------------------
def test_standup_scenario(gql):
    alice_id, alice = gql.signup("Alice", "alice@example.com")
    meeting = create_meeting(gql, alice)["data"]["createMeeting"]

    assert meeting["title"] == "Standup"
    assert meeting["startTime"] == "2025-01-06T09:00:00.000Z"
    assert meeting["endTime"] == "2025-01-06T09:30:00.000Z"
    assert meeting["description"] == ""
    assert meeting["attendees"] == []
    assert meeting["createdBy"] == {"id": alice_id, "name": "Alice"}
    assert "/meeting?room=" in meeting["meetingUrl"]

    _, bob = gql.signup("Bob", "bob@example.com")
    result = gql.execute(DELETE_MEETING, {"id": meeting["id"]}, token=bob)
    assert code_of(result) == "FORBIDDEN"

    still_there = gql.execute(MEETING, {"id": meeting["id"]}, token=alice)["data"]["meeting"]
    assert still_there == {"id": meeting["id"], "title": "Standup"}


@pytest.mark.parametrize(
    "start, end, message",
    [
        ("2025-01-06T09:30:00Z", "2025-01-06T09:30:00Z", "startTime must be before endTime"),
        ("2025-01-06T10:00:00Z", "2025-01-06T09:00:00Z", "startTime must be before endTime"),
        ("2025-01-06T09:00:00Z", "2025-01-06T09:04:00Z", "Meeting duration must be between 5 minutes and 8 hours"),
        ("2025-01-06T09:00:00Z", "2025-01-06T17:30:00Z", "Meeting duration must be between 5 minutes and 8 hours"),
    ],
)
def test_create_meeting_rejects_bad_windows(gql, start, end, message):
    _, token = gql.signup("Alice", "alice@example.com")
    result = create_meeting(gql, token, startTime=start, endTime=end)

    error = error_of(result)
    assert error["extensions"]["code"] == "BAD_USER_INPUT"
    assert error["extensions"]["details"] == [{"field": "endTime", "message": message}]
    assert gql.execute(COUNT_MEETINGS, token=token)["data"]["countMeetings"] == 0


def test_create_meeting_with_unknown_attendee(gql):
    _, token = gql.signup("Alice", "alice@example.com")
    result = create_meeting(gql, token, attendeeIds=["0b7c1c9e-4f55-4a39-9a57-8f6f1d0c2b11"])
    assert error_of(result)["extensions"]["details"] == [{"field": "attendeeIds.0", "message": "Attendee not found"}]


def test_delete_meeting_twice(gql):
    _, token = gql.signup("Alice", "alice@example.com")
    meeting_id = create_meeting(gql, token)["data"]["createMeeting"]["id"]

    assert gql.execute(DELETE_MEETING, {"id": meeting_id}, token=token)["data"]["deleteMeeting"] is True
    assert gql.execute(DELETE_MEETING, {"id": meeting_id}, token=token)["data"]["deleteMeeting"] is False
    assert gql.execute(MEETING, {"id": meeting_id}, token=token)["data"]["meeting"] is None


def test_update_meeting(gql):
    _, alice = gql.signup("Alice", "alice@example.com")
    _, bob = gql.signup("Bob", "bob@example.com")
    meeting_id = create_meeting(gql, alice)["data"]["createMeeting"]["id"]

    result = gql.execute(UPDATE_MEETING, {"id": meeting_id, "input": {"title": "Mine"}}, token=bob)
    assert code_of(result) == "FORBIDDEN"

    result = gql.execute(UPDATE_MEETING, {"id": meeting_id, "input": {"endTime": "2025-01-06T20:00:00Z"}}, token=alice)
    assert code_of(result) == "BAD_USER_INPUT"

    result = gql.execute(
        UPDATE_MEETING,
        {"id": "0b7c1c9e-4f55-4a39-9a57-8f6f1d0c2b11", "input": {"title": "Ghost"}},
        token=alice,
    )
    assert code_of(result) == "NOT_FOUND"

    updated = gql.execute(
        UPDATE_MEETING, {"id": meeting_id, "input": {"title": "Retro", "endTime": "2025-01-06T10:00:00Z"}}, token=alice
    )["data"]["updateMeeting"]
    assert updated == {
        "id": meeting_id,
        "title": "Retro",
        "startTime": "2025-01-06T09:00:00.000Z",
        "endTime": "2025-01-06T10:00:00.000Z",
    }


def test_meeting_queries(gql):
    alice_id, alice = gql.signup("Alice", "alice@example.com")
    _, bob = gql.signup("Bob", "bob@example.com")
    create_meeting(gql, alice)
    create_meeting(gql, bob, title="Invite", attendeeIds=[alice_id])
    create_meeting(gql, bob, title="Private")

    mine = gql.execute("query { myMeetings { title } }", token=alice)["data"]["myMeetings"]
    assert sorted(m["title"] for m in mine) == ["Invite", "Standup"]

    everything = gql.execute("query { meetings { title } }", token=alice)["data"]["meetings"]
    assert len(everything) == 3

    in_range = gql.execute(
        "query R($r: DateRangeInput!) { meetingsByDateRange(dateRange: $r) { title } }",
        {"r": {"startDate": "2025-01-06T00:00:00Z", "endDate": "2025-01-06T23:59:59Z"}},
        token=alice,
    )["data"]["meetingsByDateRange"]
    assert len(in_range) == 2

    upcoming = gql.execute("query { upcomingMeetings(limit: 5) { id } }", token=alice)["data"]["upcomingMeetings"]
    assert upcoming == []

    conflicts = gql.execute(
        """
        query C($input: ConflictCheckInput!) {
          checkMeetingConflicts(input: $input) { hasConflicts warnings conflicts { conflictType severity meeting { title } } }
        }
        """,
        {"input": {"startTime": "2025-01-06T09:10:00Z", "endTime": "2025-01-06T09:20:00Z", "attendeeIds": []}},
        token=alice,
    )["data"]["checkMeetingConflicts"]
    assert conflicts["hasConflicts"] is True
    assert {c["meeting"]["title"] for c in conflicts["conflicts"]} == {"Standup", "Invite"}
    assert {c["severity"] for c in conflicts["conflicts"]} == {"HIGH"}


# -------------------------
# Events and bookings
# -------------------------
def test_event_back_reference_round_trip(gql):
    _, token = gql.signup("Alice", "alice@example.com")
    event = create_event(gql, token)
    assert event["date"] == "2025-03-01T18:00:00.000Z"
    assert event["price"] == 25.5

    profile = gql.execute(MY_PROFILE, token=token)["data"]["myProfile"]
    assert profile["createdEventIds"] == [event["id"]]
    assert profile["createdEvents"] == [{"id": event["id"], "title": "Gala"}]

    assert gql.execute(DELETE_EVENT, {"id": event["id"]}, token=token)["data"]["deleteEvent"] is True
    profile = gql.execute(MY_PROFILE, token=token)["data"]["myProfile"]
    assert event["id"] not in profile["createdEventIds"]


def test_only_the_creator_may_change_an_event(gql):
    _, alice = gql.signup("Alice", "alice@example.com")
    _, bob = gql.signup("Bob", "bob@example.com")
    event = create_event(gql, alice)

    result = gql.execute(UPDATE_EVENT, {"id": event["id"], "input": {**GALA, "price": 0}}, token=bob)
    assert code_of(result) == "FORBIDDEN"
    result = gql.execute(DELETE_EVENT, {"id": event["id"]}, token=bob)
    assert code_of(result) == "FORBIDDEN"

    updated = gql.execute(UPDATE_EVENT, {"id": event["id"], "input": {**GALA, "price": 0}}, token=alice)
    assert updated["data"]["updateEvent"]["price"] == 0


def test_event_input_validation(gql):
    _, token = gql.signup("Alice", "alice@example.com")
    result = gql.execute(CREATE_EVENT, {"input": {**GALA, "title": "  ", "price": -5}}, token=token)
    fields = {detail["field"] for detail in error_of(result)["extensions"]["details"]}
    assert fields == {"title", "price"}


def test_events_filter(gql):
    alice_id, alice = gql.signup("Alice", "alice@example.com")
    _, bob = gql.signup("Bob", "bob@example.com")
    create_event(gql, alice, title="January", date="2025-01-10T10:00:00Z")
    create_event(gql, bob, title="February", date="2025-02-10T10:00:00Z")

    def titles(filter_):
        result = gql.execute(EVENTS, {"filter": filter_}, token=alice)
        return [event["title"] for event in result["data"]["events"]]

    assert titles(None) == ["January", "February"]
    assert titles({"createdById": alice_id}) == ["January"]
    assert titles({"dateFrom": "2025-02-01T00:00:00Z"}) == ["February"]


def test_book_missing_event(gql):
    _, token = gql.signup("Alice", "alice@example.com")
    result = gql.execute(BOOK_EVENT, {"eventId": "0b7c1c9e-4f55-4a39-9a57-8f6f1d0c2b11"}, token=token)
    assert code_of(result) == "BAD_USER_INPUT"
    assert gql.execute(BOOKINGS, token=token)["data"]["bookings"] == []


def test_booking_lifecycle(gql):
    _, alice = gql.signup("Alice", "alice@example.com")
    bob_id, bob = gql.signup("Bob", "bob@example.com")
    event = create_event(gql, alice)

    booking = gql.execute(BOOK_EVENT, {"eventId": event["id"]}, token=bob)["data"]["bookEvent"]
    assert booking["event"]["id"] == event["id"]
    assert booking["user"]["id"] == bob_id

    again = gql.execute(BOOK_EVENT, {"eventId": event["id"]}, token=bob)
    assert code_of(again) == "CONFLICT"
    assert error_of(again)["message"] == "Event already booked"

    result = gql.execute(CANCEL_BOOKING, {"bookingId": booking["id"]}, token=alice)
    assert code_of(result) == "FORBIDDEN"

    freed = gql.execute(CANCEL_BOOKING, {"bookingId": booking["id"]}, token=bob)["data"]["cancelBooking"]
    assert freed == {"id": event["id"], "title": "Gala"}
    assert gql.execute(BOOKINGS, token=bob)["data"]["bookings"] == []


# -------------------------
# Users
# -------------------------
def test_update_my_profile(gql):
    _, token = gql.signup("Alice", "alice@example.com")
    mutation = """
    mutation U($input: UpdateProfileInput!) {
      updateMyProfile(input: $input) { name address dob imageUrl }
    }
    """
    updated = gql.execute(
        mutation,
        {"input": {"name": "Alice Smith", "address": "1 Main St", "dob": "1990-05-17", "imageUrl": "https://cdn.example.com/a.png"}},
        token=token,
    )["data"]["updateMyProfile"]
    assert updated == {
        "name": "Alice Smith",
        "address": "1 Main St",
        "dob": "1990-05-17T00:00:00.000Z",
        "imageUrl": "https://cdn.example.com/a.png",
    }

    result = gql.execute(mutation, {"input": {"imageUrl": "not a url"}}, token=token)
    assert error_of(result)["extensions"]["details"] == [{"field": "imageUrl", "message": "Please enter a valid URL"}]


def test_user_management_is_admin_only(gql, database):
    admin_id, admin = gql.signup("Root", "root@example.com")
    _, alice = gql.signup("Alice", "alice@example.com")
    create_user = """
    mutation C($input: CreateUserInput!) { createUser(input: $input) { id email role imageSizes { thumb medium } } }
    """
    sizes = '{"thumb": "https://cdn/t.png", "small": "https://cdn/s.png", "medium": "https://cdn/m.png"}'
    variables = {"input": {"name": "Carol", "email": "carol@example.com", "imageUrl": sizes}}

    assert code_of(gql.execute(create_user, variables, token=alice)) == "FORBIDDEN"

    session = database.session()
    session.query(User).filter(User.id == admin_id).update({"role": Role.ADMIN.value})
    session.commit()
    session.close()

    carol = gql.execute(create_user, variables, token=admin)["data"]["createUser"]
    assert carol["role"] == "USER"
    assert carol["imageSizes"] == {"thumb": "https://cdn/t.png", "medium": "https://cdn/m.png"}

    promoted = gql.execute(
        "mutation P($id: ID!) { updateUser(id: $id, input: {role: ADMIN}) { role } }", {"id": carol["id"]}, token=admin
    )
    assert promoted["data"]["updateUser"]["role"] == "ADMIN"

    listed = gql.execute(
        "query { users(where: {search: \"example\"}, orderBy: {field: NAME, direction: DESC}, pagination: {limit: 2}) { name } }",
        token=alice,
    )["data"]["users"]
    assert [user["name"] for user in listed] == ["Root", "Carol"]

    deleted = gql.execute("mutation D($id: ID!) { deleteUser(id: $id) }", {"id": carol["id"]}, token=admin)
    assert deleted["data"]["deleteUser"] is True


def test_token_of_a_deleted_user_is_rejected(gql, database):
    admin_id, admin = gql.signup("Root", "root@example.com")
    bob_id, bob = gql.signup("Bob", "bob@example.com")
    session = database.session()
    session.query(User).filter(User.id == admin_id).update({"role": Role.ADMIN.value})
    session.commit()
    session.close()

    deleted = gql.execute("mutation D($id: ID!) { deleteUser(id: $id) }", {"id": bob_id}, token=admin)
    assert deleted["data"]["deleteUser"] is True

    # still signed and unexpired
    assert authenticate(bob) == bob_id
    assert code_of(gql.execute(CREATE_EVENT, {"input": GALA}, token=bob)) == "UNAUTHENTICATED"
    assert code_of(create_meeting(gql, bob)) == "UNAUTHENTICATED"
    assert code_of(gql.execute(ME, token=bob)) == "UNAUTHENTICATED"


# -------------------------
# Envelope and HTTP pipeline
# -------------------------
def test_internal_failures_are_masked(gql, monkeypatch):
    _, token = gql.signup("Alice", "alice@example.com")

    def explode(db):
        raise RuntimeError("secret connection details")

    monkeypatch.setattr(meeting_service, "list_all_meetings", explode)
    response = gql.post("query { meetings { id } }", token=token)
    error = error_of(response.json())

    assert error["message"] == "An unexpected error occurred"
    assert error["extensions"]["code"] == "INTERNAL_SERVER_ERROR"
    assert error["extensions"]["requestId"] == response.headers["X-Request-ID"]
    assert "secret" not in response.text
    assert "Traceback" not in response.text


def test_request_id_is_propagated(gql):
    response = gql.post(ME, headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"
    assert error_of(response.json())["extensions"]["requestId"] == "trace-123"


def test_malformed_queries_are_bad_input(gql):
    assert code_of(gql.execute("query { nope }")) == "BAD_USER_INPUT"
    assert code_of(gql.execute("query {")) == "BAD_USER_INPUT"


def test_health_check_and_security_headers(client):
    response = client.get("/")
    assert response.json() == {"status": "ok", "service": "meeting-scheduler-server"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Request-ID"]
