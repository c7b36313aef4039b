from __future__ import annotations

import pytest

from camp_checkin.attendees.search import AttendeeSearchService
from camp_checkin.core.enums import SearchKind
from camp_checkin.core.exceptions import AttendeeNotFoundError, AuthorizationError, ValidationError
from conftest import ANA_ID, LUIS_ID, InMemoryAttendees, make_attendee


def test_digits_route_to_attendance_number(attendees_repo, viewer):
    attendees_repo.update(LUIS_ID, {"attendance_number": 12})
    svc = AttendeeSearchService(attendees_repo)

    result = svc.search(viewer, "12")

    assert result.kind is SearchKind.SINGLE
    assert result.matches[0].attendee_id == LUIS_ID


def test_unknown_number_is_not_found(attendees_repo, viewer):
    result = AttendeeSearchService(attendees_repo).search(viewer, "999")

    assert result.kind is SearchKind.NOT_FOUND
    assert result.to_dict()["count"] == 0


def test_name_substring_is_case_insensitive(attendees_repo, viewer):
    result = AttendeeSearchService(attendees_repo).search(viewer, "garc")

    assert result.kind is SearchKind.SINGLE
    assert result.matches[0].attendee_id == ANA_ID


def test_several_matches_need_disambiguation(attendees_repo, viewer):
    # "G" hits García and Gómez by last name
    result = AttendeeSearchService(attendees_repo).search(viewer, "g")

    assert result.kind is SearchKind.MULTIPLE
    assert {a.attendee_id for a in result.matches} >= {ANA_ID, LUIS_ID}


def test_blank_query_rejected(attendees_repo, viewer):
    with pytest.raises(ValidationError):
        AttendeeSearchService(attendees_repo).search(viewer, "   ")


def test_search_requires_session(attendees_repo):
    with pytest.raises(AuthorizationError):
        AttendeeSearchService(attendees_repo).search(None, "ana")


def test_get_by_id(attendees_repo, viewer):
    svc = AttendeeSearchService(attendees_repo)

    assert svc.get(viewer, ANA_ID).first_name == "Ana"
    with pytest.raises(AttendeeNotFoundError):
        svc.get(viewer, "missing")


@pytest.mark.parametrize("query", ["ana42", "12a"])
def test_mixed_alphanumeric_goes_to_name_search(attendees_repo, viewer, query):
    attendees_repo.update(ANA_ID, {"attendance_number": 12})
    attendees_repo.update(LUIS_ID, {"attendance_number": 42})

    result = AttendeeSearchService(attendees_repo).search(viewer, query)

    # no first or last name contains these strings, and numbers are never consulted
    assert result.kind is SearchKind.NOT_FOUND


def test_mixed_alphanumeric_matches_names(viewer):
    repo = InMemoryAttendees([make_attendee("r2", "R2D2", "Droide", attendance_number=2)])

    result = AttendeeSearchService(repo).search(viewer, "r2d")

    assert result.kind is SearchKind.SINGLE
    assert result.matches[0].attendee_id == "r2"
