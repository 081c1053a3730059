"""Tests for case visibility scoping and adopter redaction."""

import pytest

from adoption_api.core.case_access import (
    DETAIL_SCOPES,
    LIST_SCOPES,
    check_case_access,
    filter_visible,
    has_unrestricted_read,
    to_case_read,
)
from adoption_api.db.enums import Role
from adoption_api.schemas.auth import ActorContext
from adoption_api.schemas.case import CaseRead, CaseRedactedRead
from adoption_api.services import case_service


def test_scope_tables_cover_every_role():
    assert set(LIST_SCOPES) == set(Role)
    assert set(DETAIL_SCOPES) == set(Role)


def test_unrestricted_read_roles():
    assert {r for r in Role if has_unrestricted_read(r)} == {
        Role.LA_SOCIAL_WORKER,
        Role.VAA_WORKER,
        Role.CAFCASS_OFFICER,
    }


def test_officer_scoped_to_court(case, officer, other_officer):
    assert check_case_access(case, officer)
    assert not check_case_access(case, other_officer)


def test_officer_without_court_sees_nothing(db, case):
    courtless = ActorContext(user_id="officer-3", role=Role.HMCTS_CASE_OFFICER)
    assert not check_case_access(case, courtless)
    assert case_service.list_cases(db, courtless).total == 0


def test_judge_and_adopter_need_matching_assignment(case, judge, adopter):
    assert check_case_access(case, judge)
    assert check_case_access(case, adopter)

    # Right user, wrong assignment type
    judge_as_adopter = ActorContext(user_id=judge.user_id, role=Role.ADOPTER)
    adopter_as_judge = ActorContext(user_id=adopter.user_id, role=Role.JUDGE_LEGAL_ADVISER)
    assert not check_case_access(case, judge_as_adopter)
    assert not check_case_access(case, adopter_as_judge)


@pytest.mark.parametrize("role", [Role.LA_SOCIAL_WORKER, Role.VAA_WORKER, Role.CAFCASS_OFFICER])
def test_agency_roles_see_all_cases(case, role):
    assert check_case_access(case, ActorContext(user_id="anyone", role=role))


def test_deleted_case_not_accessible(db, case, officer, social_worker):
    assert case_service.delete_case(db, case.id, officer).ok
    db.refresh(case)
    assert not check_case_access(case, officer)
    assert not check_case_access(case, social_worker)


def test_list_scope_matches_detail_scope(db, new_case, case, officer, other_officer, judge, adopter, social_worker):
    leeds_case = new_case(other_officer, court=other_officer.court_assignment)

    def listed(actor):
        return {item.id for item in case_service.list_cases(db, actor).items}

    assert listed(officer) == {case.id}
    assert listed(other_officer) == {leeds_case.id}
    assert listed(judge) == {case.id}
    assert listed(adopter) == {case.id}
    assert listed(social_worker) == {case.id, leeds_case.id}

    stranger = ActorContext(user_id="adopter-9", role=Role.ADOPTER)
    assert listed(stranger) == set()

    for actor in (officer, other_officer, judge, adopter, social_worker, stranger):
        visible = {c.id for c in filter_visible([case, leeds_case], actor)}
        assert visible == listed(actor)


def test_adopter_view_is_redacted(case, adopter):
    view = to_case_read(case, adopter)
    assert isinstance(view, CaseRedactedRead)
    dumped = view.model_dump()
    assert dumped["redacted"] is True
    for field in ("internal_notes", "staff_comments", "external_reference"):
        assert field not in dumped
    assert dumped["applicant_ids"] == ["adopter-1"]
    assert dumped["assigned_judge"] == "judge-1"


@pytest.mark.parametrize("actor_name", ["officer", "judge", "social_worker", "cafcass", "vaa_worker"])
def test_professional_view_is_full(request, case, actor_name):
    actor = request.getfixturevalue(actor_name)
    view = to_case_read(case, actor)
    assert isinstance(view, CaseRead)
    assert view.redacted is False
    assert view.internal_notes == "Placement history reviewed"
    assert view.staff_comments == "Chase LA report"
    assert view.external_reference == "LA-2026-0042"


def test_redaction_leaves_record_untouched(case, adopter):
    to_case_read(case, adopter)
    assert case.internal_notes == "Placement history reviewed"
    assert case.staff_comments == "Chase LA report"


def test_view_carries_role_permissions(case, officer, adopter):
    assert to_case_read(case, officer).permissions.can_delete is True
    assert to_case_read(case, adopter).permissions.can_update_status is False
