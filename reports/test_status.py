from dataclasses import replace
from datetime import datetime, timezone as dt_timezone
from itertools import product

import pytest

from reports.status import (
    ALLOWED_TRANSITIONS,
    ApprovalLevel,
    ReportSnapshot,
    ReportStatus,
    StatusErrorCode,
    StatusTransitionError,
    create_director_approve_patch,
    create_manager_approve_patch,
    create_reject_patch,
    create_submit_patch,
    create_withdraw_patch,
    is_valid_transition,
    validate_director_approve,
    validate_manager_approve,
    validate_reject,
    validate_submit,
    validate_withdraw,
)


OWNER_ID = 1
OTHER_ID = 2
NOW = datetime(2026, 1, 15, 9, 30, tzinfo=dt_timezone.utc)

EXPECTED_EDGES = {
    (ReportStatus.DRAFT, ReportStatus.SUBMITTED),
    (ReportStatus.SUBMITTED, ReportStatus.DRAFT),
    (ReportStatus.SUBMITTED, ReportStatus.MANAGER_APPROVED),
    (ReportStatus.SUBMITTED, ReportStatus.REJECTED),
    (ReportStatus.MANAGER_APPROVED, ReportStatus.APPROVED),
    (ReportStatus.MANAGER_APPROVED, ReportStatus.REJECTED),
    (ReportStatus.REJECTED, ReportStatus.SUBMITTED),
}


def make_report(status=ReportStatus.DRAFT, visits=1, owner_id=OWNER_ID, submitted_at=None):
    return ReportSnapshot(
        id=10,
        owner_id=owner_id,
        status=status,
        submitted_at=submitted_at,
        visit_record_count=visits,
    )


def raised_code(func, *args, **kwargs):
    with pytest.raises(StatusTransitionError) as excinfo:
        func(*args, **kwargs)
    return excinfo.value.code


# ================= transition table =================

@pytest.mark.parametrize("current,target", list(product(ReportStatus.values, repeat=2)))
def test_transition_table_matches_state_machine(current, target):
    assert is_valid_transition(current, target) is ((current, target) in EXPECTED_EDGES)


def test_approved_is_terminal():
    assert ALLOWED_TRANSITIONS[ReportStatus.APPROVED] == frozenset()
    for target in ReportStatus.values:
        assert not is_valid_transition(ReportStatus.APPROVED, target)


def test_unknown_status_has_no_transitions():
    assert not is_valid_transition("archived", ReportStatus.DRAFT)
    assert not is_valid_transition(ReportStatus.DRAFT, "archived")


def test_every_status_has_a_table_entry():
    assert set(ALLOWED_TRANSITIONS) == set(ReportStatus.values)


# ================= submit =================

@pytest.mark.parametrize("status", [ReportStatus.DRAFT, ReportStatus.REJECTED])
def test_submit_allowed_from_draft_and_rejected(status):
    validate_submit(make_report(status=status), OWNER_ID)


def test_submit_by_other_user_is_forbidden():
    assert raised_code(validate_submit, make_report(), OTHER_ID) == StatusErrorCode.FORBIDDEN


@pytest.mark.parametrize(
    "status",
    [ReportStatus.SUBMITTED, ReportStatus.MANAGER_APPROVED, ReportStatus.APPROVED],
)
def test_submit_rejects_other_statuses(status):
    code = raised_code(validate_submit, make_report(status=status), OWNER_ID)
    assert code == StatusErrorCode.INVALID_STATUS


@pytest.mark.parametrize("status", [ReportStatus.DRAFT, ReportStatus.REJECTED])
def test_submit_requires_a_visit(status):
    code = raised_code(validate_submit, make_report(status=status, visits=0), OWNER_ID)
    assert code == StatusErrorCode.NO_VISITS


def test_submit_checks_owner_before_status_and_visits():
    report = make_report(status=ReportStatus.APPROVED, visits=0)
    assert raised_code(validate_submit, report, OTHER_ID) == StatusErrorCode.FORBIDDEN


def test_submit_checks_status_before_visits():
    report = make_report(status=ReportStatus.SUBMITTED, visits=0)
    assert raised_code(validate_submit, report, OWNER_ID) == StatusErrorCode.INVALID_STATUS


# ================= withdraw =================

def test_withdraw_submitted_by_owner():
    validate_withdraw(make_report(status=ReportStatus.SUBMITTED), OWNER_ID)


def test_withdraw_by_other_user_is_forbidden():
    report = make_report(status=ReportStatus.SUBMITTED)
    assert raised_code(validate_withdraw, report, OTHER_ID) == StatusErrorCode.FORBIDDEN


@pytest.mark.parametrize("status", [ReportStatus.MANAGER_APPROVED, ReportStatus.APPROVED])
def test_withdraw_after_approval_reports_already_approved(status):
    code = raised_code(validate_withdraw, make_report(status=status), OWNER_ID)
    assert code == StatusErrorCode.ALREADY_APPROVED


@pytest.mark.parametrize("status", [ReportStatus.DRAFT, ReportStatus.REJECTED])
def test_withdraw_from_unsubmitted_statuses_is_invalid(status):
    code = raised_code(validate_withdraw, make_report(status=status), OWNER_ID)
    assert code == StatusErrorCode.INVALID_STATUS


def test_withdraw_owner_check_precedes_approved_check():
    report = make_report(status=ReportStatus.APPROVED)
    assert raised_code(validate_withdraw, report, OTHER_ID) == StatusErrorCode.FORBIDDEN


# ================= approve / reject =================

def test_manager_approve_only_from_submitted():
    validate_manager_approve(make_report(status=ReportStatus.SUBMITTED), OTHER_ID)
    for status in set(ReportStatus.values) - {ReportStatus.SUBMITTED}:
        code = raised_code(validate_manager_approve, make_report(status=status), OTHER_ID)
        assert code == StatusErrorCode.INVALID_STATUS


def test_director_approve_only_from_manager_approved():
    validate_director_approve(make_report(status=ReportStatus.MANAGER_APPROVED), OTHER_ID)
    for status in set(ReportStatus.values) - {ReportStatus.MANAGER_APPROVED}:
        code = raised_code(validate_director_approve, make_report(status=status), OTHER_ID)
        assert code == StatusErrorCode.INVALID_STATUS


@pytest.mark.parametrize("status", [ReportStatus.SUBMITTED, ReportStatus.MANAGER_APPROVED])
def test_reject_without_level_accepts_both_review_statuses(status):
    validate_reject(make_report(status=status), OTHER_ID)


@pytest.mark.parametrize("status", [ReportStatus.DRAFT, ReportStatus.APPROVED, ReportStatus.REJECTED])
def test_reject_from_non_review_statuses_is_invalid(status):
    code = raised_code(validate_reject, make_report(status=status), OTHER_ID)
    assert code == StatusErrorCode.INVALID_STATUS


def test_reject_with_level_is_narrowed_to_that_stage():
    submitted = make_report(status=ReportStatus.SUBMITTED)
    manager_approved = make_report(status=ReportStatus.MANAGER_APPROVED)

    validate_reject(submitted, OTHER_ID, approval_level=ApprovalLevel.MANAGER)
    validate_reject(manager_approved, OTHER_ID, approval_level=ApprovalLevel.DIRECTOR)

    code = raised_code(validate_reject, manager_approved, OTHER_ID, approval_level=ApprovalLevel.MANAGER)
    assert code == StatusErrorCode.INVALID_STATUS
    code = raised_code(validate_reject, submitted, OTHER_ID, approval_level=ApprovalLevel.DIRECTOR)
    assert code == StatusErrorCode.INVALID_STATUS


# ================= validators agree with the table =================

@pytest.mark.parametrize("status", ReportStatus.values)
def test_validators_never_admit_an_edge_missing_from_the_table(status):
    checks = [
        (validate_submit, ReportStatus.SUBMITTED, OWNER_ID),
        (validate_withdraw, ReportStatus.DRAFT, OWNER_ID),
        (validate_manager_approve, ReportStatus.MANAGER_APPROVED, OTHER_ID),
        (validate_director_approve, ReportStatus.APPROVED, OTHER_ID),
        (validate_reject, ReportStatus.REJECTED, OTHER_ID),
    ]
    report = make_report(status=status, visits=3)
    for validator, target, actor_id in checks:
        try:
            validator(report, actor_id)
        except StatusTransitionError:
            continue
        assert is_valid_transition(status, target), (validator.__name__, status)


def test_reject_with_unknown_level_is_invalid():
    report = make_report(status=ReportStatus.SUBMITTED)
    code = raised_code(validate_reject, report, OTHER_ID, approval_level="auditor")
    assert code == StatusErrorCode.INVALID_STATUS


# ================= patches =================

def test_submit_patch_stamps_submitted_at():
    assert create_submit_patch(NOW) == {"status": ReportStatus.SUBMITTED, "submitted_at": NOW}


def test_withdraw_patch_clears_submitted_at():
    assert create_withdraw_patch() == {"status": ReportStatus.DRAFT, "submitted_at": None}


def test_approve_patches_stamp_their_stage():
    assert create_manager_approve_patch(NOW) == {
        "status": ReportStatus.MANAGER_APPROVED,
        "manager_approved_at": NOW,
    }
    assert create_director_approve_patch(NOW) == {
        "status": ReportStatus.APPROVED,
        "director_approved_at": NOW,
    }


def test_reject_patch_keeps_submitted_at():
    patch = create_reject_patch(NOW)
    assert patch == {"status": ReportStatus.REJECTED, "rejected_at": NOW}
    assert "submitted_at" not in patch


def test_patches_default_to_current_time():
    patch = create_submit_patch()
    assert patch["submitted_at"] is not None
    assert patch["submitted_at"].tzinfo is not None


def test_patch_builders_return_fresh_dicts():
    first = create_withdraw_patch()
    first["status"] = ReportStatus.APPROVED
    assert create_withdraw_patch()["status"] == ReportStatus.DRAFT


# ================= end-to-end scenarios =================

def apply(report, patch):
    return replace(report, **{k: v for k, v in patch.items() if k in ("status", "submitted_at")})


def test_full_approval_path():
    report = make_report()

    validate_submit(report, OWNER_ID)
    report = apply(report, create_submit_patch(NOW))
    assert report.status == ReportStatus.SUBMITTED

    validate_manager_approve(report, OTHER_ID)
    report = apply(report, create_manager_approve_patch(NOW))

    validate_director_approve(report, OTHER_ID)
    report = apply(report, create_director_approve_patch(NOW))
    assert report.status == ReportStatus.APPROVED

    assert raised_code(validate_withdraw, report, OWNER_ID) == StatusErrorCode.ALREADY_APPROVED
    assert raised_code(validate_submit, report, OWNER_ID) == StatusErrorCode.INVALID_STATUS


def test_reject_and_resubmit_path():
    report = apply(make_report(), create_submit_patch(NOW))
    validate_reject(report, OTHER_ID, approval_level=ApprovalLevel.MANAGER)
    report = apply(report, create_reject_patch(NOW))
    assert report.status == ReportStatus.REJECTED
    assert report.submitted_at == NOW

    validate_submit(report, OWNER_ID)
    report = apply(report, create_submit_patch(NOW))
    assert report.status == ReportStatus.SUBMITTED


def test_withdraw_returns_to_draft():
    report = apply(make_report(), create_submit_patch(NOW))
    validate_withdraw(report, OWNER_ID)
    report = apply(report, create_withdraw_patch())
    assert report.status == ReportStatus.DRAFT
    assert report.submitted_at is None


def test_error_repr_carries_code_and_message():
    error = StatusTransitionError(StatusErrorCode.NO_VISITS, "At least one visit record is required.")
    assert "NO_VISITS" in repr(error)
    assert str(error) == "At least one visit record is required."
