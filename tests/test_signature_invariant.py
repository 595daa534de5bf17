"""Single-default invariant over arbitrary create/update/delete sequences."""

import random

import pytest

from coursemail.services import signature_service
from coursemail.services.signature_service import SignatureValidationError


def _assert_single_default(db, user_id):
    active = signature_service.list_active(db, user_id)
    defaults = [s for s in active if s.is_default]
    if active:
        assert len(defaults) == 1, [(s.id, s.title, s.is_default) for s in active]
    else:
        assert defaults == []


def _assert_unique_titles(db, user_id):
    titles = [s.title for s in signature_service.list_active(db, user_id)]
    assert len(titles) == len(set(titles))


@pytest.mark.parametrize("seed", range(12))
def test_random_operation_sequence_keeps_one_default(db, test_user, make_user, seed):
    rng = random.Random(seed)
    other = make_user("Olive Other")
    users = [test_user.id, other.id]
    titles = ["Work", "Home", "Club", "Formal", "Short"]

    for _ in range(40):
        user_id = rng.choice(users)
        active = signature_service.list_active(db, user_id)
        op = rng.choice(["create", "create", "update", "delete"])

        try:
            if op == "create" or not active:
                signature_service.create_signature(
                    db,
                    user_id,
                    rng.choice(titles),
                    f"<p>{rng.random()}</p>",
                    is_default=rng.random() < 0.4,
                )
            elif op == "update":
                target = rng.choice(active)
                signature_service.update_signature(
                    db,
                    target.id,
                    title=rng.choice(titles + [None]),
                    is_default=rng.choice([True, False, None]),
                )
            else:
                signature_service.soft_delete_signature(db, rng.choice(active).id)
        except SignatureValidationError:
            # Duplicate titles are expected along the way; nothing may change
            pass

        for uid in users:
            _assert_single_default(db, uid)
            _assert_unique_titles(db, uid)


def test_reconcile_default_repairs_state_with_no_default(db, test_user):
    first = signature_service.create_signature(db, test_user.id, "Work", "<p>A</p>")
    second = signature_service.create_signature(db, test_user.id, "Home", "<p>B</p>")
    first.is_default = False
    db.flush()

    signature_service.reconcile_default(db, test_user.id)
    db.commit()

    assert [s.id for s in signature_service.list_active(db, test_user.id) if s.is_default] == [first.id]
    db.refresh(second)
    assert second.is_default is False


def test_reconcile_default_keeps_first_of_many_defaults(db, test_user):
    first = signature_service.create_signature(db, test_user.id, "Work", "<p>A</p>")
    second = signature_service.create_signature(db, test_user.id, "Home", "<p>B</p>")
    second.is_default = True
    db.flush()

    signature_service.reconcile_default(db, test_user.id)

    assert first.is_default is True
    assert second.is_default is False


def test_reconcile_default_anchor_default_wins(db, test_user):
    first = signature_service.create_signature(db, test_user.id, "Work", "<p>A</p>")
    second = signature_service.create_signature(db, test_user.id, "Home", "<p>B</p>")
    second.is_default = True

    signature_service.reconcile_default(db, test_user.id, anchor=second)

    assert first.is_default is False
    assert second.is_default is True


def test_reconcile_default_without_signatures_is_noop(db, test_user):
    signature_service.reconcile_default(db, test_user.id)

    assert signature_service.list_active(db, test_user.id) == []
