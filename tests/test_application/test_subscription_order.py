"""
Tests for ReorderSubscriptionUseCase (manual ordering of the subscription list)
"""
from datetime import date

import pytest

from app.application.subscription_order import OrderValidationError, ReorderSubscriptionUseCase
from app.application.subscriptions import (
    CreateSubscriptionUseCase,
    DeleteSubscriptionUseCase,
    SubscriptionNotFoundError,
)
from app.infrastructure.db.repository import SubscriptionRepository


def _create(db, user_id: int, *names: str) -> dict[str, int]:
    use_case = CreateSubscriptionUseCase(db, free_tier_limit=100)
    return {
        name: use_case.execute(user_id, name, "10", "monthly", date(2026, 4, 1))
        for name in names
    }


def _order(db, user_id: int) -> list[tuple[str, int]]:
    """[(name, order_index), ...] in list order"""
    db.expire_all()
    return [(s.name, s.order_index) for s in SubscriptionRepository(db).fetch_all(user_id)]


def _names(db, user_id: int) -> list[str]:
    return [name for name, _ in _order(db, user_id)]


def _reorder(db, user_id: int, sub_id: int, new_index):
    ReorderSubscriptionUseCase(SubscriptionRepository(db)).execute(user_id, sub_id, new_index)


def test_move_last_to_first(db_session, user):
    """A, B, C: C -> 0 даёт C, A, B"""
    ids = _create(db_session, user.id, "A", "B", "C")

    _reorder(db_session, user.id, ids["C"], 0)

    assert _order(db_session, user.id) == [("C", 0), ("A", 1), ("B", 2)]


def test_move_first_to_last(db_session, user):
    ids = _create(db_session, user.id, "A", "B", "C")

    _reorder(db_session, user.id, ids["A"], 2)

    assert _order(db_session, user.id) == [("B", 0), ("C", 1), ("A", 2)]


def test_move_down_into_middle(db_session, user):
    ids = _create(db_session, user.id, "A", "B", "C", "D")

    _reorder(db_session, user.id, ids["A"], 2)

    assert _names(db_session, user.id) == ["B", "C", "A", "D"]


def test_move_up_into_middle(db_session, user):
    ids = _create(db_session, user.id, "A", "B", "C", "D")

    _reorder(db_session, user.id, ids["D"], 1)

    assert _names(db_session, user.id) == ["A", "D", "B", "C"]


@pytest.mark.parametrize("source", range(4))
@pytest.mark.parametrize("target", range(4))
def test_indices_stay_dense(db_session, user, source, target):
    names = ["A", "B", "C", "D"]
    ids = _create(db_session, user.id, *names)

    _reorder(db_session, user.id, ids[names[source]], target)

    order = _order(db_session, user.id)
    assert [idx for _, idx in order] == [0, 1, 2, 3]
    assert order[target][0] == names[source]
    # the others keep their relative order
    rest = [n for n in names if n != names[source]]
    assert [n for n, _ in order if n != names[source]] == rest


def test_same_position_is_noop(db_session, user):
    ids = _create(db_session, user.id, "A", "B", "C")

    _reorder(db_session, user.id, ids["B"], 1)

    assert _order(db_session, user.id) == [("A", 0), ("B", 1), ("C", 2)]


def test_foreign_subscription_not_found(db_session, user, other_user):
    _create(db_session, user.id, "A", "B")
    foreign = _create(db_session, other_user.id, "X", "Y")

    with pytest.raises(SubscriptionNotFoundError):
        _reorder(db_session, user.id, foreign["Y"], 0)

    assert _order(db_session, user.id) == [("A", 0), ("B", 1)]
    assert _order(db_session, other_user.id) == [("X", 0), ("Y", 1)]


def test_missing_subscription_not_found(db_session, user):
    _create(db_session, user.id, "A")

    with pytest.raises(SubscriptionNotFoundError):
        _reorder(db_session, user.id, 99999, 0)


def test_index_past_end_rejected(db_session, user):
    ids = _create(db_session, user.id, "A", "B", "C")

    with pytest.raises(OrderValidationError):
        _reorder(db_session, user.id, ids["A"], 3)

    assert _order(db_session, user.id) == [("A", 0), ("B", 1), ("C", 2)]


@pytest.mark.parametrize("bad_index", [-1, True, 1.0, "1", None])
def test_invalid_index_rejected(db_session, user, bad_index):
    ids = _create(db_session, user.id, "A", "B")

    with pytest.raises(OrderValidationError):
        _reorder(db_session, user.id, ids["A"], bad_index)

    assert _order(db_session, user.id) == [("A", 0), ("B", 1)]


def test_other_users_untouched(db_session, user, other_user):
    ids = _create(db_session, user.id, "A", "B", "C")
    _create(db_session, other_user.id, "X", "Y", "Z")

    _reorder(db_session, user.id, ids["C"], 0)

    assert _order(db_session, other_user.id) == [("X", 0), ("Y", 1), ("Z", 2)]


def test_delete_leaves_gap(db_session, user):
    """Удаление не перенумеровывает: индексы 0, 2"""
    ids = _create(db_session, user.id, "A", "B", "C")

    DeleteSubscriptionUseCase(db_session).execute(ids["B"], user.id)

    assert _order(db_session, user.id) == [("A", 0), ("C", 2)]


def test_create_after_delete_appends_after_max(db_session, user):
    ids = _create(db_session, user.id, "A", "B", "C")
    DeleteSubscriptionUseCase(db_session).execute(ids["B"], user.id)

    _create(db_session, user.id, "D")

    assert _order(db_session, user.id) == [("A", 0), ("C", 2), ("D", 3)]


def test_reorder_closes_gap_range(db_session, user):
    ids = _create(db_session, user.id, "A", "B", "C")
    DeleteSubscriptionUseCase(db_session).execute(ids["B"], user.id)

    # list has 2 items now, so index 1 is the last valid position
    _reorder(db_session, user.id, ids["C"], 1)

    assert _order(db_session, user.id) == [("A", 0), ("C", 1)]


def test_same_position_after_gap_is_noop(db_session, user):
    """C остаётся на индексе 2 при n=2: перенос на своё место проходит"""
    ids = _create(db_session, user.id, "A", "B", "C")
    DeleteSubscriptionUseCase(db_session).execute(ids["B"], user.id)

    _reorder(db_session, user.id, ids["C"], 2)

    assert _order(db_session, user.id) == [("A", 0), ("C", 2)]


def test_failed_move_rolls_back_shift(db_session, user, monkeypatch):
    """Ошибка после сдвига: все индексы остаются прежними"""
    ids = _create(db_session, user.id, "A", "B", "C")
    repo = SubscriptionRepository(db_session)

    def fail(*args, **kwargs):
        raise RuntimeError("write failed")

    monkeypatch.setattr(repo, "set_order_index", fail)

    with pytest.raises(RuntimeError):
        ReorderSubscriptionUseCase(repo).execute(user.id, ids["A"], 2)

    assert _order(db_session, user.id) == [("A", 0), ("B", 1), ("C", 2)]
