"""Tests for shared and exclusive views."""

from __future__ import annotations

import pytest

from tristate import Absent, BorrowError, Failure, Ref, State, Success
from tristate.config import clear_settings_cache


@pytest.fixture
def borrow_checks(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TRISTATE_BORROW_CHECKS", "true")
    clear_settings_cache()


# ═════════════════════════════════════════════════════════════════════════════
# Shared Views
# ═════════════════════════════════════════════════════════════════════════════


def test_borrowed_view_shares_payload() -> None:
    payload = {"id": 1}
    owner = Success(payload)
    view = owner.as_borrowed_view()

    assert view == owner
    assert view is not owner
    assert view.unwrap() is payload


def test_borrowed_view_preserves_state() -> None:
    assert Absent().as_borrowed_view() == Absent()
    assert Failure("e").as_borrowed_view() == Failure("e")


def test_many_borrowed_views() -> None:
    owner = Success([1])
    views = [owner.as_borrowed_view() for _ in range(3)]
    assert all(v.unwrap() is owner.unwrap() for v in views)


# ═════════════════════════════════════════════════════════════════════════════
# Exclusive Views
# ═════════════════════════════════════════════════════════════════════════════


def test_mutable_view_writes_through() -> None:
    owner = Success(1)
    with owner.as_mutable_view() as view:
        assert view.state is State.SUCCESS
        ref = view.unwrap()
        ref.set(ref.get() + 1)
        assert ref.get() == 2
    assert owner == Success(2)


def test_mutable_view_value_property() -> None:
    owner = Success("a")
    with owner.as_mutable_view() as view:
        view.inspect(lambda r: setattr(r, "value", r.value * 3))
    assert owner == Success("aaa")


def test_mutable_view_on_failure() -> None:
    owner = Failure("timeout")
    with owner.as_mutable_view() as view:
        ref = view.unwrap_failure()
        ref.set(f"{ref.get()} after 3 retries")
    assert owner == Failure("timeout after 3 retries")


def test_mutable_view_on_absent() -> None:
    owner = Absent()
    with owner.as_mutable_view() as view:
        assert view == Absent()
    assert owner == Absent()


def test_ref_detached_after_release() -> None:
    owner = Success(1)
    with owner.as_mutable_view() as view:
        ref: Ref[int] = view.unwrap()
    with pytest.raises(BorrowError, match="released"):
        ref.get()
    with pytest.raises(BorrowError):
        ref.set(5)
    assert repr(ref) == "Ref(<released>)"
    assert owner == Success(1)


def test_second_mutable_view_rejected(borrow_checks: None) -> None:
    owner = Success(1)
    with owner.as_mutable_view():
        with pytest.raises(BorrowError, match="as_mutable_view"):
            with owner.as_mutable_view():
                pass


def test_borrowed_view_rejected_while_mutable(borrow_checks: None) -> None:
    owner = Success(1)
    with owner.as_mutable_view():
        with pytest.raises(BorrowError, match="as_borrowed_view"):
            owner.as_borrowed_view()
    assert owner.as_borrowed_view() == Success(1)


def test_view_released_on_exception(borrow_checks: None) -> None:
    owner = Success(1)
    with pytest.raises(ValueError):
        with owner.as_mutable_view():
            raise ValueError("boom")
    with owner.as_mutable_view() as view:
        assert view.is_success()


def test_borrow_checks_disabled(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without runtime checks overlapping views are not detected."""
    monkeypatch.setenv("TRISTATE_BORROW_CHECKS", "false")
    clear_settings_cache()

    owner = Success(1)
    with owner.as_mutable_view():
        with owner.as_mutable_view() as inner:
            inner.unwrap().set(7)
        assert owner.as_borrowed_view() == Success(7)


def test_mutable_view_rejected_while_shared_alive(borrow_checks: None) -> None:
    owner = Success([1])
    shared = owner.as_borrowed_view()
    with pytest.raises(BorrowError, match="shared view"):
        with owner.as_mutable_view() as view:
            view.unwrap().get().append(2)
    assert shared == Success([1])

    del shared
    with owner.as_mutable_view() as view:
        view.unwrap().get().append(2)
    assert owner == Success([1, 2])


def test_temporary_shared_views_do_not_block(borrow_checks: None) -> None:
    owner = Success(1)
    value = owner.as_borrowed_view().unwrap()
    assert value == 1
    with owner.as_mutable_view() as view:
        view.unwrap().set(2)
    assert owner == Success(2)
