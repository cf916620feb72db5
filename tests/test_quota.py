import pytest

from core.exceptions import QuotaExceededError
from core.models import User
from core.quota import QuotaGate


def _user(limit, sent):
    return User(id=1, username="ada", daily_message_limit=limit, messages_last_24h=sent)


def test_single_user_mode_always_permits():
    gate = QuotaGate()
    assert gate.can_send(_user(1, 50), multi_user_mode=False)
    assert gate.can_send(None, multi_user_mode=False)


def test_multi_user_below_limit_permits():
    assert QuotaGate().can_send(_user(5, 4), multi_user_mode=True)


def test_multi_user_at_limit_denies():
    assert not QuotaGate().can_send(_user(5, 5), multi_user_mode=True)


def test_no_limit_is_unlimited():
    assert QuotaGate().can_send(_user(None, 10_000), multi_user_mode=True)


def test_missing_user_in_multi_user_mode_denied():
    assert not QuotaGate().can_send(None, multi_user_mode=True)


def test_check_raises_with_limit_message():
    with pytest.raises(QuotaExceededError) as exc:
        QuotaGate().check(_user(3, 3), multi_user_mode=True)
    assert exc.value.limit == 3
    assert "maximum 24 hour chat quota of 3 chats" in exc.value.message


def test_check_does_not_touch_counter():
    user = _user(3, 2)
    QuotaGate().check(user, multi_user_mode=True)
    assert user.messages_last_24h == 2
