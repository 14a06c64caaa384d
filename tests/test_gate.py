"""Tests for the shared-secret gate."""

import pytest

from cuaderno.gate import WRONG_PASSWORD_MESSAGE, PasswordGate


def answers(*values):
    it = iter(values)
    return lambda prompt: next(it)


class TestPasswordGate:
    def test_disabled_without_secret(self):
        gate = PasswordGate("")
        assert gate.enabled is False
        assert gate.check("anything") is True
        assert gate.prompt(read=answers()) is True

    def test_check(self):
        gate = PasswordGate("230713")
        assert gate.check("230713") is True
        assert gate.check("000000") is False
        assert gate.check("") is False

    def test_prompt_accepts_right_password(self):
        messages = []
        gate = PasswordGate("230713")
        assert gate.prompt(read=answers("230713"), write=messages.append) is True
        assert messages == []

    def test_prompt_retries(self):
        messages = []
        gate = PasswordGate("230713", max_attempts=3)
        assert gate.prompt(read=answers("1", "2", "230713"), write=messages.append) is True
        assert messages == [WRONG_PASSWORD_MESSAGE, WRONG_PASSWORD_MESSAGE]

    def test_prompt_gives_up(self):
        messages = []
        gate = PasswordGate("230713", max_attempts=2)
        assert gate.prompt(read=answers("1", "2"), write=messages.append) is False
        assert len(messages) == 2

    def test_invalid_attempts(self):
        with pytest.raises(ValueError):
            PasswordGate("x", max_attempts=0)

    def test_end_of_input_counts_as_wrong(self):
        def closed(prompt):
            raise EOFError

        messages = []
        gate = PasswordGate("230713", max_attempts=2)
        assert gate.prompt(read=closed, write=messages.append) is False
        assert messages == [WRONG_PASSWORD_MESSAGE, WRONG_PASSWORD_MESSAGE]
