"""Shared-secret gate in front of the notebook.

Not authentication: one static password, compared locally, keeps casual
readers out of a notebook on a shared machine.
"""

import getpass
import hmac
from typing import Callable

WRONG_PASSWORD_MESSAGE = "Contraseña incorrecta."


class PasswordGate:
    """Asks for the shared password before the notebook is opened."""

    def __init__(self, secret: str, max_attempts: int = 3) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._secret = secret or ""
        self.max_attempts = max_attempts

    @property
    def enabled(self) -> bool:
        return bool(self._secret)

    def check(self, candidate: str) -> bool:
        """Constant-time comparison against the secret."""
        if not self.enabled:
            return True
        return hmac.compare_digest(
            (candidate or "").encode("utf-8"), self._secret.encode("utf-8")
        )

    def prompt(
        self,
        read: Callable[[str], str] | None = None,
        write: Callable[[str], None] = print,
    ) -> bool:
        """Ask for the password up to max_attempts times.

        Args:
            read: Reads one answer given a prompt. Defaults to getpass.getpass.
            write: Prints feedback after a wrong answer.

        Returns:
            True once the right password is given (or the gate is disabled).
            End of input counts as a wrong answer.
        """
        if not self.enabled:
            return True

        reader = read or getpass.getpass
        for _ in range(self.max_attempts):
            try:
                answer = reader("Contraseña: ")
            except EOFError:
                answer = ""
            if self.check(answer):
                return True
            write(WRONG_PASSWORD_MESSAGE)
        return False
