"""Directory-native password policy collaborator.

Directories such as Active Directory or eDirectory can test a password
against their own server-side policy. The engine talks to them through
DirectoryPolicyTester and translates the errors below into violations.
"""

from typing import Protocol


class DirectoryPolicyViolation(Exception):
    """Raised by a directory when a password breaks its native policy.

    Attributes:
        error_code: Name of the matching PasswordError, when the directory
            reports one the engine knows.
    """

    def __init__(self, message: str, error_code: str | None = None):
        self.error_code = error_code
        super().__init__(message)


class DirectoryUnavailableError(Exception):
    """Raised when the directory cannot be reached."""
    pass


class DirectoryPolicyTester(Protocol):
    """Tests a password against the directory's own policy.

    Implementations raise DirectoryPolicyViolation on rejection and
    NotImplementedError when the directory has no such operation.
    """

    def test_password_policy(self, password: str) -> None: ...
