# auth.py
import logging
import secrets
import zlib
from dataclasses import dataclass, field
from typing import Mapping

from errors import AuthError, ValidationError
from permissions import Role, capabilities_for, menu_operations, operations_for, tables_for

logger = logging.getLogger(__name__)


def _same(expected, given):
    return secrets.compare_digest(expected.encode("utf-8"), (given or "").encode("utf-8"))


@dataclass(frozen=True)
class Principal:
    """A console user. Two principals are the same user when name and secret match."""
    name: str
    secret: str = field(repr=False)
    role: Role = field(default=Role.NONE, compare=False)
    capabilities: Mapping = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if not self.name or not self.secret:
            raise ValidationError("Invalid user information")
        object.__setattr__(self, "role", Role.parse(self.role))
        object.__setattr__(self, "capabilities", capabilities_for(self.role))

    @property
    def student_id(self):
        """Stable 5 digit ID used for the student and takes tables."""
        return f"{zlib.crc32(self.name.encode('utf-8')) % 100000:05d}"

    def __str__(self):
        return f'[{self.role.value}] "{self.name}"'


class AuthSession:
    """
    Holds the registered principals and the one currently logged in.
    The console keeps a single AuthSession for its whole lifetime.
    """

    def __init__(self, principals=()):
        self._principals = list(principals)
        self._current = None

    @property
    def principals(self):
        return tuple(self._principals)

    def register(self, name, secret, role):
        principal = Principal(name, secret, Role.parse(role))
        self._principals.append(principal)
        logger.info("Registered user %s", principal)
        return principal

    def authenticate(self, name, secret):
        """Logs `name` in. Unknown names and wrong secrets fail the same way."""
        for principal in self._principals:
            if _same(principal.name, name) and _same(principal.secret, secret):
                self._current = principal
                logger.info("User %s logged in", principal)
                return principal

        logger.warning("Failed login attempt")
        raise AuthError()

    def current(self):
        return self._current

    def authorize(self, table, operation):
        if self._current is None:
            return False
        return operation in operations_for(self._current.role, table)

    def available_tables(self):
        if self._current is None:
            return ()
        return tables_for(self._current.role)

    def available_operations(self, table):
        if self._current is None:
            return ()
        return menu_operations(self._current.role, table)
