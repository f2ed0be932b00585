# permissions.py
from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping


class Role(str, Enum):
    STAFF = "Staff"
    STUDENT = "Student"
    NONE = "None"

    @classmethod
    def parse(cls, label) -> "Role":
        """Accepts 'staff', 'STUDENT', Role.STAFF... Unknown labels map to NONE."""
        if isinstance(label, Role):
            return label
        normalized = str(label or "").strip().lower()
        for role in cls:
            if role.value.lower() == normalized:
                return role
        return cls.NONE


class Operation(str, Enum):
    RETRIEVE = "Retrieve"
    CREATE = "Create"
    UPDATE = "Update"
    DELETE = "Delete"
    DROP = "Drop"
    REGISTER = "Register"


# Returned for any table a role cannot reach.
NO_OPERATIONS: frozenset = frozenset()

_CRUD = frozenset({Operation.RETRIEVE, Operation.CREATE, Operation.UPDATE, Operation.DELETE})

CAPABILITIES: Mapping[Role, Mapping[str, frozenset]] = MappingProxyType({
    Role.STAFF: MappingProxyType({
        "course": _CRUD,
        "section": _CRUD,
        "department": frozenset({Operation.RETRIEVE}),
    }),
    Role.STUDENT: MappingProxyType({
        "takes": frozenset({Operation.REGISTER, Operation.RETRIEVE, Operation.DROP}),
        "transcript": frozenset({Operation.RETRIEVE}),
    }),
    Role.NONE: MappingProxyType({}),
})


def capabilities_for(role) -> Mapping[str, frozenset]:
    return CAPABILITIES[Role.parse(role)]


def operations_for(role, table: str) -> frozenset:
    return capabilities_for(role).get(table, NO_OPERATIONS)


def tables_for(role) -> tuple[str, ...]:
    return tuple(capabilities_for(role))


def menu_operations(role, table: str) -> tuple[Operation, ...]:
    """Operations for a table in declaration order, so menu positions never move."""
    allowed = operations_for(role, table)
    return tuple(op for op in Operation if op in allowed)
