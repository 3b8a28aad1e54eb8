"""Closed integer enumerations stored in the users and items tables."""

from enum import IntEnum


class Role(IntEnum):
    USER = 0
    ADMIN = 1


class UserStatus(IntEnum):
    DELETED = 0
    ACTIVE = 1
    BANNED = 2


# Accounts in these states can neither log in nor pass the auth dependency.
INACTIVE_USER_STATUSES = frozenset({UserStatus.DELETED, UserStatus.BANNED})


class ItemStatus(IntEnum):
    TODO = 0
    DOING = 1
    DONE = 2
