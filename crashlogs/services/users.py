"""Local user enumeration for per-user crash report discovery."""

import logging
import pwd
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserAccount:
    """A local account whose home directory may hold crash reports."""

    uid: int
    username: str
    directory: str


def _from_passwd(entry: pwd.struct_passwd) -> UserAccount:
    return UserAccount(uid=entry.pw_uid, username=entry.pw_name, directory=entry.pw_dir)


def users_from_constraints(uid: str | None = None) -> list[UserAccount]:
    """Return the accounts selected by an optional uid constraint.

    Args:
        uid: Restrict to the account with this numeric uid

    Returns:
        Matching accounts; all accounts when no constraint is given
    """
    if uid is None:
        return [_from_passwd(entry) for entry in pwd.getpwall()]

    try:
        return [_from_passwd(pwd.getpwuid(int(uid)))]
    except (KeyError, ValueError):
        logger.debug("No local account with uid %s", uid)
        return []
