"""Access-control roles, their permissions and the INI file that stores them."""

from __future__ import annotations

import configparser
import logging
from dataclasses import dataclass, replace
from enum import IntFlag
from os import PathLike
from types import MappingProxyType
from typing import Mapping, Union

logger = logging.getLogger(__name__)

PathType = Union[str, "PathLike[str]"]


class Permission(IntFlag):
    """Individual rights a role may grant."""

    NONE = 0
    KICK = 1 << 0
    BAN = 1 << 1
    BGLOCK = 1 << 2
    MODIFY_USERS = 1 << 3
    CM = 1 << 4
    GLOBAL_TIMER = 1 << 5
    EVI_MOD = 1 << 6
    MOTD = 1 << 7
    ANNOUNCE = 1 << 8
    MODCHAT = 1 << 9
    MUTE = 1 << 10
    UNCM = 1 << 11
    SAVETEST = 1 << 12
    FORCE_CHARSELECT = 1 << 13
    BYPASS_LOCKS = 1 << 14
    IGNORE_BGLIST = 1 << 15
    SEND_NOTICE = 1 << 16
    JUKEBOX = 1 << 17
    SUPER = (1 << 18) - 1


PERMISSION_CAPTIONS: Mapping[Permission, str] = MappingProxyType(
    {
        Permission.NONE: "none",
        Permission.KICK: "kick",
        Permission.BAN: "ban",
        Permission.BGLOCK: "lock_background",
        Permission.MODIFY_USERS: "modify_users",
        Permission.CM: "gamemaster",
        Permission.GLOBAL_TIMER: "global_timer",
        Permission.EVI_MOD: "modify_evidence",
        Permission.MOTD: "motd",
        Permission.ANNOUNCE: "announcer",
        Permission.MODCHAT: "chat_moderator",
        Permission.MUTE: "mute",
        Permission.UNCM: "remove_gamemaster",
        Permission.SAVETEST: "save_testimony",
        Permission.FORCE_CHARSELECT: "force_charselect",
        Permission.BYPASS_LOCKS: "bypass_locks",
        Permission.IGNORE_BGLIST: "ignore_background_list",
        Permission.SEND_NOTICE: "send_notice",
        Permission.JUKEBOX: "jukebox",
        Permission.SUPER: "super",
    }
)

_PERMISSIONS_BY_CAPTION = {caption: permission for permission, caption in PERMISSION_CAPTIONS.items()}

_DEFAULT_SECTION = "\x00defaults"
_TOP_LEVEL_SECTION = "General"


def permission_caption(permission: Permission) -> str:
    """Return the configuration caption of a single permission."""
    try:
        return PERMISSION_CAPTIONS[permission]
    except KeyError:
        raise ValueError(f"no caption for permission {permission!r}") from None


def permission_from_caption(caption: str) -> Permission:
    """Return the permission that a configuration caption names."""
    try:
        return _PERMISSIONS_BY_CAPTION[caption]
    except KeyError:
        raise ValueError(f"permission {caption!r} does not exist") from None


def _to_bool(value: str) -> bool:
    text = value.strip()
    return bool(text) and text != "0" and text.lower() != "false"


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(
        interpolation=None, strict=False, default_section=_DEFAULT_SECTION
    )
    parser.optionxform = str  # keys are case-sensitive
    return parser


def _read_ini(file_name: PathType) -> configparser.ConfigParser:
    """Read an INI file; a missing file reads as empty."""
    parser = _new_parser()
    try:
        with open(file_name, encoding="utf-8") as handle:
            parser.read_file(handle)
    except FileNotFoundError:
        pass
    except configparser.Error as exc:
        raise ValueError(f"file is malformed: {file_name}") from exc
    return parser


def _groups(parser: configparser.ConfigParser) -> list[str]:
    return [name for name in parser.sections() if name != _TOP_LEVEL_SECTION]


@dataclass
class ACLRole:
    """A named set of permissions."""

    permissions: Permission = Permission.NONE

    def check_permission(self, permission: Permission) -> bool:
        """True if the role grants every bit of ``permission``; NONE is always granted."""
        if permission == Permission.NONE:
            return True
        return (self.permissions & permission) == permission

    def set_permission(self, permission: Permission, mode: bool) -> None:
        """Grant or revoke ``permission``."""
        if mode:
            self.permissions = Permission(int(self.permissions) | int(permission))
        else:
            self.permissions = Permission(int(self.permissions) & ~int(permission))


class ACLRolesHandler:
    """Holds the configurable roles next to the built-in read-only ones."""

    NONE_ID = "NONE"
    SUPER_ID = "SUPER"
    READONLY_ROLES: Mapping[str, Permission] = MappingProxyType(
        {NONE_ID: Permission.NONE, SUPER_ID: Permission.SUPER}
    )

    def __init__(self) -> None:
        self._roles: dict[str, ACLRole] = {}

    def role_exists(self, role_id: str) -> bool:
        role_id = role_id.upper()
        return role_id in self.READONLY_ROLES or role_id in self._roles

    def get_role_by_id(self, role_id: str) -> ACLRole:
        """Return a copy of the role; an unknown id yields a role without permissions."""
        role_id = role_id.upper()
        if role_id in self.READONLY_ROLES:
            return ACLRole(self.READONLY_ROLES[role_id])
        role = self._roles.get(role_id)
        return replace(role) if role is not None else ACLRole()

    def insert_role(self, role_id: str, role: ACLRole) -> bool:
        """Store ``role``; read-only ids are refused."""
        role_id = role_id.upper()
        if role_id in self.READONLY_ROLES:
            return False
        self._roles[role_id] = replace(role)
        return True

    def remove_role(self, role_id: str) -> bool:
        """Remove a configurable role; False if it is read-only or unknown."""
        role_id = role_id.upper()
        if role_id in self.READONLY_ROLES or role_id not in self._roles:
            return False
        del self._roles[role_id]
        return True

    def clear_roles(self) -> None:
        self._roles.clear()

    def load_file(self, file_name: PathType) -> None:
        """Replace the configurable roles with those stored in an INI file."""
        parser = _read_ini(file_name)
        self._roles.clear()
        for group in _groups(parser):
            upper_group = group.upper()
            if upper_group in self.READONLY_ROLES:
                logger.warning("cannot modify role; %s is read-only", group)
                continue
            if upper_group in self._roles:
                logger.warning("role %s already exists", upper_group)
                continue
            role = ACLRole()
            section = parser[group]
            for permission, caption in PERMISSION_CAPTIONS.items():
                if caption in section:
                    role.set_permission(permission, _to_bool(section[caption]))
            self._roles[upper_group] = role

    def save_file(self, file_name: PathType) -> None:
        """Write the configurable roles to an INI file, replacing its contents."""
        parser = _new_parser()
        for role_id, role in self._roles.items():
            upper_id = role_id.upper()
            if upper_id in self.READONLY_ROLES:
                continue
            if role.check_permission(Permission.SUPER):
                values = {permission_caption(Permission.SUPER): "true"}
            else:
                values = {
                    caption: "true"
                    for permission, caption in PERMISSION_CAPTIONS.items()
                    if role.check_permission(permission)
                }
            parser[upper_id] = values
        with open(file_name, "w", encoding="utf-8") as handle:
            parser.write(handle, space_around_delimiters=False)