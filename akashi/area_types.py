"""Value types that describe an area: its status, locks, evidence and settings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from akashi.acl_roles import _to_bool

logger = logging.getLogger(__name__)


@dataclass
class Evidence:
    """One piece of evidence in an area's court record."""

    name: str = ""
    description: str = ""
    image: str = ""


class Status(Enum):
    """What is going on in an area; purely informational."""

    IDLE = 0
    RP = 1
    CASING = 2
    LOOKING_FOR_PLAYERS = 3
    RECESS = 4
    GAMING = 5

    @property
    def arup_text(self) -> str:
        """The status as shown in area updates, with dashes instead of underscores."""
        return self.name.replace("_", "-")


class LockStatus(Enum):
    """Who may enter an area and talk in character there."""

    FREE = 0
    LOCKED = 1
    SPECTATABLE = 2


class EvidenceMod(Enum):
    """Who may add, remove or change evidence in an area."""

    FFA = 0
    MOD = 1
    CM = 2
    HIDDEN_CM = 3


class TestimonyRecording(Enum):
    """State of the testimony recorder in an area."""

    STOPPED = 0
    RECORDING = 1
    UPDATE = 2
    ADD = 3
    PLAYBACK = 4


class TestimonyProgress(Enum):
    """How a jump through the testimony turned out."""

    OK = 0
    LOOPED = 1
    STAYED_AT_FIRST = 2


class Side(Enum):
    """A side of the courtroom."""

    DEFENCE = 0
    PROSECUTOR = 1


STATUS_COMMANDS: Mapping[str, Status] = MappingProxyType(
    {
        "idle": Status.IDLE,
        "rp": Status.RP,
        "casing": Status.CASING,
        "lfp": Status.LOOKING_FOR_PLAYERS,
        "looking-for-players": Status.LOOKING_FOR_PLAYERS,
        "recess": Status.RECESS,
        "gaming": Status.GAMING,
    }
)


def status_from_command(text: str) -> Status:
    """Return the status that a ``/status`` argument names; raise ValueError if none."""
    try:
        return STATUS_COMMANDS[text]
    except KeyError:
        valid = ", ".join(sorted(STATUS_COMMANDS))
        raise ValueError(f"invalid status {text!r}; valid statuses are {valid}") from None


@dataclass
class AreaSettings:
    """Per-area options read from the area configuration."""

    background: str = "gs4"
    protected: bool = False
    iniswap_allowed: bool = True
    bg_locked: bool = False
    evidence_mod: EvidenceMod = EvidenceMod.FFA
    blankposting_allowed: bool = True
    area_message: str = ""
    send_area_message_on_join: bool = False
    force_immediate: bool = False
    toggle_music: bool = True
    shownames_allowed: bool = True
    ignore_bglist: bool = False
    jukebox_enabled: bool = False
    wtce_enabled: bool = True
    shouts_enabled: bool = True


def _bool_value(section: Mapping[str, Any], key: str, default: bool) -> bool:
    if key not in section:
        return default
    value = section[key]
    if isinstance(value, bool):
        return value
    return _to_bool(str(value))


def _evidence_mod_value(section: Mapping[str, Any]) -> EvidenceMod:
    text = str(section.get("evidence_mod", "FFA")).strip().upper()
    try:
        return EvidenceMod[text]
    except KeyError:
        logger.warning("unknown evidence mod %s; using FFA", text)
        return EvidenceMod.FFA


def parse_area_settings(section: Mapping[str, Any]) -> AreaSettings:
    """Build area settings from one configuration section, filling in defaults."""
    return AreaSettings(
        background=str(section.get("background", "gs4")),
        protected=_bool_value(section, "protected_area", False),
        iniswap_allowed=_bool_value(section, "iniswap_allowed", True),
        bg_locked=_bool_value(section, "bg_locked", False),
        evidence_mod=_evidence_mod_value(section),
        blankposting_allowed=_bool_value(section, "blankposting_allowed", True),
        area_message=str(section.get("area_message", "")),
        send_area_message_on_join=_bool_value(section, "send_area_message_on_join", False),
        force_immediate=_bool_value(section, "force_immediate", False),
        toggle_music=_bool_value(section, "toggle_music", True),
        shownames_allowed=_bool_value(section, "shownames_allowed", True),
        ignore_bglist=_bool_value(section, "ignore_bglist", False),
        jukebox_enabled=_bool_value(section, "jukebox_enabled", False),
        wtce_enabled=_bool_value(section, "wtce_enabled", True),
        shouts_enabled=_bool_value(section, "shouts_enabled", True),
    )


def split_area_name(raw_name: str) -> str:
    """Strip the ``index:`` prefix from a configured area name."""
    _, _, name = raw_name.partition(":")
    return name