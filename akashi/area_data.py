"""A single area on the server: its occupants, locks, evidence, music and testimony."""

from __future__ import annotations

import random
import threading
from dataclasses import replace
from typing import Callable, Iterable, Optional, Protocol

from akashi.area_types import (
    AreaSettings,
    Evidence,
    EvidenceMod,
    LockStatus,
    Side,
    Status,
    split_area_name,
    status_from_command,
)
from akashi.testimony import Judgelog, Testimony

DEFAULT_DOCUMENT = "No document."
DEFAULT_AREA_MESSAGE = "No area message set."
DEFAULT_MUSIC = "~stop.mp3"
JUKEBOX_PLAYER = "Jukebox"
MAX_HP = 10


class MusicManager(Protocol):
    """Looks up the playable name and duration of a song."""

    def song_information(self, song: str, area_index: int) -> tuple[str, float]:
        ...


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


Scheduler = Callable[[float, Callable[[], None]], TimerHandle]
AreaPacketHandler = Callable[[str, list, int], None]
ClientPacketHandler = Callable[[str, list, int], None]
JoinHandler = Callable[[int, int], None]


def _thread_scheduler(delay: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def _ignore(*_args: object) -> None:
    return None


class AreaData:
    """A distinct room where clients chat in and out of character."""

    def __init__(
        self,
        raw_name: str,
        index: int,
        settings: Optional[AreaSettings] = None,
        music_manager: Optional[MusicManager] = None,
        *,
        server_name: str = "",
        on_area_packet: AreaPacketHandler = _ignore,
        on_client_packet: ClientPacketHandler = _ignore,
        on_user_joined: JoinHandler = _ignore,
        scheduler: Scheduler = _thread_scheduler,
        rng: Optional[random.Random] = None,
    ) -> None:
        settings = settings if settings is not None else AreaSettings()
        self._name = split_area_name(raw_name)
        self._index = index
        self._music_manager = music_manager
        self.server_name = server_name
        self._on_area_packet = on_area_packet
        self._on_client_packet = on_client_packet
        self._on_user_joined = on_user_joined
        self._scheduler = scheduler
        self._rng = rng if rng is not None else random.SystemRandom()

        self._player_count = 0
        self._characters_taken: list[int] = []
        self._joined_ids: list[int] = []
        self._owners: list[int] = []
        self._invited: list[int] = []
        self._evidence: list[Evidence] = []
        self._notecards: dict[str, str] = {}
        self._status = Status.IDLE
        self._lock_status = LockStatus.FREE
        self._def_hp = MAX_HP
        self._pro_hp = MAX_HP
        self._last_ic_message: list[str] = []

        self.document = DEFAULT_DOCUMENT
        self.current_music = DEFAULT_MUSIC
        self.music_played_by = ""
        self.background = settings.background
        self.evidence_mod: EvidenceMod = settings.evidence_mod
        self._area_message = settings.area_message
        self._protected = settings.protected
        self._iniswap_allowed = settings.iniswap_allowed
        self._bg_locked = settings.bg_locked
        self._blankposting_allowed = settings.blankposting_allowed
        self._send_area_message = settings.send_area_message_on_join
        self._force_immediate = settings.force_immediate
        self._music_allowed = settings.toggle_music
        self._showname_allowed = settings.shownames_allowed
        self._ignore_bg_list = settings.ignore_bglist
        self._jukebox_enabled = settings.jukebox_enabled
        self._wtce_allowed = settings.wtce_enabled
        self._shout_allowed = settings.shouts_enabled
        self._message_allowed = True

        self.testimony = Testimony()
        self.judgelog = Judgelog()

        self._jukebox_queue: list[str] = []
        self._jukebox_timer: Optional[TimerHandle] = None
        self._floodguard_timer: Optional[TimerHandle] = None

    # --- identity and occupants ---------------------------------------

    @property
    def name(self) -> str:
        return self._name

    @property
    def index(self) -> int:
        return self._index

    @property
    def player_count(self) -> int:
        return self._player_count

    @property
    def characters_taken(self) -> list[int]:
        return list(self._characters_taken)

    @property
    def joined_ids(self) -> list[int]:
        return list(self._joined_ids)

    def client_left_area(self, char_id: int = -1, user_id: int = -1) -> None:
        """Count a client out and free its character."""
        self._player_count -= 1
        if char_id != -1:
            self._characters_taken = [c for c in self._characters_taken if c != char_id]
        self._joined_ids = [u for u in self._joined_ids if u != user_id]

    def client_joined_area(self, char_id: int = -1, user_id: int = -1) -> None:
        """Count a client in, take its character and send it the current music."""
        self._player_count += 1
        if char_id != -1:
            self._characters_taken.append(char_id)
        self._joined_ids.append(user_id)
        self._on_user_joined(self._index, user_id)
        self._on_client_packet(
            "MC", [self.current_music, "-1", self.server_name, "1"], user_id
        )

    def change_character(self, from_id: int = -1, to_id: int = -1) -> bool:
        """Swap a taken character; True only if ``to_id`` was newly taken."""
        if to_id in self._characters_taken:
            return False
        if from_id != -1:
            self._characters_taken = [c for c in self._characters_taken if c != from_id]
        if to_id != -1:
            self._characters_taken.append(to_id)
            return True
        return False

    # --- ownership, invitations and locks ------------------------------

    @property
    def owners(self) -> list[int]:
        return list(self._owners)

    @property
    def invited(self) -> list[int]:
        return list(self._invited)

    def add_owner(self, client_id: int) -> None:
        """Make a client an owner; owners are invited too."""
        self._owners.append(client_id)
        self._invited.append(client_id)

    def remove_owner(self, client_id: int) -> bool:
        """Drop an owner; True if the area had to be unlocked because none are left."""
        self._owners = [o for o in self._owners if o != client_id]
        self._invited = [i for i in self._invited if i != client_id]
        if not self._owners and self._lock_status is not LockStatus.FREE:
            self._lock_status = LockStatus.FREE
            return True
        return False

    def invite(self, client_id: int) -> bool:
        if client_id in self._invited:
            return False
        self._invited.append(client_id)
        return True

    def uninvite(self, client_id: int) -> bool:
        if client_id not in self._invited:
            return False
        self._invited = [i for i in self._invited if i != client_id]
        return True

    @property
    def lock_status(self) -> LockStatus:
        return self._lock_status

    def lock(self) -> None:
        self._lock_status = LockStatus.LOCKED

    def unlock(self) -> None:
        self._lock_status = LockStatus.FREE

    def spectatable(self) -> None:
        self._lock_status = LockStatus.SPECTATABLE

    @property
    def protected(self) -> bool:
        return self._protected

    # --- evidence ------------------------------------------------------

    @property
    def evidence(self) -> list[Evidence]:
        return [replace(item) for item in self._evidence]

    def _check_evidence_id(self, evidence_id: int) -> None:
        if not 0 <= evidence_id < len(self._evidence):
            raise IndexError(f"evidence id {evidence_id} out of range")

    def swap_evidence(self, first: int, second: int) -> None:
        self._check_evidence_id(first)
        self._check_evidence_id(second)
        self._evidence[first], self._evidence[second] = self._evidence[second], self._evidence[first]

    def append_evidence(self, evidence: Evidence) -> None:
        self._evidence.append(replace(evidence))

    def delete_evidence(self, evidence_id: int) -> None:
        self._check_evidence_id(evidence_id)
        del self._evidence[evidence_id]

    def replace_evidence(self, evidence_id: int, evidence: Evidence) -> None:
        self._check_evidence_id(evidence_id)
        self._evidence[evidence_id] = replace(evidence)

    # --- status and messages -------------------------------------------

    @property
    def status(self) -> Status:
        return self._status

    def change_status(self, new_status: str) -> bool:
        """Set the status from a ``/status`` argument; False if it names none."""
        try:
            self._status = status_from_command(new_status)
        except ValueError:
            return False
        return True

    @property
    def area_message(self) -> str:
        return self._area_message or DEFAULT_AREA_MESSAGE

    def change_area_message(self, message: str) -> None:
        self._area_message = message

    def clear_area_message(self) -> None:
        self._area_message = ""

    @property
    def send_area_message_on_join(self) -> bool:
        return self._send_area_message

    def toggle_area_message_join(self) -> None:
        self._send_area_message = not self._send_area_message

    @property
    def last_ic_message(self) -> list[str]:
        return list(self._last_ic_message)

    def update_last_ic_message(self, message: Iterable[str]) -> None:
        self._last_ic_message = list(message)

    # --- flags ---------------------------------------------------------

    @property
    def blankposting_allowed(self) -> bool:
        return self._blankposting_allowed

    def toggle_blankposting(self) -> None:
        self._blankposting_allowed = not self._blankposting_allowed

    @property
    def iniswap_allowed(self) -> bool:
        return self._iniswap_allowed

    def toggle_iniswap(self) -> None:
        self._iniswap_allowed = not self._iniswap_allowed

    @property
    def bg_locked(self) -> bool:
        return self._bg_locked

    def toggle_bg_lock(self) -> None:
        self._bg_locked = not self._bg_locked

    @property
    def showname_allowed(self) -> bool:
        return self._showname_allowed

    @property
    def force_immediate(self) -> bool:
        return self._force_immediate

    def toggle_immediate(self) -> None:
        self._force_immediate = not self._force_immediate

    @property
    def music_allowed(self) -> bool:
        return self._music_allowed

    def toggle_music(self) -> None:
        self._music_allowed = not self._music_allowed

    @property
    def ignore_bg_list(self) -> bool:
        return self._ignore_bg_list

    def toggle_ignore_bg_list(self) -> None:
        self._ignore_bg_list = not self._ignore_bg_list

    @property
    def wtce_allowed(self) -> bool:
        return self._wtce_allowed

    def toggle_wtce_allowed(self) -> None:
        self._wtce_allowed = not self._wtce_allowed

    @property
    def shout_allowed(self) -> bool:
        return self._shout_allowed

    def toggle_shout_allowed(self) -> None:
        self._shout_allowed = not self._shout_allowed

    # --- health bars ---------------------------------------------------

    @property
    def def_hp(self) -> int:
        return self._def_hp

    @property
    def pro_hp(self) -> int:
        return self._pro_hp

    def change_hp(self, side: Side, new_hp: int) -> None:
        """Set a side's confidence bar, clamped to 0..10."""
        value = min(max(0, new_hp), MAX_HP)
        if side is Side.DEFENCE:
            self._def_hp = value
        elif side is Side.PROSECUTOR:
            self._pro_hp = value

    # --- music and jukebox ---------------------------------------------

    def change_music(self, source: str, song: str) -> None:
        self.current_music = song
        self.music_played_by = source

    @property
    def jukebox_enabled(self) -> bool:
        return self._jukebox_enabled

    @property
    def jukebox_queue(self) -> list[str]:
        return list(self._jukebox_queue)

    @property
    def jukebox_queue_size(self) -> int:
        return len(self._jukebox_queue)

    def toggle_jukebox(self) -> None:
        """Switch the jukebox; turning it off empties the queue and stops playback."""
        self._jukebox_enabled = not self._jukebox_enabled
        if not self._jukebox_enabled:
            self._jukebox_queue.clear()
            self._stop_jukebox_timer()

    def _stop_jukebox_timer(self) -> None:
        if self._jukebox_timer is not None:
            self._jukebox_timer.cancel()
            self._jukebox_timer = None

    def _song_information(self, song: str) -> tuple[str, float]:
        if self._music_manager is None:
            raise RuntimeError("area has no music manager")
        return self._music_manager.song_information(song, self._index)

    def _play_jukebox(self, song: str) -> None:
        real_name, duration = self._song_information(song)
        self._on_area_packet("MC", [real_name, "-1"], self._index)
        self._stop_jukebox_timer()
        self._jukebox_timer = self._scheduler(duration, self.switch_jukebox_song)
        self.current_music = song
        self.music_played_by = JUKEBOX_PLAYER

    def add_jukebox_song(self, song: str) -> str:
        """Queue a song, starting playback if the queue was empty; returns a user message."""
        if song in self._jukebox_queue:
            return "Unable to add song. Song already in Jukebox."
        _, duration = self._song_information(song)
        if duration <= 0:
            return "Unable to add song. Duration shorter than 1."
        if not self._jukebox_queue:
            self._play_jukebox(song)
        self._jukebox_queue.append(song)
        return "Song added to Jukebox."

    def switch_jukebox_song(self) -> None:
        """Play a random queued song; the last remaining song repeats."""
        if not self._jukebox_queue:
            return
        if len(self._jukebox_queue) == 1:
            self._play_jukebox(self._jukebox_queue[0])
            return
        chosen = self._rng.randrange(len(self._jukebox_queue) - 1)
        song = self._jukebox_queue.pop(chosen)
        self._play_jukebox(song)

    # --- notecards -----------------------------------------------------

    def add_notecard(self, owner: str, notecard: Optional[str]) -> bool:
        """Store a notecard; ``None`` removes the owner's card and returns False."""
        if notecard is None:
            self._notecards.pop(owner, None)
            return False
        self._notecards[owner] = notecard
        return True

    def get_notecards(self) -> list[str]:
        """Return every notecard as ``owner: text\\n`` sorted by owner, then discard them."""
        cards = [f"{owner}: {text}\n" for owner, text in sorted(self._notecards.items())]
        self._notecards.clear()
        return cards

    # --- floodguard ----------------------------------------------------

    @property
    def message_allowed(self) -> bool:
        return self._message_allowed

    def start_message_floodguard(self, duration: int) -> None:
        """Reject IC messages for ``duration`` milliseconds."""
        self._message_allowed = False
        if self._floodguard_timer is not None:
            self._floodguard_timer.cancel()
        self._floodguard_timer = self._scheduler(duration / 1000, self.allow_message)

    def allow_message(self) -> None:
        self._message_allowed = True
        self._floodguard_timer = None