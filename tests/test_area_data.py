import random

import pytest

from akashi.area_data import AreaData
from akashi.area_types import AreaSettings, Evidence, LockStatus, Side, Status


class FakeHandle:
    def __init__(self):
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    def __init__(self):
        self.calls = []

    def __call__(self, delay, callback):
        handle = FakeHandle()
        self.calls.append((delay, callback, handle))
        return handle


class FakeMusic:
    def __init__(self, durations):
        self.durations = durations

    def song_information(self, song, area_index):
        return "cdn/" + song, self.durations.get(song, 0)


def make_area(durations=None, settings=None, rng=None):
    events = {"area": [], "client": [], "joined": []}
    scheduler = FakeScheduler()
    area = AreaData(
        "0:Basement",
        3,
        settings,
        FakeMusic(durations or {}),
        server_name="Server",
        on_area_packet=lambda h, c, i: events["area"].append((h, c, i)),
        on_client_packet=lambda h, c, u: events["client"].append((h, c, u)),
        on_user_joined=lambda i, u: events["joined"].append((i, u)),
        scheduler=scheduler,
        rng=rng or random.Random(1),
    )
    return area, events, scheduler


def test_defaults():
    area, _, _ = make_area()
    assert area.name == "Basement"
    assert area.index == 3
    assert area.document == "No document."
    assert area.area_message == "No area message set."
    assert area.current_music == "~stop.mp3"
    assert (area.def_hp, area.pro_hp) == (10, 10)
    assert area.status is Status.IDLE
    assert area.lock_status is LockStatus.FREE
    assert area.background == "gs4"


def test_settings_applied():
    area, _, _ = make_area(settings=AreaSettings(background="court", bg_locked=True))
    assert area.background == "court"
    assert area.bg_locked is True


def test_join_and_leave():
    area, events, _ = make_area()
    area.client_joined_area(5, 1)
    assert area.player_count == 1
    assert area.characters_taken == [5]
    assert area.joined_ids == [1]
    assert events["joined"] == [(3, 1)]
    assert events["client"] == [("MC", ["~stop.mp3", "-1", "Server", "1"], 1)]
    area.client_left_area(5, 1)
    assert area.player_count == 0
    assert area.characters_taken == []
    assert area.joined_ids == []


def test_change_character():
    area, _, _ = make_area()
    assert area.change_character(-1, 2) is True
    assert area.change_character(-1, 2) is False
    assert area.change_character(2, 4) is True
    assert area.characters_taken == [4]
    assert area.change_character(4, -1) is False
    assert area.characters_taken == []


def test_remove_owner_unlocks():
    area, _, _ = make_area()
    area.add_owner(7)
    assert area.invited == [7]
    area.lock()
    assert area.remove_owner(7) is True
    assert area.lock_status is LockStatus.FREE
    assert area.owners == []
    assert area.remove_owner(7) is False


def test_invite_uninvite():
    area, _, _ = make_area()
    assert area.invite(2) is True
    assert area.invite(2) is False
    assert area.uninvite(2) is True
    assert area.uninvite(2) is False


def test_lock_states():
    area, _, _ = make_area()
    area.spectatable()
    assert area.lock_status is LockStatus.SPECTATABLE
    area.unlock()
    assert area.lock_status is LockStatus.FREE


def test_evidence_operations():
    area, _, _ = make_area()
    first, second = Evidence("a", "x", "a.png"), Evidence("b", "y", "b.png")
    area.append_evidence(first)
    area.append_evidence(second)
    area.swap_evidence(0, 1)
    assert [e.name for e in area.evidence] == ["b", "a"]
    area.replace_evidence(0, Evidence("c"))
    area.delete_evidence(1)
    assert area.evidence == [Evidence("c")]
    with pytest.raises(IndexError):
        area.delete_evidence(4)


def test_change_status():
    area, _, _ = make_area()
    assert area.change_status("lfp") is True
    assert area.status is Status.LOOKING_FOR_PLAYERS
    assert area.change_status("nonsense") is False
    assert area.status is Status.LOOKING_FOR_PLAYERS


def test_change_hp_clamps():
    area, _, _ = make_area()
    area.change_hp(Side.DEFENCE, -3)
    area.change_hp(Side.PROSECUTOR, 99)
    assert area.def_hp == 0
    assert area.pro_hp == 10


def test_area_message_roundtrip():
    area, _, _ = make_area()
    area.change_area_message("hello")
    assert area.area_message == "hello"
    area.clear_area_message()
    assert area.area_message == "No area message set."


def test_notecards():
    area, _, _ = make_area()
    assert area.add_notecard("Zak", "note") is True
    assert area.add_notecard("Adrian", "other") is True
    assert area.add_notecard("Zak", None) is False
    assert area.get_notecards() == ["Adrian: other\n"]
    assert area.get_notecards() == []


@pytest.mark.parametrize(
    "toggle, attribute",
    [
        ("toggle_blankposting", "blankposting_allowed"),
        ("toggle_iniswap", "iniswap_allowed"),
        ("toggle_bg_lock", "bg_locked"),
        ("toggle_immediate", "force_immediate"),
        ("toggle_music", "music_allowed"),
        ("toggle_ignore_bg_list", "ignore_bg_list"),
        ("toggle_area_message_join", "send_area_message_on_join"),
        ("toggle_wtce_allowed", "wtce_allowed"),
        ("toggle_shout_allowed", "shout_allowed"),
        ("toggle_jukebox", "jukebox_enabled"),
    ],
)
def test_toggles_flip(toggle, attribute):
    area, _, _ = make_area()
    before = getattr(area, attribute)
    getattr(area, toggle)()
    assert getattr(area, attribute) is (not before)
    getattr(area, toggle)()
    assert getattr(area, attribute) is before


def test_change_music_and_last_message():
    area, _, _ = make_area()
    area.change_music("Phoenix", "song.opus")
    assert (area.music_played_by, area.current_music) == ("Phoenix", "song.opus")
    area.update_last_ic_message(["MS", "x"])
    assert area.last_ic_message == ["MS", "x"]


def test_jukebox_add():
    area, events, scheduler = make_area({"a.opus": 30, "b.opus": 0})
    assert area.add_jukebox_song("a.opus") == "Song added to Jukebox."
    assert events["area"] == [("MC", ["cdn/a.opus", "-1"], 3)]
    assert scheduler.calls[0][0] == 30
    assert area.current_music == "a.opus"
    assert area.music_played_by == "Jukebox"
    assert area.add_jukebox_song("a.opus") == "Unable to add song. Song already in Jukebox."
    assert area.add_jukebox_song("b.opus") == "Unable to add song. Duration shorter than 1."
    assert area.jukebox_queue_size == 1


def test_jukebox_single_song_repeats():
    area, events, scheduler = make_area({"a.opus": 30})
    area.add_jukebox_song("a.opus")
    scheduler.calls[-1][1]()
    assert area.jukebox_queue == ["a.opus"]
    assert len(events["area"]) == 2
    assert scheduler.calls[0][2].cancelled is True


def test_jukebox_switch_never_picks_last():
    songs = {"a.opus": 10, "b.opus": 20, "c.opus": 30}
    area, _, _ = make_area(songs)
    for song in songs:
        area.add_jukebox_song(song)
    area.switch_jukebox_song()
    assert area.jukebox_queue_size == 2
    assert area.current_music in {"a.opus", "b.opus"}
    assert area.current_music not in area.jukebox_queue
    assert "c.opus" in area.jukebox_queue


def test_toggle_jukebox_off_clears_queue():
    area, _, scheduler = make_area({"a.opus": 30}, settings=AreaSettings(jukebox_enabled=True))
    area.add_jukebox_song("a.opus")
    area.toggle_jukebox()
    assert area.jukebox_queue == []
    assert scheduler.calls[0][2].cancelled is True


def test_jukebox_without_music_manager():
    area = AreaData("1:Lobby", 1, scheduler=FakeScheduler())
    with pytest.raises(RuntimeError):
        area.add_jukebox_song("a.opus")


def test_message_floodguard():
    area, _, scheduler = make_area()
    assert area.message_allowed is True
    area.start_message_floodguard(500)
    assert area.message_allowed is False
    delay, callback, _ = scheduler.calls[-1]
    assert delay == pytest.approx(0.5)
    callback()
    assert area.message_allowed is True


def test_testimony_and_judgelog_attached():
    area, _, _ = make_area()
    area.testimony.record_statement(["title"])
    area.judgelog.append("entry")
    assert len(area.testimony) == 1
    assert area.judgelog.entries == ["entry"]