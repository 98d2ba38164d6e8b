# akashi

Building blocks for an Attorney Online 2 server. The package holds the state of
the server's areas, the access roles and their permissions, aliases and
permission overrides for chat commands, and the advertisement sent to a master
server. It uses only the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `akashi.acl_roles`

- `Permission` is an `IntFlag` of rights such as `KICK`, `BAN`, `CM` and
  `JUKEBOX`. `SUPER` has every bit set.
- `ACLRole` is a dataclass that holds a `permissions` value.
  `check_permission` returns True when every bit asked for is granted, and it
  always returns True for `Permission.NONE`. `set_permission(permission, mode)`
  grants or revokes a permission.
- `permission_caption` and `permission_from_caption` convert between a flag and
  its configuration caption (`"kick"`, `"gamemaster"`, `"lock_background"` and
  so on). Both raise `ValueError` for unknown input.
- `ACLRolesHandler` stores roles under upper-case ids. The built-in roles
  `NONE` and `SUPER` are read-only: `insert_role` and `remove_role` refuse
  them and return False. `get_role_by_id` returns a copy. An unknown id gives
  a role with no permissions.
  - `load_file` replaces the configurable roles with the sections of an INI
    file. Each permission caption is read as a boolean key. A missing file
    reads as empty. A malformed file raises `ValueError`. Sections named after
    read-only roles are skipped, and so is a `General` section.
  - `save_file` writes one section per role. A role that has `SUPER` is
    written as `super=true` alone.

### `akashi.command_extension`

- `CommandExtension` holds a command name, lower-case `aliases` and a list of
  `permissions`.
  - `check_command_name_and_alias` matches the name or any alias, ignoring
    case.
  - `get_permissions(default_permissions)` returns the configured permissions,
    or the defaults when none are configured.
  - `set_permissions_by_caption` takes captions and skips, with a warning, any
    that are unknown.
- `CommandExtensionCollection` loads extensions from an INI file with
  `load_file`. Each section is a command, with space-separated `aliases` and
  `permissions` keys.
  - An alias already claimed by an earlier section is dropped.
  - `set_command_name_whitelist` limits which commands may be extended. An
    empty whitelist allows all commands.
  - `contains_extension` and `get_extension` look up an extension by its
    lower-case command name. `get_extension` returns an empty extension when
    none exists. `extensions` lists them all.

### `akashi.advertiser`

- `AdvertiserSettings` holds the port, name, hostname, description, web client
  port, master-server URL, a debug flag and a Cloudflare mode flag. In
  Cloudflare mode the advertised web client port is 80.
- `Advertiser.build_payload` returns the JSON object. `ip`, `ws_port` and
  `description` are left out when they are empty or `-1`.
- `Advertiser.advertise` POSTs the payload with `urllib`. It returns False when
  the URL is not valid or the server cannot be reached, and True when the
  master server answered. An alternative opener may be passed to the
  constructor.
- `update_player_count` sets the player count. `update_settings` takes over the
  name, hostname, description, URL and debug flag. Ports stay as they were.

### `akashi.area_types`

- The enums `Status`, `LockStatus`, `EvidenceMod`, `TestimonyRecording`,
  `TestimonyProgress` and `Side`.
- `Evidence`, a dataclass with `name`, `description` and `image` fields.
- `status_from_command` maps a `/status` argument (`idle`, `rp`, `casing`,
  `lfp`, `looking-for-players`, `recess`, `gaming`) to a `Status` and raises
  `ValueError` for any other text. `Status.arup_text` gives the name with
  dashes in place of underscores.
- `AreaSettings` holds the per-area options. `parse_area_settings` builds one
  from a mapping such as a `configparser` section and fills in defaults, for
  example background `gs4` and evidence mod `FFA`.
- `split_area_name` strips the `index:` prefix from a configured area name.

### `akashi.testimony`

- `Testimony` records statements. The first statement is the title.
  - It has `record_statement`, `add_statement`, `replace_statement` and
    `remove_statement`. Positions out of range raise `IndexError`.
  - `restart` switches to playback at the first statement. `clear` empties the
    testimony and stops the recorder.
  - `jump_to_statement` returns the statement and a `TestimonyProgress`. A jump
    past the end loops to the first statement, and a jump before the first
    stays there.
- `Judgelog` keeps the ten most recent entries, oldest first.

### `akashi.area_data`

`AreaData` is a single area. It tracks:

- the player count, the characters taken and the ids of joined clients;
- owners and invitations, and the lock status (`lock`, `unlock`,
  `spectatable`);
- evidence, status, the area message and the document;
- the defence and prosecution health bars, clamped to 0–10;
- current music, notecards and the last IC message;
- toggles for blankposting, iniswap, background lock, immediate text, music,
  the background list, WT/CE and shouts;
- a `testimony` and a `judgelog`.

Outgoing packets are handed to the callbacks `on_area_packet` and
`on_client_packet` as a header, a list of fields and a target id. Joins are
reported through `on_user_joined`.

The jukebox (`add_jukebox_song`, `switch_jukebox_song`, `toggle_jukebox`)
needs a music manager object with a `song_information(song, area_index)`
method that returns the playable name and the duration in seconds. Without one
it raises `RuntimeError`.

The jukebox and `start_message_floodguard` (milliseconds) use a scheduler. By
default the scheduler is a daemon `threading.Timer`, and a different one may
be passed in.

## Example

```python
from akashi.acl_roles import ACLRolesHandler, ACLRole, Permission

handler = ACLRolesHandler()
role = ACLRole()
role.set_permission(Permission.KICK, True)
handler.insert_role("moderator", role)

assert handler.role_exists("MODERATOR")
assert handler.get_role_by_id("moderator").check_permission(Permission.KICK)
assert not handler.insert_role("super", ACLRole())  # read-only role
```

```python
from akashi.area_data import AreaData
from akashi.area_types import LockStatus

area = AreaData("0:Courtroom", 0)
area.add_owner(3)
area.lock()
assert area.remove_owner(3)          # last owner gone: area is unlocked
assert area.lock_status is LockStatus.FREE
```

## What this package does not do

- It does not accept network connections: there is no TCP or WebSocket
  listener, no client objects and no packet parsing.
- It does not carry out chat commands. `CommandExtension` only describes
  aliases and permissions.
- It does not read the server's main configuration, character, music or
  background lists. `AreaData` takes its options as an `AreaSettings` object.
- It does not store users, bans or passwords.
- It does not include a music manager or a program to start a server.