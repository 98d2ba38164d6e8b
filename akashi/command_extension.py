"""Aliases and permission overrides for chat commands."""

from __future__ import annotations

import logging
from typing import Iterable

from akashi.acl_roles import Permission, PathType, _groups, _read_ini, permission_from_caption

logger = logging.getLogger(__name__)


class CommandExtension:
    """Extra names and permissions configured for one command."""

    def __init__(
        self,
        command_name: str = "",
        aliases: Iterable[str] = (),
        permissions: Iterable[Permission] = (),
    ) -> None:
        self.command_name = command_name
        self.aliases = aliases
        self.permissions = list(permissions)

    @property
    def aliases(self) -> list[str]:
        return list(self._aliases)

    @aliases.setter
    def aliases(self, aliases: Iterable[str]) -> None:
        self._aliases = [alias.lower() for alias in aliases]

    def check_command_name_and_alias(self, alias: str) -> bool:
        """True if ``alias`` is the command name or one of its aliases, ignoring case."""
        target = alias.lower()
        return any(name.lower() == target for name in (self.command_name, *self._aliases))

    def get_permissions(self, default_permissions: Iterable[Permission] = ()) -> list[Permission]:
        """The configured permissions, or ``default_permissions`` when none are set."""
        return list(self.permissions) if self.permissions else list(default_permissions)

    def set_permissions_by_caption(self, captions: Iterable[str]) -> None:
        """Set the permissions from their captions, skipping unknown ones."""
        permissions = []
        for caption in captions:
            try:
                permissions.append(permission_from_caption(caption.lower()))
            except ValueError:
                logger.warning("permission %s does not exist", caption)
        self.permissions = permissions


class CommandExtensionCollection:
    """All command extensions, keyed by lower-case command name."""

    def __init__(self) -> None:
        self._whitelist: list[str] = []
        self._extensions: dict[str, CommandExtension] = {}

    def set_command_name_whitelist(self, command_names: Iterable[str]) -> None:
        """Restrict which commands may be extended; an empty list allows all."""
        self._whitelist = [name.lower() for name in command_names]

    @property
    def extensions(self) -> list[CommandExtension]:
        return list(self._extensions.values())

    def contains_extension(self, command_name: str) -> bool:
        return command_name in self._extensions

    def get_extension(self, command_name: str) -> CommandExtension:
        """The extension of ``command_name``, or an empty one if there is none."""
        return self._extensions.get(command_name, CommandExtension())

    def load_file(self, file_name: PathType) -> None:
        """Replace the extensions with those stored in an INI file."""
        parser = _read_ini(file_name)
        self._extensions.clear()
        recorded_aliases: list[str] = []
        for group in _groups(parser):
            command_name = group.lower()
            if self._whitelist and command_name not in self._whitelist:
                logger.warning("command %s cannot be extended; does not exist", command_name)
                continue
            if command_name in self._extensions:
                logger.warning("command extension %s already exists", command_name)
                continue

            section = parser[group]
            aliases = [alias.lower() for alias in section.get("aliases", "").split(" ") if alias]
            for recorded in recorded_aliases:
                if recorded in aliases:
                    logger.warning("command alias %s was already defined", recorded)
                    aliases = [alias for alias in aliases if alias != recorded]
            recorded_aliases.extend(aliases)

            extension = CommandExtension(command_name, aliases)
            extension.set_permissions_by_caption(
                caption for caption in section.get("permissions", "").split(" ") if caption
            )
            self._extensions[command_name] = extension