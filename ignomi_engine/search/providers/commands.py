"""
Command Provider - Launcher meta-commands, user commands and aliases.

Built-in commands open the settings surface or quit the host application.
User commands and aliases are read from commands.toml:

    [commands.lock]
    description = "Lock screen"
    exec = "hyprlock"

    [commands.suspend]
    description = "Suspend system"
    exec = "systemctl suspend"

    [aliases.ff]
    name = "Firefox private window"
    target = "firefox --private-window"

Usage: "!" lists every command, "!lock" filters; plain queries match
command names and descriptions. An alias fires on its exact keyword
("ff") and also matches by keyword or name substring.
"""

import subprocess
from pathlib import Path
from typing import Optional

import toml
from loguru import logger

from ..candidate import Candidate, CandidateKind, CommandPayload, Outcome
from ..provider import Match, Provider

BANG_RELEVANCE = 0.95
PREFIX_RELEVANCE = 0.85
SUBSTRING_RELEVANCE = 0.55
ALIAS_KEYWORD_RELEVANCE = 0.95

SETTINGS_ID = "ignomi:settings"
QUIT_ID = "ignomi:quit"

BUILTIN_COMMANDS = (
    CommandPayload(id=SETTINGS_ID, name="Settings", description="Open launcher settings"),
    CommandPayload(id=QUIT_ID, name="Quit Ignomi", description="Close the launcher completely"),
)


def _load_table(path: Optional[Path], section: str) -> dict:
    if path is None or not Path(path).exists():
        return {}

    try:
        data = toml.load(path)
    except (OSError, toml.TomlDecodeError):
        logger.exception(f"Failed to load {section} from {path}")
        return {}

    table = data.get(section, {})
    if not isinstance(table, dict):
        logger.warning(f"Ignoring {path}: '{section}' is not a table")
        return {}
    return table


def _has_text(entry, field: str) -> bool:
    return isinstance(entry, dict) and isinstance(entry.get(field), str) and bool(entry[field].strip())


def load_commands(path: Optional[Path]) -> dict:
    """Load user commands from a TOML file, skipping malformed entries."""
    commands = _load_table(path, "commands")
    for name, cmd in list(commands.items()):
        if not _has_text(cmd, "exec"):
            logger.warning(f"Skipping malformed command '{name}': missing 'exec' field")
            del commands[name]
    return commands


def load_aliases(path: Optional[Path]) -> dict:
    """Load aliases ({keyword: {name, target}}), skipping malformed entries."""
    aliases = _load_table(path, "aliases")
    for keyword, alias in list(aliases.items()):
        if " " in keyword.strip() or not keyword.strip():
            logger.warning(f"Skipping alias with invalid keyword {keyword!r}")
            del aliases[keyword]
        elif not _has_text(alias, "target"):
            logger.warning(f"Skipping malformed alias '{keyword}': missing 'target' field")
            del aliases[keyword]
    return aliases


class CommandProvider(Provider):
    """Built-in meta-commands plus commands.toml commands and aliases."""

    name = "commands"
    kind = CandidateKind.COMMAND
    priority = 300

    def __init__(self, commands_file: Optional[Path] = None):
        self.commands_file = commands_file
        self.commands: tuple[CommandPayload, ...] = ()
        self.aliases: tuple[CommandPayload, ...] = ()
        self.reload()

    def reload(self) -> None:
        user = tuple(
            CommandPayload(
                id=f"user:{name}",
                name=name,
                description=cmd.get("description", ""),
                exec=cmd["exec"],
            )
            for name, cmd in sorted(load_commands(self.commands_file).items())
        )
        self.commands = BUILTIN_COMMANDS + user
        self.aliases = tuple(
            CommandPayload(
                id=f"alias:{keyword}",
                name=str(alias.get("name") or keyword),
                description=alias["target"],
                exec=alias["target"],
                keyword=keyword.strip(),
            )
            for keyword, alias in sorted(load_aliases(self.commands_file).items())
        )

    def match(self, query: str) -> list[Match]:
        q = query.strip()
        if not q:
            return []

        commands = self.commands
        if q.startswith("!"):
            term = q.lstrip("!").strip().lower()
            return [
                (self._to_candidate(cmd), BANG_RELEVANCE)
                for cmd in commands
                if not term or term in cmd.name.lower() or term in cmd.description.lower()
            ]

        q = q.lower()
        first_word = q.split()[0]
        exact, prefix, substring = [], [], []
        for alias in self.aliases:
            keyword = alias.keyword.lower()
            if keyword == first_word:
                exact.append(alias)
            elif q in keyword or q in alias.name.lower():
                substring.append(alias)
        for cmd in commands:
            name = cmd.name.lower()
            if name.startswith(q):
                prefix.append(cmd)
            elif q in name or q in cmd.description.lower():
                substring.append(cmd)

        return (
            [(self._to_candidate(cmd), ALIAS_KEYWORD_RELEVANCE) for cmd in exact]
            + [(self._to_candidate(cmd), PREFIX_RELEVANCE) for cmd in prefix]
            + [(self._to_candidate(cmd), SUBSTRING_RELEVANCE) for cmd in substring]
        )

    def execute(self, candidate: Candidate) -> Outcome:
        cmd = candidate.payload
        if cmd.id == SETTINGS_ID:
            return Outcome.open_settings()
        if cmd.id == QUIT_ID:
            return Outcome.quit()
        if not cmd.exec:
            return Outcome.error(f"Command '{cmd.name}' has nothing to run")

        try:
            subprocess.Popen(
                cmd.exec,
                shell=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            logger.exception(f"Failed to execute command: {cmd.exec}")
            return Outcome.error(f"Failed to run {cmd.name}: {e}")
        return Outcome.success()

    def _to_candidate(self, cmd: CommandPayload) -> Candidate:
        return Candidate(kind=CandidateKind.COMMAND, payload=cmd)
