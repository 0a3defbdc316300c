"""
App Index - Installed application list and process launching.

The default loader scans freedesktop .desktop files in the XDG
application directories. Any callable returning AppEntry objects can be
used instead (tests, other platforms).
"""

import os
import shlex
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, Optional

from loguru import logger

from ..errors import LaunchError

# Desktop entry field codes that expand to files/URLs/icons at launch time
FIELD_CODES = ("%f", "%F", "%u", "%U", "%i", "%c", "%k", "%d", "%D", "%n", "%N", "%v", "%m")


@dataclass(frozen=True)
class AppEntry:
    """One launchable application."""
    id: str
    name: str
    exec: str
    icon: Optional[str] = None
    description: Optional[str] = None
    keywords: tuple[str, ...] = field(default_factory=tuple)


AppLoader = Callable[[], Iterable[AppEntry]]


def default_app_dirs() -> list[Path]:
    """Standard XDG application directories, user dir first."""
    data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
    data_dirs = os.environ.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"

    dirs = [Path(data_home) / "applications"]
    dirs.extend(Path(d) / "applications" for d in data_dirs.split(":") if d)
    dirs.append(Path.home() / ".local/share/flatpak/exports/share/applications")
    dirs.append(Path("/var/lib/flatpak/exports/share/applications"))
    dirs.append(Path("/var/lib/snapd/desktop/applications"))
    return dirs


def parse_desktop_file(path: Path) -> Optional[AppEntry]:
    """
    Parse the [Desktop Entry] group of a .desktop file.

    Returns:
        AppEntry, or None for hidden, NoDisplay, non-Application or
        incomplete entries
    """
    try:
        text = path.read_text(encoding="utf-8", errors="ignore")
    except OSError as e:
        logger.debug(f"Could not read {path}: {e}")
        return None

    values = {}
    in_entry = False
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("["):
            in_entry = line == "[Desktop Entry]"
            continue
        if in_entry and "=" in line:
            key, _, value = line.partition("=")
            # Unlocalized keys only; Name[de]= etc. are skipped
            values.setdefault(key.strip(), value.strip())

    if values.get("Type", "Application") != "Application":
        return None
    if values.get("NoDisplay", "").lower() == "true" or values.get("Hidden", "").lower() == "true":
        return None

    name = values.get("Name")
    exec_str = values.get("Exec")
    if not name or not exec_str:
        return None

    keywords = [k.strip().lower() for k in values.get("Keywords", "").split(";") if k.strip()]
    keywords.extend(word.lower() for word in name.split())

    return AppEntry(
        id=path.stem,
        name=name,
        exec=exec_str,
        icon=values.get("Icon") or None,
        description=values.get("Comment") or None,
        keywords=tuple(dict.fromkeys(keywords)),
    )


def scan_desktop_entries(dirs: Optional[Iterable[Path]] = None) -> list[AppEntry]:
    """Scan application directories. Earlier directories win on duplicate IDs."""
    seen = {}
    for directory in dirs if dirs is not None else default_app_dirs():
        directory = Path(directory).expanduser()
        if not directory.is_dir():
            continue
        for path in sorted(directory.rglob("*.desktop")):
            entry = parse_desktop_file(path)
            if entry and entry.id not in seen:
                seen[entry.id] = entry
    return list(seen.values())


class AppIndex:
    """
    Name-sorted, immutable snapshot of installed applications.

    reload() builds a new snapshot and swaps it in with one assignment, so
    readers see either the old or the new list, never a partial one.
    """

    def __init__(self, loader: Optional[AppLoader] = None):
        self._loader = loader or scan_desktop_entries
        self._entries: tuple[AppEntry, ...] = ()
        self.reload()

    @property
    def entries(self) -> tuple[AppEntry, ...]:
        return self._entries

    def reload(self) -> None:
        entries = sorted(self._loader(), key=lambda e: (e.name.lower(), e.id))
        self._entries = tuple(entries)
        logger.debug(f"Indexed {len(self._entries)} applications")

    def get(self, app_id: str) -> Optional[AppEntry]:
        for entry in self._entries:
            if entry.id == app_id:
                return entry
        return None


def build_command(exec_str: str) -> list[str]:
    """Strip desktop field codes and split an Exec line into argv."""
    cleaned = exec_str.replace("%%", "\0")
    for code in FIELD_CODES:
        cleaned = cleaned.replace(code, "")
    cleaned = cleaned.replace("\0", "%")
    try:
        return shlex.split(cleaned)
    except ValueError as e:
        raise LaunchError(f"Malformed command line: {e}") from e


def launch(name: str, exec_str: str) -> None:
    """
    Start a process detached from the engine. Does not wait for it.

    Raises:
        LaunchError: empty command, missing binary or spawn failure
    """
    argv = build_command(exec_str)
    if not argv:
        raise LaunchError(f"No command to launch for {name}")

    try:
        subprocess.Popen(
            argv,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            start_new_session=True,
        )
    except FileNotFoundError as e:
        raise LaunchError(f"Failed to launch {name}: {argv[0]} not found") from e
    except OSError as e:
        raise LaunchError(f"Failed to launch {name}: {e}") from e

    logger.debug(f"Launched {name}: {argv}")
