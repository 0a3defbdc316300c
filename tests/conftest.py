"""
Shared test fixtures for the Ignomi engine test suite.

Settings and commands use real TOML files under tmp_path. The system
clipboard and the app loader are replaced by in-memory stand-ins; process
launching is patched per test.
"""

import pytest
import toml

from ignomi_engine.config import load_settings
from ignomi_engine.services.app_index import AppEntry
from ignomi_engine.session import Session


class FakeClipboard:
    """In-memory system clipboard."""

    def __init__(self, content=None):
        self.content = content
        self.writes = []
        self.reads = 0

    def read(self):
        self.reads += 1
        return self.content

    def write(self, text):
        self.writes.append(text)
        self.content = text


def make_app(app_id, name, exec_str=None, keywords=(), description=None):
    """Create an AppEntry with a predictable exec line."""
    return AppEntry(
        id=app_id,
        name=name,
        exec=exec_str or app_id.lower(),
        description=description,
        keywords=tuple(keywords),
    )


@pytest.fixture
def fake_clipboard():
    return FakeClipboard()


@pytest.fixture
def apps():
    """Mutable app list; tests may change it before reload()."""
    return [
        make_app("calculator", "Calculator", "gnome-calculator", keywords=("math",)),
        make_app("camera", "Camera", "snapshot %U", keywords=("photo", "webcam")),
        make_app("firefox", "Firefox", "firefox %u", keywords=("browser", "web")),
    ]


@pytest.fixture
def tmp_settings(tmp_path):
    """Create a real settings TOML file with all sections."""
    settings_path = tmp_path / "settings.toml"
    data = {
        "search": {"max_query_length": 64, "max_app_results": 30, "fuzzy_threshold": 60},
        "clipboard": {"history_size": 3, "max_results": 10, "preview_chars": 20},
        "apps": {"dirs": []},
        "commands": {"path": str(tmp_path / "commands.toml")},
    }
    settings_path.write_text(toml.dumps(data))
    return settings_path


@pytest.fixture
def tmp_commands(tmp_path):
    """Create a real commands TOML file with test entries."""
    commands_path = tmp_path / "commands.toml"
    data = {
        "commands": {
            "lock": {
                "description": "Lock screen",
                "exec": "hyprlock",
            },
            "suspend": {
                "description": "Suspend system",
                "exec": "systemctl suspend",
            },
        }
    }
    commands_path.write_text(toml.dumps(data))
    return commands_path


@pytest.fixture
def session(apps, fake_clipboard, tmp_settings, tmp_commands):
    """Session with the default providers over in-memory apps and clipboard."""
    return Session.create_default(
        settings=load_settings(tmp_settings),
        app_loader=lambda: list(apps),
        system_clipboard=fake_clipboard,
        commands_file=tmp_commands,
    )
