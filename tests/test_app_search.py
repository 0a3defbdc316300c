"""
Tests for the AppProvider and the app index.

Apps come from an in-memory loader; desktop-file parsing is tested with
real files under tmp_path. Process launching is patched.
"""

from unittest.mock import patch

import pytest

from ignomi_engine.errors import LaunchError
from ignomi_engine.search.candidate import CandidateKind, OutcomeKind
from ignomi_engine.search.providers.apps import (
    ALIAS_RELEVANCE,
    FUZZY_RELEVANCE,
    PREFIX_RELEVANCE,
    SUBSTRING_RELEVANCE,
    AppProvider,
)
from ignomi_engine.services.app_index import build_command, parse_desktop_file, scan_desktop_entries

from conftest import make_app


def _names(matches):
    return [candidate.payload.name for candidate, _hint in matches]


class TestAppMatching:
    """Test tiered matching and relevance hints."""

    def test_prefix_beats_unrelated(self, apps):
        provider = AppProvider(loader=lambda: apps)
        matches = provider.match("cam")
        assert _names(matches)[0] == "Camera"
        assert matches[0][1] == PREFIX_RELEVANCE

    def test_substring_match(self, apps):
        provider = AppProvider(loader=lambda: apps)
        matches = provider.match("fox")
        assert _names(matches) == ["Firefox"]
        assert matches[0][1] == SUBSTRING_RELEVANCE

    def test_keyword_match(self, apps):
        provider = AppProvider(loader=lambda: apps)
        matches = provider.match("webcam")
        assert _names(matches)[0] == "Camera"
        assert matches[0][1] == ALIAS_RELEVANCE

    def test_tiers_are_ordered(self):
        apps = [
            make_app("a", "Text Editor"),
            make_app("b", "Editor Pro"),
            make_app("c", "Writer", keywords=("editor",)),
        ]
        provider = AppProvider(loader=lambda: apps)
        matches = provider.match("editor")
        assert _names(matches) == ["Editor Pro", "Text Editor", "Writer"]
        hints = [hint for _candidate, hint in matches]
        assert hints == sorted(hints, reverse=True)

    def test_fuzzy_match_finds_typo(self, apps):
        provider = AppProvider(loader=lambda: apps)
        matches = provider.match("firefx")
        assert _names(matches)[0] == "Firefox"
        assert 0 < matches[0][1] <= FUZZY_RELEVANCE

    def test_case_insensitive(self, apps):
        provider = AppProvider(loader=lambda: apps)
        assert _names(provider.match("CAMERA"))[0] == "Camera"

    def test_empty_query_matches_nothing(self, apps):
        provider = AppProvider(loader=lambda: apps)
        assert provider.match("") == []
        assert provider.match("  ") == []

    def test_max_results(self):
        apps = [make_app(f"app{i}", f"App {i:02d}") for i in range(25)]
        provider = AppProvider(loader=lambda: apps, max_results=10)
        assert len(provider.match("app")) == 10

    def test_candidates_carry_app_payload(self, apps):
        provider = AppProvider(loader=lambda: apps)
        candidate, _hint = provider.match("firefox")[0]
        assert candidate.kind is CandidateKind.APP
        assert candidate.payload.id == "firefox"
        assert candidate.payload.exec == "firefox %u"

    def test_match_does_not_mutate_index(self, apps):
        provider = AppProvider(loader=lambda: apps)
        before = provider.index.entries
        provider.match("cam")
        assert provider.index.entries is before


class TestAppReload:
    """Test rebuilding the index from the loader."""

    def test_reload_picks_up_new_apps(self, apps):
        provider = AppProvider(loader=lambda: list(apps))
        assert provider.match("terminal") == []
        apps.append(make_app("terminal", "Terminal"))
        provider.reload()
        assert _names(provider.match("terminal")) == ["Terminal"]

    def test_index_is_sorted_by_name(self):
        apps = [make_app("z", "zeta"), make_app("a", "Alpha")]
        provider = AppProvider(loader=lambda: apps)
        assert [e.name for e in provider.index.entries] == ["Alpha", "zeta"]


class TestAppExecute:
    """Test launching with subprocess.Popen patched."""

    def test_launch_success(self, apps):
        provider = AppProvider(loader=lambda: apps)
        candidate, _hint = provider.match("camera")[0]
        with patch("ignomi_engine.services.app_index.subprocess.Popen") as popen:
            outcome = provider.execute(candidate)
        assert outcome.kind is OutcomeKind.SUCCESS
        assert popen.call_args[0][0] == ["snapshot"]
        assert popen.call_args[1]["start_new_session"] is True

    def test_missing_binary_is_error(self, apps):
        provider = AppProvider(loader=lambda: apps)
        candidate, _hint = provider.match("camera")[0]
        with patch(
            "ignomi_engine.services.app_index.subprocess.Popen",
            side_effect=FileNotFoundError("snapshot"),
        ):
            outcome = provider.execute(candidate)
        assert outcome.kind is OutcomeKind.ERROR
        assert "not found" in outcome.message

    def test_empty_exec_is_error(self):
        provider = AppProvider(loader=lambda: [make_app("x", "Broken", exec_str="%U")])
        candidate, _hint = provider.match("broken")[0]
        with patch("ignomi_engine.services.app_index.subprocess.Popen") as popen:
            outcome = provider.execute(candidate)
        assert outcome.kind is OutcomeKind.ERROR
        popen.assert_not_called()


class TestBuildCommand:
    """Test turning desktop Exec lines into argv lists."""

    def test_strips_field_codes(self):
        assert build_command("firefox %u") == ["firefox"]
        assert build_command("code --new-window %F") == ["code", "--new-window"]

    def test_keeps_quoted_arguments(self):
        assert build_command('sh -c "echo hi"') == ["sh", "-c", "echo hi"]

    def test_escaped_percent(self):
        assert build_command("printf 100%%") == ["printf", "100%"]

    def test_malformed_quotes(self):
        with pytest.raises(LaunchError):
            build_command('sh -c "unterminated')


class TestDesktopEntries:
    """Test .desktop parsing with real files."""

    def _write(self, directory, name, body):
        path = directory / f"{name}.desktop"
        path.write_text(body)
        return path

    def test_parses_entry(self, tmp_path):
        path = self._write(tmp_path, "org.gnome.Calculator", (
            "[Desktop Entry]\n"
            "Type=Application\n"
            "Name=Calculator\n"
            "Name[de]=Rechner\n"
            "Comment=Perform calculations\n"
            "Exec=gnome-calculator\n"
            "Icon=accessories-calculator\n"
            "Keywords=math;arithmetic;\n"
            "\n"
            "[Desktop Action new]\n"
            "Name=Something else\n"
        ))
        entry = parse_desktop_file(path)
        assert entry.id == "org.gnome.Calculator"
        assert entry.name == "Calculator"
        assert entry.exec == "gnome-calculator"
        assert entry.icon == "accessories-calculator"
        assert "math" in entry.keywords
        assert "calculator" in entry.keywords

    def test_skips_hidden_and_nodisplay(self, tmp_path):
        hidden = self._write(tmp_path, "hidden", "[Desktop Entry]\nName=H\nExec=h\nHidden=true\n")
        nodisplay = self._write(tmp_path, "nd", "[Desktop Entry]\nName=N\nExec=n\nNoDisplay=true\n")
        assert parse_desktop_file(hidden) is None
        assert parse_desktop_file(nodisplay) is None

    def test_skips_links_and_incomplete(self, tmp_path):
        link = self._write(tmp_path, "link", "[Desktop Entry]\nType=Link\nName=L\nURL=http://x\n")
        no_exec = self._write(tmp_path, "noexec", "[Desktop Entry]\nName=X\n")
        assert parse_desktop_file(link) is None
        assert parse_desktop_file(no_exec) is None

    def test_scan_prefers_earlier_directory(self, tmp_path):
        user_dir = tmp_path / "user"
        system_dir = tmp_path / "system"
        user_dir.mkdir()
        system_dir.mkdir()
        self._write(user_dir, "app", "[Desktop Entry]\nName=Mine\nExec=mine\n")
        self._write(system_dir, "app", "[Desktop Entry]\nName=Theirs\nExec=theirs\n")
        self._write(system_dir, "other", "[Desktop Entry]\nName=Other\nExec=other\n")

        entries = scan_desktop_entries([user_dir, system_dir, tmp_path / "missing"])
        by_id = {e.id: e for e in entries}
        assert by_id["app"].name == "Mine"
        assert "other" in by_id
