"""Format validation, security classification and normalization of paths."""

import pytest

from pathsift.core.types import PathComponents
from pathsift.validation import (
    detect_path_type,
    get_path_components,
    is_path_safe,
    is_valid_path,
    normalize_path,
    validate_path_format,
)

pytestmark = pytest.mark.unit


# --- Security classification ---


@pytest.mark.parametrize(
    ("path", "safe"),
    [
        ("../../etc/passwd", False),
        ("./config/settings.json", True),
        ("/etc/passwd", False),
        ("/home/user/etc/config.json", True),
        ("/ETC/shadow", False),
        ("//etc//passwd", False),
        ("/etc", False),
        ("/etcetera/notes.txt", True),
        ("/proc/self/environ", False),
        ("C:\\Windows\\System32\\drivers", False),
        ("c:/windows/win.ini", False),
        ("src\\..\\secret", False),
        ("docs/..", False),
        ("file..txt", True),
        ("", False),
        ("   ", False),
    ],
)
def test_is_path_safe(path, safe):
    assert is_path_safe(path) is safe


# --- Format validation ---


class TestValidatePathFormat:
    def test_empty_path(self):
        result = validate_path_format("")
        assert not result.is_valid
        assert any("empty" in e.lower() for e in result.errors)

    def test_reserved_segment_on_windows_path(self):
        result = validate_path_format("C:\\path\\to\\CON")
        assert not result.is_valid
        assert any("reserved" in e.lower() for e in result.errors)

    def test_multiple_rules_accumulate(self):
        result = validate_path_format("../../CON")
        assert not result.is_valid
        assert len(result.errors) > 1

    @pytest.mark.parametrize("name", ["con", "Nul", "COM1", "lpt9", "aux", "PRN"])
    def test_reserved_names_are_case_insensitive(self, name):
        assert not validate_path_format(f"./dir/{name}").is_valid

    @pytest.mark.parametrize("path", ["./CONFIG/x", "./console.log", "./COM10"])
    def test_reserved_names_only_match_whole_segments(self, path):
        assert validate_path_format(path).is_valid

    @pytest.mark.parametrize("char", ["<", ">", '"', "|", "?", "*"])
    def test_invalid_characters(self, char):
        result = validate_path_format(f"./a{char}b")
        assert result.errors == ("Path contains invalid characters",)

    def test_shell_pipe_is_rejected(self):
        assert not validate_path_format("./out.txt | cat").is_valid

    def test_colon_after_drive_or_scheme_is_allowed(self):
        assert validate_path_format("C:\\data\\file.txt").is_valid
        assert validate_path_format("https://example.com/a.png").is_valid

    def test_stray_colon_is_rejected(self):
        assert not validate_path_format("./a:b").is_valid

    def test_control_characters_are_rejected(self):
        assert not validate_path_format("./a\x00b").is_valid

    def test_traversal_is_its_own_rule(self):
        result = validate_path_format("../shared/util.js")
        assert result.errors == ("Path contains traversal sequence (..)",)

    def test_length_limit(self):
        too_long = validate_path_format("a" * 300)
        assert not too_long.is_valid
        assert any("maximum length" in e for e in too_long.errors)
        assert validate_path_format("a" * 250).is_valid
        assert validate_path_format("a" * 260).is_valid
        assert not validate_path_format("a" * 261).is_valid

    @pytest.mark.parametrize(
        "path",
        [".", "./my file.txt", "./données/文件.txt", "/usr/local/bin", "src/index.ts"],
    )
    def test_ordinary_paths_are_valid(self, path):
        result = validate_path_format(path)
        assert result.is_valid
        assert result.errors == ()


def test_is_valid_path_ignores_traversal():
    assert is_valid_path("../lib/util.js")
    assert not is_valid_path("./a|b")
    assert not is_valid_path("./NUL")
    assert not is_valid_path("")


def test_traversal_is_unsafe_and_format_invalid():
    path = "../secret.txt"
    assert is_valid_path(path)
    assert not is_path_safe(path)
    assert not validate_path_format(path).is_valid


# --- Normalization ---


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("C:\\Users\\x\\file.txt", "C:/Users/x/file.txt"),
        ("/a//b///c", "/a/b/c"),
        ("/", "/"),
        ("dir/", "dir"),
        ("./src\\lib/", "./src/lib"),
        ("https://example.com//a//b/", "https://example.com/a/b"),
        ("plain", "plain"),
    ],
)
def test_normalize_path(path, expected):
    assert normalize_path(path) == expected


def test_normalize_path_is_idempotent():
    once = normalize_path("C:\\a\\\\b\\")
    assert normalize_path(once) == once


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/usr/bin", "absolute"),
        ("C:\\Program Files", "absolute"),
        ("d:/data", "absolute"),
        ("./a", "relative"),
        ("../a", "relative"),
        ("src\\a.ts", "relative"),
        ("\\\\server\\share\\file", "relative"),
        ("https://example.com/x", "url"),
        ("file:///tmp/x", "url"),
    ],
)
def test_detect_path_type(path, expected):
    assert detect_path_type(path) == expected


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/a/b/file.tar.gz", PathComponents("/a/b", "file.tar.gz", "file.tar", "gz")),
        ("README", PathComponents("", "README", "README", "")),
        ("/file.txt", PathComponents("/", "file.txt", "file", "txt")),
        ("C:\\dir\\x.js", PathComponents("C:\\dir", "x.js", "x", "js")),
        ("src/", PathComponents("src", "", "", "")),
    ],
)
def test_get_path_components(path, expected):
    assert get_path_components(path) == expected
