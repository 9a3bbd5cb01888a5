"""Unit tests for the child configuration loader."""

import os
from pathlib import Path

import pytest

from minit.config import ChildSpec, load_config, parse
from minit.exceptions import ConfigLoadError


class TestParse:
    def test_single_line_splits_command_and_redirections(self) -> None:
        result = parse("/bin/cat in.txt out.txt\n")

        assert result.warnings == ()
        assert result.specs == (
            ChildSpec(
                command="/bin/cat",
                args=("/bin/cat",),
                input_path="in.txt",
                output_path="out.txt",
            ),
        )

    def test_middle_tokens_become_arguments(self) -> None:
        result = parse("/bin/sleep 30 /dev/null /tmp/sleep.out")

        spec = result.specs[0]
        assert spec.command == "/bin/sleep"
        assert spec.args == ("/bin/sleep", "30")
        assert spec.input_path == "/dev/null"
        assert spec.output_path == "/tmp/sleep.out"

    def test_preserves_file_order(self) -> None:
        text = "/bin/a i1 o1\n/bin/b i2 o2\n/bin/c i3 o3\n"

        result = parse(text)

        assert [spec.command for spec in result.specs] == ["/bin/a", "/bin/b", "/bin/c"]

    def test_records_source_line_numbers(self) -> None:
        result = parse("\n/bin/a i o\n\n/bin/b i o\n")

        assert [spec.line for spec in result.specs] == [2, 4]

    def test_any_whitespace_separates_tokens(self) -> None:
        result = parse("/bin/echo\thello   world\tin  out")

        assert result.specs[0].args == ("/bin/echo", "hello", "world")
        assert result.specs[0].input_path == "in"
        assert result.specs[0].output_path == "out"

    def test_short_lines_are_skipped_with_one_warning_each(self) -> None:
        text = "/bin/a i o\n/bin/broken\n/bin/b i o\nonly two\n"

        result = parse(text)

        assert [spec.command for spec in result.specs] == ["/bin/a", "/bin/b"]
        assert [warning.line for warning in result.warnings] == [2, 4]
        assert all("Invalid config line" in w.message for w in result.warnings)

    def test_blank_and_comment_lines_are_ignored_silently(self) -> None:
        text = "# supervised children\n\n   \n/bin/a i o\n  # indented comment\n"

        result = parse(text)

        assert len(result.specs) == 1
        assert result.warnings == ()

    def test_empty_text_yields_nothing(self) -> None:
        result = parse("")

        assert result.specs == ()
        assert result.warnings == ()

    def test_truncates_at_capacity_with_single_warning(self) -> None:
        text = "".join(f"/bin/p{i} in out\n" for i in range(5))

        result = parse(text, max_children=3)

        assert [spec.command for spec in result.specs] == ["/bin/p0", "/bin/p1", "/bin/p2"]
        assert len(result.warnings) == 1
        assert result.warnings[0].line == 4
        assert "Maximum number of processes (3)" in result.warnings[0].message

    def test_no_capacity_warning_when_only_blank_lines_follow(self) -> None:
        text = "/bin/a i o\n/bin/b i o\n\n# done\n"

        result = parse(text, max_children=2)

        assert len(result.specs) == 2
        assert result.warnings == ()

    def test_default_capacity_is_32(self) -> None:
        text = "".join(f"/bin/p{i} in out\n" for i in range(40))

        result = parse(text)

        assert len(result.specs) == 32
        assert len(result.warnings) == 1


class TestLoadConfig:
    def test_reads_and_parses_file(self, tmp_path: Path) -> None:
        config = tmp_path / "minit.conf"
        _ = config.write_text("/bin/cat in.txt out.txt\n/bin/x\n")

        result = load_config(config)

        assert len(result.specs) == 1
        assert len(result.warnings) == 1

    def test_accepts_string_path(self, tmp_path: Path) -> None:
        config = tmp_path / "minit.conf"
        _ = config.write_text("/bin/cat in out\n")

        result = load_config(str(config))

        assert result.specs[0].command == "/bin/cat"

    def test_non_utf8_path_bytes_survive_loading(self, tmp_path: Path) -> None:
        config = tmp_path / "minit.conf"
        _ = config.write_bytes(b"/bin/cat /tmp/caf\xe9.txt /tmp/out\xff\n")

        result = load_config(config)

        assert result.warnings == ()
        spec = result.specs[0]
        assert os.fsencode(spec.input_path) == b"/tmp/caf\xe9.txt"
        assert os.fsencode(spec.output_path) == b"/tmp/out\xff"

    def test_missing_file_raises_config_load_error(self, tmp_path: Path) -> None:
        config = tmp_path / "missing.conf"

        with pytest.raises(ConfigLoadError, match="Failed to open config file") as info:
            _ = load_config(config)

        assert info.value.path == config
        assert isinstance(info.value.cause, FileNotFoundError)

    def test_directory_raises_config_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            _ = load_config(tmp_path)

    def test_passes_capacity_through(self, tmp_path: Path) -> None:
        config = tmp_path / "minit.conf"
        _ = config.write_text("/bin/a i o\n/bin/b i o\n")

        result = load_config(config, max_children=1)

        assert len(result.specs) == 1
        assert len(result.warnings) == 1
