# pyright: reportUnknownMemberType=false

import io
import types

import pytest

import hexframe.main as main
from hexframe.layout import BorderStyle

SPAM_DUMP = (
    "┌────────┬─────────────────────────┬─────────────────────────┬────────┬────────┐\n"
    "│00000000│ 73 70 61 6d             ┊                         │spam    ┊        │\n"
    "└────────┴─────────────────────────┴─────────────────────────┴────────┴────────┘\n"
)


@pytest.fixture
def spam_file(tmp_path):
    path = tmp_path / "spam.bin"
    path.write_bytes(b"spam")
    return path


def test_dumps_file(spam_file, capsys: pytest.CaptureFixture[str]) -> None:
    main.main([str(spam_file), "--color", "never"])

    assert capsys.readouterr().out == SPAM_DUMP


def test_reads_stdin_when_no_file_given(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(main.sys, "stdin", types.SimpleNamespace(buffer=io.BytesIO(b"spam")))

    main.main(["--color", "never"])

    assert capsys.readouterr().out == SPAM_DUMP


def test_skip_and_length_shift_addresses(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "data.bin"
    path.write_bytes(b"XXXXspamYYYY")

    main.main([str(path), "--color", "never", "--border", "none", "-s", "4", "-n", "4"])

    out = capsys.readouterr().out
    assert out.startswith(" 00000004  73 70 61 6d ")
    assert "spam" in out
    assert "YYYY" not in out
    assert len(out.splitlines()) == 1


def test_display_offset_option(spam_file, capsys: pytest.CaptureFixture[str]) -> None:
    main.main([str(spam_file), "--color", "never", "-o", "0x100", "--border", "ascii"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[1].startswith("|00000100| 73 70 61 6d")


def test_width_option(spam_file, capsys: pytest.CaptureFixture[str]) -> None:
    main.main([str(spam_file), "--color", "never", "-w", "4"])

    lines = capsys.readouterr().out.splitlines()
    assert lines[1] == "│00│ 73 70 ┊ 61 6d │sp┊am│"
    assert len(lines) == 3


def test_no_squeezing_option(tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "zeros.bin"
    path.write_bytes(b"\x00" * 64)

    main.main([str(path), "--color", "never", "--no-squeezing"])

    out = capsys.readouterr().out
    assert "*" not in out
    assert len(out.splitlines()) == 6


def test_color_always_emits_ansi(spam_file, capsys: pytest.CaptureFixture[str]) -> None:
    main.main([str(spam_file), "--color", "always"])

    assert "\x1b[36m73 \x1b[0m" in capsys.readouterr().out


def test_odd_width_is_a_usage_error(spam_file, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main.main([str(spam_file), "-w", "15"])

    assert excinfo.value.code == 2
    assert "divisible by 2" in capsys.readouterr().err


def test_bad_byte_count_is_a_usage_error(spam_file) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main.main([str(spam_file), "-n", "lots"])

    assert excinfo.value.code == 2


def test_missing_file_exits_with_message(tmp_path) -> None:
    missing = tmp_path / "nope.bin"

    with pytest.raises(SystemExit) as excinfo:
        main.main([str(missing)])

    assert "nope.bin" in str(excinfo.value.code)


def test_resolve_color_auto_follows_terminal(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("TTY_COMPATIBLE", raising=False)

    assert main.resolve_color("auto", io.StringIO()) is False
    assert main.resolve_color("always", io.StringIO()) is True
    assert main.resolve_color("never", io.StringIO()) is False


def test_options_from_args_adds_skip_to_offset() -> None:
    args = main.build_parser().parse_args(
        ["-o", "16", "--border", "ascii", "--color", "never", "--no-squeezing", "-w", "8"]
    )

    options = main.options_from_args(args, io.StringIO(), skipped=4)

    assert options.display_offset == 20
    assert options.border_style is BorderStyle.ASCII
    assert options.use_squeeze is False
    assert options.show_color is False
    assert options.row_width.full == 8


class ClosedPipe:
    """Stand-in for stdout whose reader goes away after ``allowed_writes``."""

    def __init__(self, allowed_writes: int) -> None:
        self.allowed_writes = allowed_writes
        self.writes: list[str] = []

    def write(self, text: str) -> int:
        if len(self.writes) >= self.allowed_writes:
            raise BrokenPipeError("reader closed")
        self.writes.append(text)
        return len(text)

    def flush(self) -> None:
        pass


def test_broken_pipe_mid_stream_exits_quietly(
    tmp_path, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "data.bin"
    path.write_bytes(bytes(range(256)) * 4)
    stdout = ClosedPipe(allowed_writes=3)
    monkeypatch.setattr(main.sys, "stdout", stdout)

    main.main([str(path), "--color", "never"])

    assert len(stdout.writes) == 3
    assert stdout.writes[1].startswith("│00000000│ 00 01 02")


def test_broken_pipe_on_footer_exits_quietly(
    spam_file, monkeypatch: pytest.MonkeyPatch
) -> None:
    stdout = ClosedPipe(allowed_writes=2)
    monkeypatch.setattr(main.sys, "stdout", stdout)

    main.main([str(spam_file), "--color", "never"])

    assert "".join(stdout.writes) == SPAM_DUMP.rsplit("└", 1)[0]
