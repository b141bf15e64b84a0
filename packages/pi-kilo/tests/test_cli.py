"""Tests for the kilo command line entry point."""

from __future__ import annotations

import errno
import fcntl
import os
import struct
import termios
from types import SimpleNamespace

import pytest
from click.testing import CliRunner

from pi.kilo import cli as cli_module
from pi.kilo import terminal as terminal_module
from pi.kilo.cli import main
from pi.kilo.render import CLEAR_SCREEN, CURSOR_HOME, HIDE_CURSOR
from pi.kilo.terminal import TerminalSession


@pytest.fixture
def pty_session(pty_pair, monkeypatch):
    """Make the CLI run its session on a pty slave sized 24x80.

    Yields ``(master_fd, slave_fd)``.
    """
    master, slave = pty_pair
    fcntl.ioctl(slave, termios.TIOCSWINSZ, struct.pack("HHHH", 24, 80, 0, 0))
    monkeypatch.setattr(
        cli_module,
        "TerminalSession",
        lambda **kwargs: TerminalSession(slave, slave, **kwargs),
    )
    return master, slave


def patch_os(monkeypatch, **overrides) -> None:
    ns = SimpleNamespace(
        read=os.read,
        write=os.write,
        get_terminal_size=os.get_terminal_size,
    )
    for name, value in overrides.items():
        setattr(ns, name, value)
    monkeypatch.setattr(terminal_module, "os", ns)


class TestCli:
    def test_help(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "Ctrl-Q" in result.output

    def test_missing_file_exits_nonzero(self, tmp_path):
        result = CliRunner().invoke(main, [str(tmp_path / "missing.txt")])
        assert result.exit_code == 1

    def test_not_a_terminal_exits_nonzero(self, tmp_path):
        path = tmp_path / "hello.txt"
        path.write_text("hello\n")
        result = CliRunner().invoke(main, [str(path)])
        assert result.exit_code == 1


class TestCliSession:
    def test_quit_exits_zero_and_restores(self, pty_session, monkeypatch):
        _, slave = pty_session
        before = termios.tcgetattr(slave)
        keys = iter([b"\x11"])
        patch_os(monkeypatch, read=lambda fd, n: next(keys))

        result = CliRunner().invoke(main, [])

        assert result.exit_code == 0
        assert termios.tcgetattr(slave) == before

    def test_write_log_option_overrides_env(self, pty_session, monkeypatch, tmp_path):
        monkeypatch.setenv("KILO_WRITE_LOG", str(tmp_path / "env.log"))
        log = tmp_path / "cli.log"
        keys = iter([b"\x11"])
        patch_os(monkeypatch, read=lambda fd, n: next(keys))

        result = CliRunner().invoke(main, ["--write-log", str(log)])

        assert result.exit_code == 0
        written = log.read_bytes()
        assert written.startswith(HIDE_CURSOR + CURSOR_HOME)
        assert written.endswith(CLEAR_SCREEN + CURSOR_HOME)
        assert not (tmp_path / "env.log").exists()

    def test_read_error_mid_loop_is_fatal(self, pty_session, monkeypatch, tmp_path):
        _, slave = pty_session
        before = termios.tcgetattr(slave)
        log = tmp_path / "writes.log"

        def fail(fd, n):
            raise OSError(errno.EIO, "I/O error")

        patch_os(monkeypatch, read=fail)

        result = CliRunner().invoke(main, ["--write-log", str(log)])

        assert result.exit_code == 1
        assert "kilo:" in result.output
        assert "read: I/O error" in result.output
        assert termios.tcgetattr(slave) == before
        # The first frame was drawn before the failing read.
        assert log.read_bytes().startswith(HIDE_CURSOR + CURSOR_HOME)

    def test_short_write_mid_loop_is_fatal(self, pty_session, monkeypatch):
        _, slave = pty_session
        before = termios.tcgetattr(slave)
        patch_os(monkeypatch, write=lambda fd, data: os.write(fd, data[:-1]))

        result = CliRunner().invoke(main, [])

        assert result.exit_code == 1
        assert "kilo:" in result.output
        assert "short write" in result.output
        assert termios.tcgetattr(slave) == before
