from __future__ import annotations

import sys

import pytest

from tf_installer.lib.command import CmdResult, run_cmd


def test_dry_run_does_not_execute() -> None:
    r = run_cmd(["definitely-not-a-real-binary", "--version"], dry_run=True)
    assert r.returncode == 0
    assert r.stdout == ""


def test_captures_output_and_first_line() -> None:
    r = run_cmd([sys.executable, "-c", "print('Terraform v1.7.5'); print('on linux_amd64')"])
    assert r.returncode == 0
    assert r.first_line == "Terraform v1.7.5"


def test_undecodable_output_is_replaced() -> None:
    r = run_cmd([sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff\\xfegarbage\\n')"])
    assert r.returncode == 0
    assert r.first_line == "\ufffd\ufffdgarbage"


def test_check_raises_on_failure() -> None:
    with pytest.raises(RuntimeError, match="Command failed"):
        run_cmd([sys.executable, "-c", "import sys; sys.exit(4)"])


def test_no_check_returns_returncode() -> None:
    r = run_cmd([sys.executable, "-c", "import sys; sys.exit(4)"], check=False)
    assert r.returncode == 4


def test_missing_binary_raises_oserror() -> None:
    with pytest.raises(OSError):
        run_cmd(["definitely-not-a-real-binary-tf-installer"])


def test_first_line_of_empty_output() -> None:
    assert CmdResult(argv=[], returncode=0, stdout="", stderr="").first_line == ""
