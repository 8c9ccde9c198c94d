from __future__ import annotations

import sys

import allure
import pytest
from click.testing import CliRunner

from kyanite import __version__
from kyanite.main import kyanite

pytestmark = [
    allure.epic("Command Line"),
    allure.feature("CLI Ops"),
]


def test_version():
    assert __version__


def test_version_option():
    runner = CliRunner()
    result = runner.invoke(kyanite, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_dry_run_keep_order(clean_env) -> None:
    runner = CliRunner()
    result = runner.invoke(
        kyanite,
        ["-n", "-k", "-j", "3", "echo {1} {2}"],
        input="first second third\n\nalpha beta\n",
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["[+] echo first second", "[+] echo alpha beta"]


def test_custom_placeholder_and_separator(clean_env) -> None:
    runner = CliRunner()
    result = runner.invoke(
        kyanite,
        ["--dry-run", "-k", "-I", "[]", "--field-separator", ",", "mv [] [s/,/_/g] [2]"],
        input="a,b\n",
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["[+] mv a,b a_b b"]


def test_max_jobs_option(clean_env) -> None:
    runner = CliRunner()
    result = runner.invoke(
        kyanite,
        ["-n", "-k", "--max-jobs", "2", "echo {}"],
        input="1\n2\n3\n4\n",
    )

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["[+] echo 1", "[+] echo 2"]


def test_environment_supplies_defaults(monkeypatch: pytest.MonkeyPatch, clean_env) -> None:
    monkeypatch.setenv("KYANITE_DRY_RUN", "true")
    monkeypatch.setenv("KYANITE_KEEP_ORDER", "true")
    monkeypatch.setenv("KYANITE_PLACEHOLDER", "@@")

    runner = CliRunner()
    result = runner.invoke(kyanite, ["echo @2@"], input="x y\n")

    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["[+] echo y"]


def test_invalid_option_value_is_a_usage_error(clean_env) -> None:
    runner = CliRunner()
    result = runner.invoke(kyanite, ["-j", "0", "echo {}"], input="x\n")
    assert result.exit_code == 2


def test_empty_placeholder_is_a_usage_error(clean_env) -> None:
    runner = CliRunner()
    result = runner.invoke(kyanite, ["-I", "", "echo {}"], input="x\n")
    assert result.exit_code == 2
    assert "Placeholder must not be empty" in result.output


@pytest.mark.skipif(sys.platform == "win32", reason="requires a POSIX sh")
def test_runs_commands_through_the_shell(clean_env) -> None:
    runner = CliRunner()
    result = runner.invoke(
        kyanite,
        ["-k", "-j", "2", "echo {s/o/0/g}; test {} != bad"],
        input="foo\nbad\nboo\n",
    )

    assert result.exit_code == 0, result.output
    assert "f00" in result.output
    assert "b00" in result.output
    assert "error in job 1: command failed with exit code: 1" in result.output
    assert "output: bad" in result.output
