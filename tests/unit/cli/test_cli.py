"""Tests for the c3ffi CLI."""

import shlex
import stat
import sys
from unittest.mock import patch

import pytest

from c3ffi.cli import main


def run_cli(*argv):
    """Run main() with argv and return the exit code."""
    with patch.object(sys, "argv", ["c3ffi", *argv]):
        with pytest.raises(SystemExit) as exc_info:
            main()
    return exc_info.value.code


class TestTargetCommand:
    """Tests for the 'c3ffi target' command."""

    def test_prints_c3_target(self, capsys):
        assert run_cli("target", "x86_64-pc-windows-gnu") == 0
        assert capsys.readouterr().out.strip() == "mingw-x64"

    def test_unrecognized(self, capsys):
        assert run_cli("target", "x86_64") == 1
        assert "Unrecognized target" in capsys.readouterr().err


class TestBuildCommand:
    """Tests for the 'c3ffi build' command."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        monkeypatch.delenv("OUT_DIR", raising=False)
        monkeypatch.delenv("TARGET", raising=False)

    def test_dry_run(self, capsys, tmp_path):
        code = run_cli(
            "build", "thing",
            "-f", "a.c3",
            "--out-dir", str(tmp_path),
            "--target", "x86_64-unknown-linux-gnu",
            "-O", "O2",
            "--no-debug-info",
            "-D", "FOO",
            "-e", "VAR=1",
            "--arg=--no-headers",
            "--dry-run",
        )

        assert code == 0
        tokens = shlex.split(capsys.readouterr().out)
        assert tokens == [
            "VAR=1", "c3c", "static-lib", "-g0", "-O2",
            "--output-dir", str(tmp_path),
            "-o", "libthing",
            "--target", "linux-x64",
            "-D", "FOO",
            "a.c3",
            "--no-headers",
        ]

    def test_dry_run_uses_environment(self, capsys, monkeypatch, tmp_path):
        monkeypatch.setenv("OUT_DIR", str(tmp_path))
        monkeypatch.setenv("TARGET", "aarch64-apple-darwin")

        assert run_cli("build", "thing", "-f", "a.c3", "--dynamic", "--dry-run") == 0

        tokens = shlex.split(capsys.readouterr().out)
        assert tokens[1] == "dynamic-lib"
        assert tokens[tokens.index("--target") + 1] == "darwin-aarch64"

    def test_missing_environment(self, capsys):
        assert run_cli("build", "thing", "-f", "a.c3", "--dry-run") == 1
        assert "OUT_DIR" in capsys.readouterr().err

    def test_name_required_without_config(self, capsys, tmp_path):
        code = run_cli("build", "--out-dir", str(tmp_path), "--target", "x86_64-unknown-linux-gnu")

        assert code == 1
        assert "library name is required" in capsys.readouterr().err

    def test_config_file(self, capsys, tmp_path):
        ini = tmp_path / "c3ffi.ini"
        ini.write_text("[c3ffi:thing]\nfiles = src/a.c3\nfeatures = FROM_INI\n")

        code = run_cli(
            "build", "-c", str(ini), "-D", "FROM_CLI",
            "--out-dir", str(tmp_path), "--target", "x86_64-unknown-linux-gnu",
            "--dry-run",
        )

        assert code == 0
        tokens = shlex.split(capsys.readouterr().out)
        assert "libthing" in tokens
        assert tokens[tokens.index("-D") + 1] == "FROM_INI"
        assert tokens[-3:] == ["-D", "FROM_CLI", str(tmp_path.resolve() / "src" / "a.c3")]

    @pytest.mark.parametrize("flag, rendered", [("-O2", "-O2"), ("-Os", "-Os"), ("-OO3", "-O3")])
    def test_compiler_style_optimization_flag(self, capsys, tmp_path, flag, rendered):
        code = run_cli(
            "build", "thing", "-f", "a.c3", flag,
            "--out-dir", str(tmp_path), "--target", "x86_64-unknown-linux-gnu",
            "--dry-run",
        )

        assert code == 0
        assert shlex.split(capsys.readouterr().out)[3] == rendered

    def test_invalid_optimization_level(self, capsys):
        with patch.object(sys, "argv", ["c3ffi", "build", "thing", "-O", "O9"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 2
        assert "Unknown optimization level" in capsys.readouterr().err

    @pytest.mark.skipif(sys.platform == "win32", reason="uses a /bin/sh compiler")
    def test_build_success_emits_directives(self, capsys, tmp_path):
        compiler = tmp_path / "c3c"
        compiler.write_text("#!/bin/sh\nexit 0\n")
        compiler.chmod(compiler.stat().st_mode | stat.S_IXUSR)

        code = run_cli(
            "build", "thing", "-f", "a.c3",
            "--compiler", str(compiler),
            "--out-dir", str(tmp_path), "--target", "x86_64-unknown-linux-gnu",
        )

        assert code == 0
        assert capsys.readouterr().out.splitlines() == [
            f"cargo:rustc-link-search=native={tmp_path}",
            "cargo:rustc-link-lib=static=thing",
        ]

    @pytest.mark.skipif(sys.platform == "win32", reason="uses a /bin/sh compiler")
    def test_out_dir_rendered_as_given(self, capsys, tmp_path):
        compiler = tmp_path / "c3c"
        compiler.write_text("#!/bin/sh\necho \"$@\" > \"$0.args\"\nexit 0\n")
        compiler.chmod(compiler.stat().st_mode | stat.S_IXUSR)
        out_dir = f"{tmp_path}/"

        code = run_cli(
            "build", "thing", "-f", "a.c3",
            "--compiler", str(compiler),
            "--out-dir", out_dir, "--target", "x86_64-unknown-linux-gnu",
        )

        assert code == 0
        assert f"--output-dir {out_dir} " in (tmp_path / "c3c.args").read_text()
        assert capsys.readouterr().out.splitlines()[0] == f"cargo:rustc-link-search=native={out_dir}"

    @pytest.mark.skipif(sys.platform == "win32", reason="uses a /bin/sh compiler")
    def test_build_failure(self, capsys, tmp_path):
        compiler = tmp_path / "c3c"
        compiler.write_text("#!/bin/sh\necho 'error: broken' >&2\nexit 1\n")
        compiler.chmod(compiler.stat().st_mode | stat.S_IXUSR)

        code = run_cli(
            "build", "thing", "-f", "a.c3",
            "--compiler", str(compiler),
            "--out-dir", str(tmp_path), "--target", "x86_64-unknown-linux-gnu",
        )

        captured = capsys.readouterr()
        assert code == 1
        assert captured.out == ""
        assert "error: broken" in captured.err

    def test_no_command(self, capsys):
        assert run_cli() == 1
