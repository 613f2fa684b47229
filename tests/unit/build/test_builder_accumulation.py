"""
Unit tests for C3FFI option accumulation.

Adding values is ordered, deduplicated and chainable.
"""

import os
from pathlib import Path

import pytest

from c3ffi import Build, C3FFI, LinkingMode, OptimizationLevel
from c3ffi.build.configuration import DEFAULT_COMPILER, append_unique, to_path


class TestDefaults:
    """Test suite for the initial configuration."""

    def test_defaults(self):
        """A fresh builder has the documented defaults and empty collections."""
        config = C3FFI().config

        assert config.compiler_path == DEFAULT_COMPILER == "c3c"
        assert config.linking_mode is LinkingMode.STATIC
        assert config.optimization_level is OptimizationLevel.O0
        assert config.debug_info is True
        assert config.register_rerun_triggers is False
        assert config.files == []
        assert config.environment_variables == []
        assert config.c3_libs == []

    def test_build_is_alias(self):
        """Build is another name for C3FFI."""
        assert Build is C3FFI

    def test_builders_do_not_share_state(self):
        """Each builder owns its own collections."""
        first = C3FFI().feature("A")
        second = C3FFI()

        assert first.config.features == ["A"]
        assert second.config.features == []


class TestScalarSettings:
    """Test suite for scalar setters."""

    def test_setters_return_same_builder(self):
        """Scalar setters are chainable."""
        builder = C3FFI()

        assert builder.compiler("/opt/c3/c3c") is builder
        assert builder.linking_mode(LinkingMode.DYNAMIC) is builder
        assert builder.optimization_level(OptimizationLevel.Oz) is builder
        assert builder.debug_info(False) is builder
        assert builder.rerun_if_changed() is builder

        assert builder.config.compiler_path == "/opt/c3/c3c"
        assert builder.config.linking_mode is LinkingMode.DYNAMIC
        assert builder.config.optimization_level is OptimizationLevel.Oz
        assert builder.config.debug_info is False
        assert builder.config.register_rerun_triggers is True

    def test_compiler_accepts_path(self, tmp_path):
        """A Path compiler is stored as text."""
        compiler = tmp_path / "bin" / "c3c"
        builder = C3FFI().compiler(compiler)

        assert builder.config.compiler_path == str(compiler)

    def test_last_scalar_value_wins(self):
        builder = C3FFI().optimization_level(OptimizationLevel.O3).optimization_level(
            OptimizationLevel.O1
        )

        assert builder.config.optimization_level is OptimizationLevel.O1


class TestAccumulation:
    """Test suite for collection accumulators."""

    def test_file_deduplicated_in_order(self):
        """Adding the same file twice keeps one occurrence at its first position."""
        builder = C3FFI().file("a.c3").file("b.c3").file("a.c3")

        assert builder.config.files == [Path("a.c3"), Path("b.c3")]

    def test_file_normalizes_path_like(self):
        """str, bytes and Path inputs are stored as equal Paths."""
        builder = C3FFI().file("src/a.c3").file(b"src/a.c3").file(Path("src") / "a.c3")

        assert builder.config.files == [Path("src/a.c3")]

    def test_files_applies_each(self):
        builder = C3FFI().files(["x.c3", "y.c3", "x.c3"]).files(("z.c3",))

        assert builder.config.files == [Path("x.c3"), Path("y.c3"), Path("z.c3")]

    @pytest.mark.parametrize(
        "single, multiple, attribute",
        [
            ("feature", "features", "features"),
            ("arg", "args", "args"),
            ("linker_argument", "linker_arguments", "linker_arguments"),
        ],
    )
    def test_string_collections(self, single, multiple, attribute):
        """String accumulators deduplicate and keep insertion order."""
        builder = C3FFI()
        getattr(builder, single)("one")
        getattr(builder, multiple)(["two", "one", "three"])
        getattr(builder, single)("two")

        assert getattr(builder.config, attribute) == ["one", "two", "three"]

    @pytest.mark.parametrize(
        "single, multiple",
        [
            ("compiled_lib_dir", "compiled_lib_dirs"),
            ("compiled_lib", "compiled_libs"),
            ("c3_lib_dir", "c3_lib_dirs"),
            ("c3_lib", "c3_libs"),
        ],
    )
    def test_path_collections(self, single, multiple):
        """Path accumulators deduplicate and keep insertion order."""
        builder = C3FFI()
        result = getattr(builder, single)("libs")
        getattr(builder, multiple)(["other", Path("libs"), "more"])

        assert result is builder
        assert getattr(builder.config, multiple) == [Path("libs"), Path("other"), Path("more")]

    def test_environment_variable_pairs(self):
        """Exact duplicate pairs are dropped; same key with new value is kept."""
        builder = (
            C3FFI()
            .environment_variable(("FOO", "BAR"))
            .environment_variables([("FOO", "BAR"), ("BAZ", "1"), ("FOO", "QUX")])
        )

        assert builder.config.environment_variables == [
            ("FOO", "BAR"),
            ("BAZ", "1"),
            ("FOO", "QUX"),
        ]

    def test_kinds_are_independent(self):
        """The same text can appear in different collections."""
        builder = C3FFI().feature("x").arg("x").linker_argument("x")

        assert builder.config.features == ["x"]
        assert builder.config.args == ["x"]
        assert builder.config.linker_arguments == ["x"]

    def test_undecodable_path_accepted(self):
        """Non-UTF-8 bytes are stored; they only fail at translation."""
        builder = C3FFI().file(b"bad\xff.c3")

        assert builder.config.files == [Path(os.fsdecode(b"bad\xff.c3"))]


class TestHelpers:
    """Test suite for configuration helpers."""

    def test_append_unique(self):
        items = [1]

        assert append_unique(items, 2) is True
        assert append_unique(items, 1) is False
        assert items == [1, 2]

    def test_to_path(self):
        assert to_path("a/b") == Path("a/b")
        assert to_path(b"a/b") == Path("a/b")
        assert to_path(Path("a")) == Path("a")
