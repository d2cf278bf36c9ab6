"""Tests for core modules."""

import pytest
from pathlib import Path


class TestResolveFile:
    """Tests for resolve_file."""

    def test_existing_file(self, target):
        """Test an existing file resolves to its canonical path."""
        from aflfleet.core.resolver import resolve_file

        assert resolve_file(str(target)) == target.resolve()

    def test_relative_path(self, target, monkeypatch):
        """Test relative paths come back absolute."""
        from aflfleet.core.resolver import resolve_file

        monkeypatch.chdir(target.parent)
        resolved = resolve_file("target")
        assert resolved.is_absolute()
        assert resolved == target.resolve()

    def test_missing_or_empty(self, tmp_path):
        """Test missing paths and empty values resolve to None."""
        from aflfleet.core.resolver import resolve_file

        assert resolve_file(tmp_path / "missing") is None
        assert resolve_file(None) is None
        assert resolve_file("") is None

    def test_directory(self, tmp_path):
        """Test directories are not accepted as binaries."""
        from aflfleet.core.resolver import resolve_file

        assert resolve_file(tmp_path) is None


class TestFindAflFuzz:
    """Tests for the afl-fuzz strategy chain."""

    @pytest.fixture(autouse=True)
    def empty_environment(self, tmp_path, monkeypatch):
        empty = tmp_path / "empty_path"
        empty.mkdir()
        monkeypatch.setenv("PATH", str(empty))
        monkeypatch.delenv("AFL_PATH", raising=False)

    def test_explicit_path(self, afl_fuzz):
        """Test an explicit path is used as is."""
        from aflfleet.core.resolver import find_afl_fuzz

        assert find_afl_fuzz(str(afl_fuzz)) == afl_fuzz.resolve()

    def test_path_lookup(self, afl_fuzz, monkeypatch):
        """Test afl-fuzz is found via $PATH."""
        from aflfleet.core.resolver import find_afl_fuzz

        monkeypatch.setenv("PATH", str(afl_fuzz.parent))
        assert find_afl_fuzz() == afl_fuzz.resolve()

    def test_environment_root(self, afl_fuzz, monkeypatch):
        """Test $AFL_PATH pointing at the install directory."""
        from aflfleet.core.resolver import find_afl_fuzz

        monkeypatch.setenv("AFL_PATH", str(afl_fuzz.parent))
        assert find_afl_fuzz() == afl_fuzz.resolve()

    def test_environment_binary(self, afl_fuzz, monkeypatch):
        """Test $AFL_PATH pointing at the binary itself."""
        from aflfleet.core.resolver import find_afl_fuzz

        monkeypatch.setenv("AFL_PATH", str(afl_fuzz))
        assert find_afl_fuzz() == afl_fuzz.resolve()

    def test_not_found(self):
        """Test a missing afl-fuzz is fatal."""
        from aflfleet.core.resolver import find_afl_fuzz

        with pytest.raises(FileNotFoundError):
            find_afl_fuzz()

    def test_wrong_name(self, target):
        """Test the explicit binary must be called afl-fuzz."""
        from aflfleet.core.resolver import find_afl_fuzz

        with pytest.raises(FileNotFoundError):
            find_afl_fuzz(str(target))

    def test_invalid_explicit_path_does_not_fall_through(self, afl_fuzz, tmp_path, monkeypatch):
        """Test a bad explicit path is not replaced by $AFL_PATH."""
        from aflfleet.core.resolver import find_afl_fuzz

        monkeypatch.setenv("AFL_PATH", str(afl_fuzz.parent))
        with pytest.raises(FileNotFoundError):
            find_afl_fuzz(str(tmp_path / "nowhere" / "afl-fuzz"))

    def test_resolver_order(self, afl_fuzz, make_binary, tmp_path, monkeypatch):
        """Test $PATH wins over $AFL_PATH."""
        from aflfleet.core.resolver import BinaryResolver, EnvironmentRoot, PathLookup

        other = make_binary(tmp_path / "other" / "afl-fuzz")
        monkeypatch.setenv("PATH", str(afl_fuzz.parent))
        monkeypatch.setenv("AFL_PATH", str(other.parent))

        resolver = BinaryResolver("afl-fuzz", [PathLookup(), EnvironmentRoot()])
        assert resolver.resolve() == afl_fuzz.resolve()


class TestHarness:
    """Tests for Harness."""

    def test_full_harness(self, target, san_target, cmplog_target):
        """Test all builds resolve."""
        from aflfleet.core.harness import Harness

        harness = Harness.create(target, san_target, cmplog_target, "@@")
        assert harness.target_binary == target.resolve()
        assert harness.sanitizer_binary == san_target.resolve()
        assert harness.cmplog_binary == cmplog_target.resolve()
        assert harness.target_args == "@@"
        assert harness.name == "target"

    def test_missing_target(self, tmp_path):
        """Test a missing target binary is fatal."""
        from aflfleet.core.harness import Harness

        with pytest.raises(FileNotFoundError):
            Harness.create(tmp_path / "missing")

    def test_optional_builds_soft_fail(self, target, tmp_path):
        """Test missing sanitizer/cmplog builds are dropped."""
        from aflfleet.core.harness import Harness

        harness = Harness.create(target, tmp_path / "no_asan", tmp_path / "no_cmplog")
        assert harness.sanitizer_binary is None
        assert harness.cmplog_binary is None
        assert harness.target_args is None

    def test_immutable(self, target):
        """Test harness fields cannot be reassigned."""
        from dataclasses import FrozenInstanceError
        from aflfleet.core.harness import Harness

        harness = Harness.create(target)
        with pytest.raises(FrozenInstanceError):
            harness.target_args = "@@"
