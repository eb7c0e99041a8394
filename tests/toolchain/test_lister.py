"""
Tests for installed toolchain enumeration.
"""

import pytest

from duckup.toolchain.linking import ActiveLinkManager
from duckup.toolchain.lister import ListedToolchain, Lister


@pytest.fixture
def lister(duck_env):
    return Lister(duck_env)


class TestLister:
    """Tests for Lister."""

    def test_missing_store(self, lister):
        assert list(lister.list()) == []

    def test_empty_store(self, lister, duck_env):
        duck_env.ensure_structure()
        assert list(lister.list()) == []

    def test_none_active(self, lister, fake_install):
        fake_install("v2")
        fake_install("v1")

        assert list(lister.list()) == [
            ListedToolchain("v1", False),
            ListedToolchain("v2", False),
        ]

    def test_exactly_one_active(self, lister, duck_env, fake_install):
        fake_install("v1", b"one")
        fake_install("v2", b"two two")
        fake_install("v3", b"three three three")

        ActiveLinkManager(duck_env).activate("v2")

        active = [t.tag for t in lister.list() if t.is_active]
        assert active == ["v2"]

    def test_ignores_stray_files(self, lister, duck_env, fake_install):
        fake_install("v1")
        (duck_env.toolchains_dir / "notes.txt").write_text("")

        assert [t.tag for t in lister.list()] == ["v1"]

    def test_directory_without_binary(self, lister, duck_env, fake_install):
        fake_install("v1")
        ActiveLinkManager(duck_env).activate("v1")
        (duck_env.toolchains_dir / "broken").mkdir()

        assert list(lister.list()) == [
            ListedToolchain("broken", False),
            ListedToolchain("v1", True),
        ]
