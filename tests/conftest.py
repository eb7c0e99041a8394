"""
Pytest configuration and shared fixtures for duckup tests.
"""

import io
import json
import tarfile
import zipfile
from pathlib import Path
from typing import Dict, Optional

import pytest

from duckup.core.config import DuckupSettings
from duckup.core.directory import DuckupEnvironment
from duckup.core.download import HttpClient
from duckup.core.platform import PlatformInfo

API = "https://api.github.com/repos/duck-compiler/duckc"
WEB = "https://github.com/duck-compiler/duckc"
RUNTIME = "https://go.dev/dl"


def make_tar_gz(files: Dict[str, bytes]) -> bytes:
    """Build a .tar.gz archive in memory from {member path: content}."""
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def make_zip(files: Dict[str, bytes]) -> bytes:
    """Build a .zip archive in memory from {member path: content}."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in files.items():
            zf.writestr(name, content)
    return buffer.getvalue()


def source_archive(tag: str, go_version: Optional[str] = "1.22.1", std: bool = True) -> bytes:
    """Source archive shaped like a tag download: one duckc-{tag}/ root."""
    root = f"duckc-{tag}"
    files = {f"{root}/README.md": b"duck compiler\n"}
    if go_version is not None:
        files[f"{root}/duck-version-info.json"] = json.dumps(
            {"go": go_version}
        ).encode()
    if std:
        files[f"{root}/std/prelude.duck"] = f"// std for {tag}\n".encode()
    return make_tar_gz(files)


def runtime_archive(version: str) -> bytes:
    """Runtime bundle with the conventional go/ root."""
    return make_tar_gz(
        {
            "go/VERSION": f"go{version}\n".encode(),
            "go/bin/go": b"#!/bin/sh\n",
        }
    )


def release_json(tag: str, asset_names=("dargo-linux-x86_64",)) -> dict:
    return {
        "tag_name": tag,
        "assets": [
            {
                "name": name,
                "browser_download_url": f"{WEB}/releases/download/{tag}/{name}",
            }
            for name in asset_names
        ],
    }


@pytest.fixture
def duck_env(tmp_path: Path) -> DuckupEnvironment:
    """Isolated directory layout under tmp_path."""
    return DuckupEnvironment(
        data_dir=tmp_path / "data" / "duckup",
        bin_dir=tmp_path / "bin",
        global_dir=tmp_path / "home" / ".duck",
    )


@pytest.fixture
def settings() -> DuckupSettings:
    return DuckupSettings()


@pytest.fixture
def linux_x64() -> PlatformInfo:
    return PlatformInfo(os="linux", arch="x86_64")


@pytest.fixture
def http() -> HttpClient:
    client = HttpClient(user_agent="duckup-tests")
    yield client
    client.close()


@pytest.fixture
def fake_install(duck_env: DuckupEnvironment):
    """Create an installed toolchain on disk without network access."""

    def _install(tag: str, content: bytes = b"dargo binary") -> Path:
        binary = duck_env.toolchain_binary(tag)
        binary.parent.mkdir(parents=True)
        binary.write_bytes(content)
        binary.chmod(0o755)
        return binary

    return _install


class ReleaseHost:
    """URLs and payload builders for mocking both hosts with responses."""

    api = API
    web = WEB
    runtime = RUNTIME

    make_tar_gz = staticmethod(make_tar_gz)
    make_zip = staticmethod(make_zip)
    source_archive = staticmethod(source_archive)
    runtime_archive = staticmethod(runtime_archive)
    release_json = staticmethod(release_json)

    def source_url(self, tag: str) -> str:
        return f"{WEB}/archive/refs/tags/{tag}.tar.gz"

    def runtime_url(self, version: str, suffix: str = "linux-amd64.tar.gz") -> str:
        return f"{RUNTIME}/go{version}.{suffix}"

    def asset_url(self, tag: str, name: str = "dargo-linux-x86_64") -> str:
        return f"{WEB}/releases/download/{tag}/{name}"


@pytest.fixture
def release_host() -> ReleaseHost:
    return ReleaseHost()
