"""Self-update: replace the running executable with the latest release build."""

from __future__ import annotations

import logging
import os
import platform
import sys
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

import httpx
from pydantic import ValidationError

from .errors import NetworkError, UpdateError
from .models import LinearModel

logger = logging.getLogger(__name__)

USER_AGENT = "linear-cli"

ASSET_NAMES = {
    ("darwin", "aarch64"): "linear-macos-aarch64",
    ("darwin", "x86_64"): "linear-macos-x86_64",
    ("linux", "x86_64"): "linear-linux-x86_64",
    ("linux", "aarch64"): "linear-linux-aarch64",
}

# platform.machine() spellings differ between operating systems.
_MACHINE_ALIASES = {
    "arm64": "aarch64",
    "amd64": "x86_64",
    "x64": "x86_64",
}


class ReleaseAsset(LinearModel):
    name: str
    browser_download_url: str


class Release(LinearModel):
    tag_name: str
    assets: list[ReleaseAsset] = []

    @property
    def version(self) -> str:
        return self.tag_name.removeprefix("v")

    def asset(self, name: str) -> ReleaseAsset:
        for asset in self.assets:
            if asset.name == name:
                return asset
        raise UpdateError(f"No release asset found for {name}")


@dataclass(slots=True)
class UpdateResult:
    current_version: str
    latest_version: str
    updated: bool


def asset_name(system: str | None = None, machine: str | None = None) -> str:
    """Name of the release asset built for this OS/architecture pair."""
    system = (system or platform.system()).lower()
    machine = (machine or platform.machine()).lower()
    machine = _MACHINE_ALIASES.get(machine, machine)
    try:
        return ASSET_NAMES[(system, machine)]
    except KeyError:
        raise UpdateError(f"Unsupported platform: {system}-{machine}") from None


def current_executable() -> Path:
    """Path of the installed build that is running right now.

    A frozen build is the interpreter itself. Anything else must be a
    standalone executable: a Python source file or the interpreter cannot be
    swapped for a release build.
    """
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve()
    path = Path(sys.argv[0]).resolve()
    if path.suffix == ".py" or path == Path(sys.executable).resolve():
        raise UpdateError(
            f"Cannot self-update {path}; reinstall linear-cli with your package manager"
        )
    return path


def install_binary(data: bytes, executable: Path) -> None:
    """Write ``data`` next to ``executable`` and atomically swap it in.

    The rename is the last step, so on any failure the original file is
    left as it was and the temporary file is removed.
    """
    temp_path = executable.with_name(executable.name + ".new")
    logger.debug("Writing %d bytes to %s", len(data), temp_path)
    try:
        temp_path.write_bytes(data)
        temp_path.chmod(0o755)
        os.replace(temp_path, executable)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise UpdateError(f"Could not replace {executable}: {exc}") from exc


async def fetch_latest_release(client: httpx.AsyncClient, release_url: str) -> Release:
    response = await _get(client, release_url)
    try:
        return Release.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        raise UpdateError(f"Invalid release metadata from {release_url}") from exc


async def self_update(
    client: httpx.AsyncClient,
    *,
    current_version: str,
    release_url: str,
    executable: Path | None = None,
    report: Callable[[str], None] = print,
    system: str | None = None,
    machine: str | None = None,
) -> UpdateResult:
    """Check the release feed and install a newer build when there is one.

    Versions are compared as plain strings: any tag other than the current
    version counts as an update.
    """
    report(f"Current version: v{current_version}")
    report("Checking for updates...")

    release = await fetch_latest_release(client, release_url)
    latest = release.version
    report(f"Latest version: v{latest}")

    if latest == current_version:
        report("Already up to date!")
        return UpdateResult(current_version, latest, updated=False)

    name = asset_name(system, machine)
    asset = release.asset(name)
    target = executable or current_executable()
    logger.debug("Selected asset %s (%s)", asset.name, asset.browser_download_url)

    report(f"Downloading {name}...")
    response = await _get(client, asset.browser_download_url)
    install_binary(response.content, target)

    report(f"Updated to v{latest}!")
    return UpdateResult(current_version, latest, updated=True)


async def _get(client: httpx.AsyncClient, url: str) -> httpx.Response:
    try:
        response = await client.get(url, headers={"User-Agent": USER_AGENT}, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise UpdateError(f"HTTP {exc.response.status_code} from {url}") from exc
    except httpx.RequestError as exc:
        raise NetworkError(f"Request failed: {exc}") from exc
    return response
