"""Providers for the app and OS details stamped into event metadata."""

from __future__ import annotations

import platform
from importlib import metadata
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict


@runtime_checkable
class PlatformInfo(Protocol):
    """Anything that can describe the running app and host.

    Every method returns ``None`` when the value is unknown; the composer
    then leaves the corresponding metadata key out.
    """

    def app_version(self) -> str | None: ...

    def app_build(self) -> str | None: ...

    def os_version(self) -> str | None: ...

    def device_type(self) -> str | None: ...


class StaticPlatformInfo(BaseModel):
    """Fixed platform values, for embedding hosts and tests."""

    model_config = ConfigDict(frozen=True)

    app_version_value: str | None = None
    app_build_value: str | None = None
    os_version_value: str | None = None
    device_type_value: str | None = None

    def app_version(self) -> str | None:
        return self.app_version_value

    def app_build(self) -> str | None:
        return self.app_build_value

    def os_version(self) -> str | None:
        return self.os_version_value

    def device_type(self) -> str | None:
        return self.device_type_value


class SystemPlatformInfo:
    """Reads platform details from the interpreter and installed metadata.

    Parameters
    ----------
    distribution:
        Name of the installed distribution whose version is reported as the
        app version.  ``None`` leaves the app version out.
    build:
        Optional build identifier, rendered as ``"<version> (<build>)"``.
    """

    def __init__(self, distribution: str | None = None, build: str | None = None) -> None:
        self._distribution = distribution
        self._build = build

    def app_version(self) -> str | None:
        if not self._distribution:
            return None
        try:
            return metadata.version(self._distribution)
        except metadata.PackageNotFoundError:
            return None

    def app_build(self) -> str | None:
        return self._build

    def os_version(self) -> str | None:
        system, release = platform.system(), platform.release()
        return " ".join(part for part in (system, release) if part) or None

    def device_type(self) -> str | None:
        return platform.machine() or None
