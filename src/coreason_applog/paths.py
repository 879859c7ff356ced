# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_applog

import ctypes
import os
import sys
import uuid
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional, Type

from coreason_applog.utils.logger import logger

# {3EB685DB-65F9-4CF6-A03A-E3EF65729F3D}
FOLDERID_ROAMING_APP_DATA = uuid.UUID("3eb685db-65f9-4cf6-a03a-e3ef65729f3d")
KF_FLAG_CREATE = 0x00008000

XDG_DATA_HOME = "XDG_DATA_HOME"
XDG_DATA_HOME_DEFAULT = Path(".local") / "share"


class PlatformPathError(RuntimeError):
    """Raised when the platform cannot resolve a required directory."""

    pass


class PathProvider(ABC):
    """
    Supplies the OS conventions the log state falls back on.

    Implementations are stateless; every call re-queries the platform.
    """

    @abstractmethod
    def default_data_directory(self) -> Path:
        """
        Returns the per-user application data root.

        Raises:
            PlatformPathError: If the platform cannot resolve it.
        """
        pass  # pragma: no cover

    def current_process_id(self) -> int:
        return os.getpid()


class PosixPathProvider(PathProvider, ABC):
    """Shared home directory lookup for Unix-like platforms."""

    def home_directory(self) -> Path:
        """
        Returns the current user's home directory.

        ``$HOME`` is trusted for regular users only; root always goes through
        the password database.
        """
        home_env = os.environ.get("HOME")
        if os.getuid() != 0 and home_env:
            return Path(home_env)

        import pwd

        try:
            entry = pwd.getpwuid(os.getuid())
        except KeyError as e:
            raise PlatformPathError("Unable to get passwd struct.") from e

        if not entry.pw_dir:
            raise PlatformPathError("User has no home directory")
        return Path(entry.pw_dir)


class LinuxPathProvider(PosixPathProvider):
    """XDG base directory layout."""

    def default_data_directory(self) -> Path:
        value = os.environ.get(XDG_DATA_HOME)
        if value is not None:
            if not value.startswith("/"):
                msg = (
                    f'Environment "{XDG_DATA_HOME}" does not start with \'/\'. '
                    f"XDG specifies that the value must be absolute. "
                    f'The current value is: "{value}"'
                )
                logger.error(msg)
                raise PlatformPathError(msg)
            return Path(value)
        return self.home_directory() / XDG_DATA_HOME_DEFAULT


class MacOSPathProvider(PosixPathProvider):
    def default_data_directory(self) -> Path:
        return self.home_directory() / "Library" / "Application Support"


class _GUID(ctypes.Structure):
    _fields_ = [
        ("Data1", ctypes.c_ulong),
        ("Data2", ctypes.c_ushort),
        ("Data3", ctypes.c_ushort),
        ("Data4", ctypes.c_ubyte * 8),
    ]


class WindowsPathProvider(PathProvider):
    """Known-folder lookup through the Shell API."""

    def default_data_directory(self) -> Path:
        return self.known_folder(FOLDERID_ROAMING_APP_DATA, "RoamingAppData could not be found")

    def known_folder(self, folder_id: uuid.UUID, error_msg: str) -> Path:
        """
        Resolves a known folder, creating it if needed.

        Args:
            folder_id: The KNOWNFOLDERID to look up.
            error_msg: Message used when the lookup fails.

        Raises:
            PlatformPathError: If SHGetKnownFolderPath reports a failure.
        """
        guid = _GUID.from_buffer_copy(folder_id.bytes_le)
        buffer = ctypes.c_wchar_p()
        try:
            hr = ctypes.windll.shell32.SHGetKnownFolderPath(  # type: ignore[attr-defined]
                ctypes.byref(guid), KF_FLAG_CREATE, None, ctypes.byref(buffer)
            )
            if hr != 0:
                raise PlatformPathError(error_msg)
            return Path(buffer.value or "")
        finally:
            # The shell allocates the buffer even on some failure paths.
            ctypes.windll.ole32.CoTaskMemFree(buffer)  # type: ignore[attr-defined]


_REGISTRY: dict[str, Type[PathProvider]] = {
    "win32": WindowsPathProvider,
    "cygwin": LinuxPathProvider,
    "darwin": MacOSPathProvider,
    "linux": LinuxPathProvider,
}


def get_path_provider(platform: Optional[str] = None) -> PathProvider:
    """
    Returns the provider for the given platform.

    Args:
        platform: A ``sys.platform`` value. Defaults to the running interpreter's.

    Returns:
        An instance of a PathProvider subclass. Unknown Unix-likes get the XDG layout.
    """
    platform = platform or sys.platform
    provider_cls = _REGISTRY.get(platform)
    if provider_cls is None:
        logger.debug(f"No dedicated path provider for {platform}; using XDG layout.")
        provider_cls = LinuxPathProvider
    return provider_cls()
