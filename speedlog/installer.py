"""Discovery and best-effort installation of the speed-test binary."""

import logging
import platform
import shutil
import subprocess

from speedlog.errors import ToolNotFound

logger = logging.getLogger(__name__)

INSTALL_TIMEOUT_S = 600

# Package-manager command per platform.system(); the manager itself must be on PATH.
INSTALL_COMMANDS = {
    "Windows": [
        "winget",
        "install",
        "--id",
        "Ookla.Speedtest.CLI",
        "--exact",
        "--accept-source-agreements",
        "--accept-package-agreements",
    ],
    "Darwin": ["brew", "install", "teamookla/speedtest/speedtest"],
    "Linux": ["apt-get", "install", "-y", "speedtest"],
}


def locate_tool(command: str) -> str:
    """Return the full path of ``command``.

    Raises:
        ToolNotFound: command is not on PATH
    """
    path = shutil.which(command)
    if path is None:
        raise ToolNotFound(f"speed test binary '{command}' not found on PATH")
    logger.debug("Found speed test binary: %s", path)
    return path


def install_tool(system: str | None = None) -> bool:
    """Try to install the speed-test CLI with the platform package manager.

    Returns:
        True if the package manager reported success, False otherwise
    """
    system = system or platform.system()
    cmd = INSTALL_COMMANDS.get(system)
    if cmd is None:
        logger.warning("No known package manager for platform %s", system)
        return False

    if shutil.which(cmd[0]) is None:
        logger.warning("Package manager %s not available", cmd[0])
        return False

    logger.info("Installing speed test CLI: %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=INSTALL_TIMEOUT_S)
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.warning("Install failed: %s", e)
        return False

    if result.returncode != 0:
        logger.warning("Install exited with code %d: %s", result.returncode, result.stderr.strip())
        return False
    return True


def ensure_tool(command: str, auto_install: bool = False) -> str:
    """Locate the binary, installing it first if allowed.

    Raises:
        ToolNotFound: binary missing and not installable
    """
    try:
        return locate_tool(command)
    except ToolNotFound:
        if not auto_install:
            raise
        logger.info("Speed test binary missing, attempting install")

    if not install_tool():
        raise ToolNotFound(f"speed test binary '{command}' not found and install failed")
    return locate_tool(command)
