"""
Privilege Elevation

Detects administrator/root privileges and relaunches the current command
elevated when requested.

Author: mirrorsync Project
License: MIT
"""

import os
import subprocess
import sys
from typing import List, Sequence

from .logger import get_logger

logger = get_logger(__name__)


class AdminPrivilegeHandler:
    """
    Platform-specific privilege checks and elevation.
    """

    def is_running_as_admin(self) -> bool:
        """Check whether the process already has elevated privileges."""
        if sys.platform == "win32":
            try:
                import ctypes
                return bool(ctypes.windll.shell32.IsUserAnAdmin())
            except (AttributeError, OSError) as e:
                logger.warning(f"Could not determine administrator status: {e}")
                return False

        if hasattr(os, "geteuid"):
            return os.geteuid() == 0 or os.environ.get("SUDO_USER") is not None

        return False

    def build_command(self, args: Sequence[str]) -> List[str]:
        """Command line that re-runs this program with the given arguments."""
        return [sys.executable, "-m", "mirrorsync", *[a for a in args if a != "--admin"]]

    def restart_as_admin(self, args: Sequence[str]) -> bool:
        """
        Relaunch the program elevated.

        Args:
            args: Original command-line arguments

        Returns:
            True if the elevated process was launched
        """
        command = self.build_command(args)

        if sys.platform == "win32":
            try:
                import ctypes
                params = subprocess.list2cmdline(command[1:])
                result = ctypes.windll.shell32.ShellExecuteW(None, "runas", command[0], params, None, 1)
                # ShellExecute returns a value > 32 on success
                if result <= 32:
                    logger.error(f"Failed to restart with administrator privileges (code {result})")
                    return False
                logger.info("Restarted with administrator privileges")
                return True
            except (AttributeError, OSError) as e:
                logger.error(f"Failed to restart with administrator privileges: {e}")
                return False

        if os.name == "posix":
            try:
                logger.info("Restarting with sudo")
                completed = subprocess.run(["sudo", *command])
                return completed.returncode == 0
            except OSError as e:
                logger.error(f"Failed to restart with sudo: {e}")
                return False

        logger.error("Elevated privileges are not supported on this platform.")
        return False
