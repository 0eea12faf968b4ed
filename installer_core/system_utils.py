import ctypes
import logging
import os
import platform
import shutil
import subprocess
import tempfile
from pathlib import Path

from installer_core.constants import LOGGER_NAME

logger = logging.getLogger(LOGGER_NAME)


class SystemUtility:

    @staticmethod
    def is_admin():
        """
        Returns True when the process runs as root (POSIX) or as an
        administrator (Windows).
        """
        system = platform.system().lower()
        if system == "windows":
            try:
                return ctypes.windll.shell32.IsUserAnAdmin() == 1
            except Exception as e:
                logger.error(f"Error checking admin privileges on Windows: {e}")
                return False
        try:
            return os.geteuid() == 0
        except AttributeError:
            logger.error(f"Cannot determine privileges on {system}")
            return False

    @staticmethod
    def command_exists(name):
        return shutil.which(name) is not None

    @staticmethod
    def run_command(command, env=None, timeout=None):
        """
        Executes a command and captures its output.

        Non-zero exit statuses are returned to the caller, not raised. Returns
        None when the executable does not exist or cannot be started.
        """
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Running command: {' '.join(command)}")
        run_env = None
        if env:
            run_env = dict(os.environ)
            run_env.update(env)
        try:
            result = subprocess.run(command, stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                                    text=True, env=run_env, timeout=timeout)
        except FileNotFoundError:
            logger.debug(f"Command not found: {command[0]}")
            return None
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error(f"Failed to execute {' '.join(command)}: {e}")
            return None
        if result.returncode == 0:
            logger.debug(f"Command succeeded: {' '.join(command)}")
        else:
            logger.debug(f"Command failed with return code {result.returncode}: {' '.join(command)}")
            if result.stderr:
                logger.debug(f"stderr: {result.stderr.strip()}")
        return result

    @staticmethod
    def make_temp_dir(prefix="fluent-install-"):
        """Creates a fresh directory only the current user can access."""
        return Path(tempfile.mkdtemp(prefix=prefix))

    @staticmethod
    def remove_temp_dir(path):
        try:
            shutil.rmtree(path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to delete the directory {path}: {e}")
