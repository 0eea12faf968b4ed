import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

import requests

from installer_core.constants import DOWNLOAD_TIMEOUT, LOGGER_NAME
from installer_core.system_utils import SystemUtility

logger = logging.getLogger(LOGGER_NAME)


@dataclass
class StepResult:
    description: str
    ok: bool
    fatal: bool = True
    skipped: bool = False
    returncode: Optional[int] = None
    message: str = ""


def download_file(url, dest_path):
    """Streams ``url`` into ``dest_path``. Raises requests or OS errors."""
    dest_path = Path(os.path.expanduser(str(dest_path)))
    logger.debug(f"Downloading {url} to {dest_path}")
    response = requests.get(url, stream=True, timeout=DOWNLOAD_TIMEOUT)
    response.raise_for_status()
    with open(dest_path, 'wb') as file:
        for chunk in response.iter_content(chunk_size=8192):
            file.write(chunk)
    logger.debug(f"Downloaded file saved to: {dest_path}")
    return dest_path


class Step:
    """
    One action of an install procedure.

    A failing fatal step aborts the rest of its procedure; a failing non-fatal
    step is reported as a warning. ``unless_command`` skips the step when the
    named executable is already on PATH.
    """

    def __init__(self, description, fatal=True, unless_command=None):
        self.description = description
        self.fatal = fatal
        self.unless_command = unless_command

    def run(self) -> StepResult:
        if self.unless_command and SystemUtility.command_exists(self.unless_command):
            logger.debug(f"Skipping '{self.description}': {self.unless_command} is already installed")
            return self._result(True, skipped=True, message=f"{self.unless_command} already installed")
        return self.execute()

    def execute(self) -> StepResult:
        raise NotImplementedError

    def _result(self, ok, **kwargs):
        return StepResult(self.description, ok, fatal=self.fatal, **kwargs)

    def __repr__(self):
        return f"{type(self).__name__}({self.description!r})"


class CommandStep(Step):

    def __init__(self, description, command, fatal=True, env=None, unless_command=None):
        super().__init__(description, fatal=fatal, unless_command=unless_command)
        self.command = list(command)
        self.env = env

    def execute(self):
        result = SystemUtility.run_command(self.command, env=self.env)
        if result is None:
            return self._result(False, message=f"{self.command[0]} is not available")
        if result.returncode != 0:
            stderr = (result.stderr or "").strip().splitlines()
            message = stderr[-1] if stderr else f"exit status {result.returncode}"
            return self._result(False, returncode=result.returncode, message=message)
        return self._result(True, returncode=0)


class KeyringStep(Step):
    """
    Fetches an ASCII-armored signing key and stores it dearmored at
    ``keyring_path``. The download lives in a private temporary directory.
    """

    def __init__(self, description, url, keyring_path, fatal=True):
        super().__init__(description, fatal=fatal)
        self.url = url
        self.keyring_path = Path(keyring_path)

    def execute(self):
        temp_dir = SystemUtility.make_temp_dir()
        try:
            key_path = temp_dir / (os.path.basename(urlparse(self.url).path) or "signing-key")
            try:
                download_file(self.url, key_path)
            except (requests.exceptions.RequestException, OSError) as e:
                logger.error(f"Download of {self.url} failed: {e}")
                return self._result(False, message=f"download failed: {e}")
            result = SystemUtility.run_command(
                ["gpg", "--batch", "--yes", "--dearmor", "-o", str(self.keyring_path), str(key_path)])
        finally:
            SystemUtility.remove_temp_dir(temp_dir)

        if result is None:
            return self._result(False, message="gpg is not available")
        if result.returncode != 0:
            return self._result(False, returncode=result.returncode,
                                message=f"gpg exited with status {result.returncode}")
        return self._result(True, returncode=0)


class WriteFileStep(Step):

    def __init__(self, description, path, content, fatal=True):
        super().__init__(description, fatal=fatal)
        self.path = Path(path)
        self.content = content

    def execute(self):
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(self.content)
        except OSError as e:
            logger.error(f"Could not write {self.path}: {e}")
            return self._result(False, message=str(e))
        logger.debug(f"Wrote {self.path}")
        return self._result(True)


class RemoteScriptStep(Step):
    """
    Downloads a vendor-hosted install script and executes it.

    The script is opaque: only its exit status is interpreted. It is fetched
    into a private temporary directory which is removed afterwards whatever
    the outcome.
    """

    def __init__(self, description, url, interpreter=("sh",), env=None, fatal=True, unless_command=None):
        super().__init__(description, fatal=fatal, unless_command=unless_command)
        self.url = url
        self.interpreter = list(interpreter)
        self.env = env

    @property
    def script_name(self):
        return os.path.basename(urlparse(self.url).path) or "install.sh"

    def execute(self):
        temp_dir = SystemUtility.make_temp_dir()
        try:
            script_path = temp_dir / self.script_name
            try:
                download_file(self.url, script_path)
            except (requests.exceptions.RequestException, OSError) as e:
                logger.error(f"Could not fetch install script {self.url}: {e}")
                return self._result(False, message=f"download failed: {e}")
            result = SystemUtility.run_command(self.interpreter + [str(script_path)], env=self.env)
        finally:
            SystemUtility.remove_temp_dir(temp_dir)

        if result is None:
            return self._result(False, message=f"{self.interpreter[0]} is not available")
        if result.returncode != 0:
            return self._result(False, returncode=result.returncode,
                                message=f"install script exited with status {result.returncode}")
        return self._result(True, returncode=0)
