import os
from dataclasses import dataclass

from installer_core.constants import (
    DEFAULT_CONSOLE_LOG_LEVEL, DEFAULT_POLICY, ENV_LOG_DIR, ENV_LOG_LEVEL, ENV_NO_PACING, ENV_POLICY, LOG_DIR_PATH
)
from installer_core.install_mapping import get_policy

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


@dataclass(frozen=True)
class InstallerSettings:
    policy_name: str = DEFAULT_POLICY
    log_dir: str = LOG_DIR_PATH
    log_level: str = DEFAULT_CONSOLE_LOG_LEVEL
    pacing: bool = True

    @property
    def policy(self):
        return get_policy(self.policy_name)


def _is_truthy(value):
    return str(value).strip().lower() in ("1", "true", "yes", "on")


def load_settings(args=None, environ=None) -> InstallerSettings:
    """
    Builds the run settings. Command line flags win over environment
    variables, which win over the built-in defaults.
    """
    environ = os.environ if environ is None else environ

    policy_name = getattr(args, "policy", None) or environ.get(ENV_POLICY) or DEFAULT_POLICY
    get_policy(policy_name)

    log_dir = getattr(args, "log_dir", None) or environ.get(ENV_LOG_DIR) or LOG_DIR_PATH

    log_level = (getattr(args, "log_level", None) or environ.get(ENV_LOG_LEVEL)
                 or DEFAULT_CONSOLE_LOG_LEVEL).upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"Unknown log level: {log_level}")

    no_pacing = getattr(args, "no_pacing", False) or _is_truthy(environ.get(ENV_NO_PACING, ""))

    return InstallerSettings(policy_name=policy_name, log_dir=log_dir, log_level=log_level,
                             pacing=not no_pacing)
