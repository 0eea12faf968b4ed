import logging
from dataclasses import dataclass
from enum import Enum

from installer_core.constants import LOGGER_NAME, PACING_SHORT
from installer_core.platforms import Platform
from installer_core.system_utils import SystemUtility

logger = logging.getLogger(LOGGER_NAME)


class ServiceManagerKind(Enum):
    SYSTEMD = "systemd"
    SYSV = "service"
    HOMEBREW = "brew services"
    NONE = "none"


def detect_service_manager(platform=None) -> ServiceManagerKind:
    """systemd first, then the legacy ``service`` wrapper; Homebrew on macOS."""
    if platform is Platform.MACOS:
        return ServiceManagerKind.HOMEBREW if SystemUtility.command_exists("brew") else ServiceManagerKind.NONE
    if SystemUtility.command_exists("systemctl"):
        return ServiceManagerKind.SYSTEMD
    if SystemUtility.command_exists("service"):
        return ServiceManagerKind.SYSV
    return ServiceManagerKind.NONE


@dataclass
class ServiceStartResult:
    manager: ServiceManagerKind
    started: bool
    enabled: bool = False
    message: str = ""


def _succeeded(result):
    return result is not None and result.returncode == 0


class ServiceStarter:

    def __init__(self, display):
        self.display = display

    def start(self, service_name, platform=None, display_name=None) -> ServiceStartResult:
        display_name = display_name or service_name
        self.display.box(f"Starting {display_name} Service")
        self.display.pause(PACING_SHORT)

        manager = detect_service_manager(platform)
        logger.debug(f"Starting {service_name} with {manager.value}")

        if manager is ServiceManagerKind.SYSTEMD:
            started = _succeeded(SystemUtility.run_command(["systemctl", "start", service_name]))
            enabled = _succeeded(SystemUtility.run_command(["systemctl", "enable", service_name]))
            if started and enabled:
                result = ServiceStartResult(manager, True, True, f"{display_name} started and enabled on boot")
            elif started:
                result = ServiceStartResult(manager, True, False, f"{display_name} started, enabling on boot failed")
            else:
                result = ServiceStartResult(manager, False, enabled, f"Failed to start {service_name} with systemctl")
        elif manager is ServiceManagerKind.SYSV:
            started = _succeeded(SystemUtility.run_command(["service", service_name, "start"]))
            message = f"{display_name} service started" if started else f"Failed to start {service_name} with service"
            result = ServiceStartResult(manager, started, False, message)
        elif manager is ServiceManagerKind.HOMEBREW:
            started = _succeeded(SystemUtility.run_command(["brew", "services", "start", service_name]))
            message = f"{display_name} service started" if started else f"Failed to start {service_name} with brew services"
            result = ServiceStartResult(manager, started, started, message)
        else:
            result = ServiceStartResult(manager, False, False, "Could not determine service manager")

        if result.started and (result.enabled or manager is not ServiceManagerKind.SYSTEMD):
            self.display.success(result.message)
        elif result.started:
            self.display.warning(result.message)
        else:
            self.display.error(result.message)
        return result
