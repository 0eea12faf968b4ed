import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from installer_core.constants import LOGGER_NAME, PACING_SHORT
from installer_core.service_manager import ServiceManagerKind, detect_service_manager
from installer_core.system_utils import SystemUtility

logger = logging.getLogger(LOGGER_NAME)

# LSB init script status code for "program is not running"
LSB_STATUS_NOT_RUNNING = 3


class ServiceState(Enum):
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    UNKNOWN = "UNKNOWN"


class PortState(Enum):
    LISTENING = "listening"
    NOT_LISTENING = "not listening"
    UNKNOWN = "unknown"


@dataclass
class StatusReport:
    service_state: ServiceState
    port_state: PortState
    details: List[str] = field(default_factory=list)

    @property
    def running(self):
        return self.service_state is ServiceState.RUNNING


class StatusReporter:
    """
    Read-only checks of the installed agent. Missing tooling yields UNKNOWN,
    never an error.
    """

    def __init__(self, display):
        self.display = display

    def service_state(self, service_name, platform=None):
        manager = detect_service_manager(platform)
        if manager is ServiceManagerKind.SYSTEMD:
            result = SystemUtility.run_command(["systemctl", "is-active", "--quiet", service_name])
            if result is None:
                return ServiceState.UNKNOWN, []
            if result.returncode != 0:
                return ServiceState.STOPPED, []
            status = SystemUtility.run_command(["systemctl", "status", service_name, "--no-pager"])
            details = []
            if status is not None and status.stdout:
                details = [line.strip() for line in status.stdout.splitlines()
                           if re.search(r"Active|Loaded", line)]
            return ServiceState.RUNNING, details
        if manager is ServiceManagerKind.SYSV:
            result = SystemUtility.run_command(["service", service_name, "status"])
            if result is None:
                return ServiceState.UNKNOWN, []
            if result.returncode == 0:
                return ServiceState.RUNNING, []
            if result.returncode == LSB_STATUS_NOT_RUNNING:
                return ServiceState.STOPPED, []
            return ServiceState.UNKNOWN, []
        if manager is ServiceManagerKind.HOMEBREW:
            result = SystemUtility.run_command(["brew", "services", "list"])
            if result is None or result.returncode != 0:
                return ServiceState.UNKNOWN, []
            lines = [line.strip() for line in result.stdout.splitlines() if line.split()[:1] == [service_name]]
            if any(re.search(r"\bstarted\b", line) for line in lines):
                return ServiceState.RUNNING, lines
            return ServiceState.UNKNOWN, lines
        return ServiceState.UNKNOWN, []

    def port_state(self, port) -> PortState:
        pattern = re.compile(rf":{port}\b")
        for tool in (["ss", "-tulpn"], ["netstat", "-tulpn"]):
            result = SystemUtility.run_command(tool)
            if result is None or result.returncode != 0:
                continue
            if pattern.search(result.stdout or ""):
                return PortState.LISTENING
            return PortState.NOT_LISTENING
        return PortState.UNKNOWN

    def report(self, service_name, port, platform=None, display_name=None) -> StatusReport:
        display_name = display_name or service_name
        self.display.box("Service Status")

        state, details = self.service_state(service_name, platform)
        if state is ServiceState.RUNNING:
            self.display.success(f"{display_name} service is RUNNING")
            if details:
                self.display.label("Service Details:")
                self.display.details(details)
        elif state is ServiceState.STOPPED:
            self.display.error(f"{display_name} service is STOPPED")
        else:
            self.display.warning(f"{display_name} status unknown or not running")

        self.display.info("Checking listening ports...")
        self.display.pause(PACING_SHORT)
        port_state = self.port_state(port)
        if port_state is PortState.LISTENING:
            self.display.success(f"{display_name} is listening on port {port}")
        elif port_state is PortState.NOT_LISTENING:
            self.display.warning(f"{display_name} may not be listening on port {port} yet")
        else:
            self.display.warning(f"Could not check port {port}: neither ss nor netstat is available")

        logger.info(f"Status of {service_name}: service={state.value}, port {port}={port_state.value}")
        return StatusReport(state, port_state, details)

    def installed_version(self, agent) -> Optional[str]:
        result = SystemUtility.run_command(agent.version_command)
        if result is None or result.returncode != 0:
            return None
        version = (result.stdout or "").strip()
        return version or None

    def report_version(self, agent) -> Optional[str]:
        self.display.box("Version Information")
        self.display.info("Checking installed version...")
        self.display.pause(PACING_SHORT)
        version = self.installed_version(agent)
        self.display.label(f"{agent.display_name} Version:")
        if version:
            self.display.details(version.splitlines())
        else:
            self.display.details(["Could not retrieve version"])
            logger.warning(f"Could not retrieve the {agent.package_name} version")
        return version
