import logging
import sys

from installer_core.agent_installer import AgentInstaller
from installer_core.constants import INSTALL_SCRIPT_VERSION, LOGGER_NAME, PACING_LONG, PACING_SHORT
from installer_core.display import Display
from installer_core.host_profile import detect_host_profile
from installer_core.info_printer import InfoPrinter
from installer_core.install_mapping import DispatchStatus
from installer_core.service_manager import ServiceStarter
from installer_core.status_reporter import StatusReporter
from installer_core.system_utils import SystemUtility

logger = logging.getLogger(LOGGER_NAME)

EXIT_OK = 0
EXIT_FAILURE = 1


class InstallationPipeline:
    """
    One installation run: privilege check, host detection, dispatch and
    install, service start, status report and reference information.

    ``run`` returns the process exit status. Only environment errors (missing
    privileges, unsupported or manual-only hosts) produce a failure status;
    installation errors are reported and the run still completes.
    """

    def __init__(self, settings, display=None, detector=detect_host_profile):
        self.settings = settings
        self.policy = settings.policy
        self.display = display or Display(pacing=settings.pacing)
        self.detector = detector
        self.installer = AgentInstaller(self.policy, self.display)
        self.service_starter = ServiceStarter(self.display)
        self.status_reporter = StatusReporter(self.display)
        self.info_printer = InfoPrinter(self.display)

    def check_privileges(self):
        if SystemUtility.is_admin():
            logger.debug("Script is running with elevated privileges.")
            return True
        self.display.header()
        self.display.error("This script requires elevated privileges (sudo)")
        self.display.info(f"Please run: sudo {sys.argv[0]}")
        return False

    def run(self) -> int:
        if not self.check_privileges():
            return EXIT_FAILURE

        self.display.header()
        logger.info(f"Starting installation (installer version {INSTALL_SCRIPT_VERSION}, policy {self.policy.name})")

        self.display.info("Detecting operating system...")
        self.display.pause(PACING_SHORT)
        profile = self.detector()
        self.display.info(f"Operating System: {profile.display_name} ({profile.architecture})")
        self.display.pause(PACING_LONG)
        self.display.blank()

        report = self.installer.install(profile)
        dispatch_result = report.dispatch
        if dispatch_result.status is DispatchStatus.MANUAL_REQUIRED:
            self.info_printer.show_manual_steps(dispatch_result)
            return EXIT_FAILURE
        if not dispatch_result.selected:
            self.info_printer.show_unsupported(dispatch_result, self.policy)
            return EXIT_FAILURE

        platform = dispatch_result.platform
        procedure = report.procedure or dispatch_result.procedure
        agent = procedure.agent

        if not report.succeeded:
            self.display.warning("Skipping service start because the installation failed")
        elif procedure.manages_service:
            self.service_starter.start(agent.service_name, platform, agent.display_name)
            self.status_reporter.report(agent.service_name, agent.port, platform, agent.display_name)

        self.status_reporter.report_version(agent)
        self.info_printer.show_config_info(agent, platform)
        self.info_printer.show_summary(agent, platform, succeeded=report.succeeded)
        logger.info(f"Installation run finished (succeeded={report.succeeded}, fallback={report.used_fallback})")
        return EXIT_OK
