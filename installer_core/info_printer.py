import logging

from installer_core.constants import FLUENT_BIT_DOCS_URL, FLUENTD_DOCS_URL, LOGGER_NAME
from installer_core.platforms import Agent, Platform
from installer_core.system_utils import SystemUtility

logger = logging.getLogger(LOGGER_NAME)


def homebrew_prefix():
    result = SystemUtility.run_command(["brew", "--prefix"])
    if result is None or result.returncode != 0 or not result.stdout.strip():
        return "$(brew --prefix)"
    return result.stdout.strip()


def agent_paths(agent, platform=None):
    """Returns (config file, log file or None) for the installed agent."""
    if platform is Platform.MACOS:
        prefix = homebrew_prefix()
        return f"{prefix}/etc/fluent-bit/fluent-bit.conf", f"{prefix}/var/log/fluent-bit.log"
    return agent.config_file, agent.log_file


def useful_commands(agent, platform=None):
    config_file, log_file = agent_paths(agent, platform)
    service = agent.service_name
    if platform is Platform.MACOS:
        view_logs = f"tail -f {log_file}"
        restart = f"brew services restart {service}"
        stop = f"brew services stop {service}"
        edit = f"nano {config_file}"
    else:
        view_logs = f"tail -f {log_file}" if log_file else f"journalctl -u {service} -f"
        restart = f"sudo systemctl restart {service}"
        stop = f"sudo systemctl stop {service}"
        edit = f"sudo nano {config_file}"
    return [
        ("View logs", view_logs),
        ("Restart service", restart),
        ("Stop service", stop),
        ("Edit config", edit),
    ]


class InfoPrinter:

    def __init__(self, display):
        self.display = display

    def show_config_info(self, agent: Agent, platform=None):
        config_file, log_file = agent_paths(agent, platform)
        self.display.box("Configuration Paths")
        self.display.label("Configuration File:")
        self.display.details([config_file])
        self.display.blank()
        self.display.label("Log File:")
        self.display.details([log_file or f"journalctl -u {agent.service_name}"])
        self.display.blank()
        self.display.label("Useful Commands:")
        self.display.details([f"{name + ':':<21}{command}" for name, command in useful_commands(agent, platform)])
        self.display.blank()

    def show_summary(self, agent: Agent, platform=None, succeeded=True):
        self.display.blank()
        self.display.divider()
        if succeeded:
            self.display.success("INSTALLATION COMPLETED SUCCESSFULLY!")
        else:
            self.display.warning("INSTALLATION FINISHED WITH ERRORS, check the log file for details")
        self.display.divider()

        commands = dict(useful_commands(agent, platform))
        docs = FLUENT_BIT_DOCS_URL if agent is Agent.FLUENT_BIT else FLUENTD_DOCS_URL
        self.display.label("Next Steps:")
        self.display.details([
            "1. Edit configuration",
            f"   {commands['Edit config']}",
            "2. Restart service",
            f"   {commands['Restart service']}",
            "3. Monitor logs",
            f"   {commands['View logs']}",
            "4. Learn more",
            f"   {docs}",
        ])
        self.display.divider()

    def show_manual_steps(self, dispatch_result):
        self.display.error(dispatch_result.message)
        self.display.blank()
        self.display.label("Please install manually using one of these methods:")
        self.display.details([f"→ {step}" for step in dispatch_result.manual_steps])
        self.display.blank()

    def show_unsupported(self, dispatch_result, policy):
        self.display.error(dispatch_result.message)
        self.display.blank()
        self.display.label(f"Supported targets of the '{policy.name}' installer:")
        targets = {}
        for platform, version in policy.supported_targets():
            targets.setdefault(platform.value, []).append(version)
        self.display.details([f"• {name} ({', '.join(versions)})" for name, versions in targets.items()])
        if policy.manual_instructions:
            manual = ", ".join(platform.value for platform in policy.manual_instructions)
            self.display.details([f"• manual installation: {manual}"])
        self.display.blank()
