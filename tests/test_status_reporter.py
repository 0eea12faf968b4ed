"""
Tests for the read-only status checks.
"""

import textwrap

from installer_core.platforms import Agent, Platform
from installer_core.status_reporter import PortState, ServiceState, StatusReporter

SYSTEMCTL_STATUS = textwrap.dedent("""\
    ● fluentd.service - fluentd: All in one package of Fluentd
         Loaded: loaded (/lib/systemd/system/fluentd.service; enabled; vendor preset: enabled)
         Active: active (running) since Mon 2026-10-12 09:14:02 UTC; 3s ago
       Main PID: 4242 (fluentd)
""")

SS_OUTPUT = textwrap.dedent("""\
    Netid State  Recv-Q Send-Q Local Address:Port Peer Address:Port Process
    udp   UNCONN 0      0            0.0.0.0:24224      0.0.0.0:*     users:(("ruby",pid=4250,fd=13))
    tcp   LISTEN 0      1024         0.0.0.0:24224      0.0.0.0:*     users:(("ruby",pid=4250,fd=12))
""")


class TestServiceState:
    def test_systemd_active_is_running(self, fake_commands, display):
        fake_commands.install("systemctl")
        fake_commands.respond(["systemctl", "status"], stdout=SYSTEMCTL_STATUS)

        state, details = StatusReporter(display).service_state("fluentd", Platform.UBUNTU)

        assert state is ServiceState.RUNNING
        assert len(details) == 2
        assert details[0].startswith("Loaded:")
        assert details[1].startswith("Active: active (running)")

    def test_systemd_inactive_is_stopped(self, fake_commands, display):
        fake_commands.install("systemctl")
        fake_commands.respond(["systemctl", "is-active"], returncode=3)
        state, _ = StatusReporter(display).service_state("fluentd", Platform.UBUNTU)
        assert state is ServiceState.STOPPED

    def test_legacy_status_codes(self, fake_commands, display):
        fake_commands.install("service")
        reporter = StatusReporter(display)
        fake_commands.respond(["service", "td-agent", "status"], returncode=3)
        assert reporter.service_state("td-agent")[0] is ServiceState.STOPPED
        fake_commands.respond(["service", "td-agent", "status"], returncode=4)
        assert reporter.service_state("td-agent")[0] is ServiceState.UNKNOWN

    def test_brew_services_started(self, fake_commands, display):
        fake_commands.install("brew")
        fake_commands.respond(["brew", "services", "list"],
                              stdout="Name       Status  User File\nfluent-bit started root ~/Library/x.plist\n")
        state, details = StatusReporter(display).service_state("fluent-bit", Platform.MACOS)
        assert state is ServiceState.RUNNING
        assert details[0].startswith("fluent-bit")

    def test_brew_services_not_started_is_unknown(self, fake_commands, display):
        fake_commands.install("brew")
        fake_commands.respond(["brew", "services", "list"], stdout="fluent-bit none\n")
        state, _ = StatusReporter(display).service_state("fluent-bit", Platform.MACOS)
        assert state is ServiceState.UNKNOWN

    def test_no_tooling_is_unknown(self, fake_commands, display):
        state, details = StatusReporter(display).service_state("fluentd", Platform.UBUNTU)
        assert state is ServiceState.UNKNOWN
        assert details == []


class TestPortState:
    def test_listening_with_ss(self, fake_commands, display):
        fake_commands.install("ss")
        fake_commands.respond(["ss", "-tulpn"], stdout=SS_OUTPUT)
        assert StatusReporter(display).port_state(24224) is PortState.LISTENING

    def test_netstat_when_ss_missing(self, fake_commands, display):
        fake_commands.install("netstat")
        fake_commands.respond(["netstat", "-tulpn"], stdout="tcp 0 0 0.0.0.0:22 0.0.0.0:* LISTEN 1/sshd\n")
        assert StatusReporter(display).port_state(24224) is PortState.NOT_LISTENING

    def test_port_prefix_does_not_match(self, fake_commands, display):
        fake_commands.install("ss")
        fake_commands.respond(["ss", "-tulpn"], stdout="tcp LISTEN 0 128 0.0.0.0:242240 0.0.0.0:*\n")
        assert StatusReporter(display).port_state(24224) is PortState.NOT_LISTENING

    def test_no_tool_is_unknown(self, fake_commands, display):
        assert StatusReporter(display).port_state(24224) is PortState.UNKNOWN


class TestReport:
    def test_running_report(self, fake_commands, display, output):
        fake_commands.install("systemctl", "ss")
        fake_commands.respond(["ss", "-tulpn"], stdout=SS_OUTPUT)

        report = StatusReporter(display).report("fluentd", 24224, Platform.UBUNTU, "Fluentd")

        assert report.running
        assert report.port_state is PortState.LISTENING
        assert "Fluentd service is RUNNING" in output()
        assert "listening on port 24224" in output()

    def test_report_never_fails_without_tooling(self, fake_commands, display, output):
        report = StatusReporter(display).report("fluentd", 24224, Platform.UBUNTU)
        assert report.service_state is ServiceState.UNKNOWN
        assert report.port_state is PortState.UNKNOWN

    def test_installed_version(self, fake_commands, display):
        fake_commands.install("fluentd")
        fake_commands.respond(["fluentd", "--version"], stdout="fluent-package 5.0.4 fluentd 1.16.5\n")
        assert StatusReporter(display).installed_version(Agent.FLUENT_PACKAGE) == "fluent-package 5.0.4 fluentd 1.16.5"

    def test_version_unavailable(self, fake_commands, display, output):
        assert StatusReporter(display).report_version(Agent.TD_AGENT) is None
        assert "Could not retrieve version" in output()
