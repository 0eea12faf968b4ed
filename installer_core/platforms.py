from enum import Enum

from installer_core.constants import FLUENTD_FORWARD_PORT, FLUENT_BIT_HTTP_PORT


class Platform(Enum):
    UBUNTU = "ubuntu"
    DEBIAN = "debian"
    CENTOS = "centos"
    RHEL = "rhel"
    ROCKY = "rocky"
    ALMALINUX = "almalinux"
    ORACLE = "oracle"
    FEDORA = "fedora"
    AMAZON = "amzn"
    ALPINE = "alpine"
    MACOS = "macos"
    WINDOWS = "windows"

    @classmethod
    def from_os_id(cls, os_id):
        """
        Resolves a detected os id to a platform. Exact aliases win over
        prefix matches, and aliases shorter than four letters (`ol`) only
        match exactly. Unknown ids return None.
        """
        if not os_id:
            return None
        os_id = os_id.strip().lower()
        if os_id in _OS_ID_ALIASES:
            return _OS_ID_ALIASES[os_id]
        for alias, platform in _OS_ID_ALIASES.items():
            if len(alias) >= _MIN_PREFIX_ALIAS_LENGTH and os_id.startswith(alias):
                return platform
        return None

    @property
    def is_linux(self):
        return self not in (Platform.MACOS, Platform.WINDOWS)


_MIN_PREFIX_ALIAS_LENGTH = 4

_OS_ID_ALIASES = {
    "ubuntu": Platform.UBUNTU,
    "debian": Platform.DEBIAN,
    "centos": Platform.CENTOS,
    "rhel": Platform.RHEL,
    "redhat": Platform.RHEL,
    "rocky": Platform.ROCKY,
    "almalinux": Platform.ALMALINUX,
    "oracle": Platform.ORACLE,
    "ol": Platform.ORACLE,
    "fedora": Platform.FEDORA,
    "amzn": Platform.AMAZON,
    "amazon": Platform.AMAZON,
    "alpine": Platform.ALPINE,
    "macos": Platform.MACOS,
    "darwin": Platform.MACOS,
    "windows": Platform.WINDOWS,
}


class Agent(Enum):
    # display name, package, service, version command, config file, log file, port
    FLUENT_PACKAGE = ("Fluentd", "fluent-package", "fluentd", ("fluentd", "--version"),
                      "/etc/fluent/fluentd.conf", "/var/log/fluent/fluentd.log", FLUENTD_FORWARD_PORT)
    TD_AGENT = ("Fluentd", "td-agent", "td-agent", ("td-agent", "--version"),
                "/etc/td-agent/td-agent.conf", "/var/log/td-agent/td-agent.log", FLUENTD_FORWARD_PORT)
    FLUENT_BIT = ("Fluent Bit", "fluent-bit", "fluent-bit", ("fluent-bit", "--version"),
                  "/etc/fluent-bit/fluent-bit.conf", None, FLUENT_BIT_HTTP_PORT)

    def __init__(self, display_name, package_name, service_name, version_command,
                 config_file, log_file, port):
        self.display_name = display_name
        self.package_name = package_name
        self.service_name = service_name
        self.version_command = list(version_command)
        self.config_file = config_file
        self.log_file = log_file
        self.port = port
