from pathlib import Path

# Install script version
INSTALL_SCRIPT_VERSION = "1.0.0"

LOGGER_NAME = "InstallationLogger"

# Directory paths
LOG_DIR_PATH = "logs"
LOG_FILE_NAME = "installation.log"

# Environment overrides
ENV_POLICY = "FLUENT_INSTALL_POLICY"
ENV_LOG_DIR = "FLUENT_INSTALL_LOG_DIR"
ENV_LOG_LEVEL = "FLUENT_INSTALL_LOG_LEVEL"
ENV_NO_PACING = "FLUENT_INSTALL_NO_PACING"

DEFAULT_POLICY = "toolbelt"
DEFAULT_CONSOLE_LOG_LEVEL = "WARNING"

# Treasure Data package repositories (td-agent)
TREASUREDATA_GPG_KEY_URL = "https://packages.treasuredata.com/GPG-KEY-td-agent"
TREASUREDATA_APT_SOURCE = (
    "deb [signed-by=/usr/share/keyrings/fluentd-keyring.gpg] "
    "https://packages.treasuredata.com/debian/bullseye/ bullseye contrib\n"
)
TREASUREDATA_YUM_REPO = (
    "[treasuredata]\n"
    "name=TreasureData\n"
    "baseurl=https://packages.treasuredata.com/redhat/$releasever/$basearch\n"
    "gpgcheck=1\n"
    "gpgkey=https://packages.treasuredata.com/GPG-KEY-td-agent\n"
)
FLUENTD_KEYRING_PATH = Path("/usr/share/keyrings/fluentd-keyring.gpg")
FLUENTD_APT_LIST_PATH = Path("/etc/apt/sources.list.d/fluentd.list")
TD_YUM_REPO_PATH = Path("/etc/yum.repos.d/td.repo")

# Vendor hosted install scripts
TOOLBELT_BASE_URL = "https://toolbelt.treasuredata.com/sh"
TOOLBELT_SCRIPT_TEMPLATE = TOOLBELT_BASE_URL + "/install-{target}-fluent-package5-lts.sh"
FLUENT_BIT_INSTALL_SCRIPT_URL = "https://raw.githubusercontent.com/fluent/fluent-bit/master/install.sh"
HOMEBREW_INSTALL_SCRIPT_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"

FLUENTD_DOCS_URL = "https://docs.fluentd.org/"
FLUENTD_MSI_DOCS_URL = "https://docs.fluentd.org/installation/install-by-msi"
FLUENTD_GEM_DOCS_URL = "https://docs.fluentd.org/installation/install-by-gem"
FLUENT_BIT_DOCS_URL = "https://docs.fluentbit.io/manual/installation/getting-started-with-fluent-bit"

DOWNLOAD_TIMEOUT = 60

# Release to codename tables
UBUNTU_CODENAMES = {
    "18.04": "bionic",
    "20.04": "focal",
    "22.04": "jammy",
    "24.04": "noble",
}
DEBIAN_CODENAMES = {
    "10": "buster",
    "11": "bullseye",
    "12": "bookworm",
    "13": "trixie",
}
DEFAULT_CODENAMES = {
    "ubuntu": "jammy",
    "debian": "bookworm",
}

UNKNOWN = "unknown"

ARCHITECTURE_ALIASES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
}

# Agent ports
FLUENTD_FORWARD_PORT = 24224
FLUENT_BIT_HTTP_PORT = 2020

# Cosmetic pacing, seconds
PACING_SHORT = 1
PACING_LONG = 2
