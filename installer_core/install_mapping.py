"""
Static install mapping and the dispatcher that walks it.

Each installer variant is a named ``InstallPolicy``: an ordered table of
``MappingEntry`` rows from platform and version to an ``InstallProcedure``,
the platforms that need manual installation, and an optional fallback
procedure. Dispatching never runs a command.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Optional, Tuple

from installer_core.constants import (
    FLUENT_BIT_DOCS_URL, FLUENT_BIT_INSTALL_SCRIPT_URL, FLUENTD_APT_LIST_PATH, FLUENTD_GEM_DOCS_URL,
    FLUENTD_KEYRING_PATH, FLUENTD_MSI_DOCS_URL, HOMEBREW_INSTALL_SCRIPT_URL, LOGGER_NAME, TD_YUM_REPO_PATH,
    TOOLBELT_SCRIPT_TEMPLATE, TREASUREDATA_APT_SOURCE, TREASUREDATA_GPG_KEY_URL, TREASUREDATA_YUM_REPO
)
from installer_core.host_profile import HostProfile
from installer_core.platforms import Agent, Platform
from installer_core.procedure_steps import CommandStep, KeyringStep, RemoteScriptStep, Step, WriteFileStep

logger = logging.getLogger(LOGGER_NAME)

MATCH_ANY = "any"
MATCH_CODENAME = "codename"
MATCH_MAJOR_VERSION = "major_version"

SUPPORTED_ARCHITECTURES = frozenset({"x86_64", "aarch64"})


@dataclass(frozen=True)
class InstallProcedure:
    name: str
    agent: Agent
    steps: Tuple[Step, ...]
    manages_service: bool = True


@dataclass(frozen=True)
class MappingEntry:
    platforms: FrozenSet[Platform]
    procedure: InstallProcedure
    match: str = MATCH_ANY
    values: FrozenSet[str] = frozenset()
    architectures: FrozenSet[str] = frozenset()

    def version_key(self, profile: HostProfile) -> str:
        if self.match == MATCH_CODENAME:
            return profile.codename
        if self.match == MATCH_MAJOR_VERSION:
            return profile.major_version
        return ""

    def accepts_version(self, profile: HostProfile) -> bool:
        return self.match == MATCH_ANY or self.version_key(profile) in self.values

    def accepts_architecture(self, profile: HostProfile) -> bool:
        return not self.architectures or profile.architecture in self.architectures


@dataclass(frozen=True)
class InstallPolicy:
    name: str
    description: str
    mapping: Tuple[MappingEntry, ...]
    manual_instructions: Dict[Platform, Tuple[str, ...]] = field(default_factory=dict)
    fallback: Optional[InstallProcedure] = None

    def supported_targets(self):
        """Yields (platform, version key) pairs the mapping accepts; '*' means any version."""
        for entry in self.mapping:
            for platform in sorted(entry.platforms, key=lambda p: p.value):
                if entry.match == MATCH_ANY:
                    yield platform, "*"
                else:
                    for value in sorted(entry.values):
                        yield platform, value


class DispatchStatus(Enum):
    SELECTED = "selected"
    MANUAL_REQUIRED = "manual installation required"
    UNSUPPORTED_OS = "unsupported operating system"
    UNSUPPORTED_VERSION = "unsupported version"
    UNSUPPORTED_ARCHITECTURE = "unsupported architecture"


@dataclass(frozen=True)
class DispatchResult:
    status: DispatchStatus
    platform: Optional[Platform] = None
    procedure: Optional[InstallProcedure] = None
    message: str = ""
    manual_steps: Tuple[str, ...] = ()

    @property
    def selected(self) -> bool:
        return self.status is DispatchStatus.SELECTED


def resolve_platform(profile: HostProfile) -> Optional[Platform]:
    if profile.is_unknown:
        return None
    platform = Platform.from_os_id(profile.os_id)
    if platform is None:
        for token in profile.like:
            platform = Platform.from_os_id(token)
            if platform is not None:
                logger.debug(f"Treating {profile.os_id} as {platform.value} (ID_LIKE)")
                break
    return platform


def dispatch(profile: HostProfile, policy: InstallPolicy) -> DispatchResult:
    platform = resolve_platform(profile)
    if platform is None:
        return DispatchResult(DispatchStatus.UNSUPPORTED_OS,
                              message=f"Unsupported OS: {profile.os_id}")

    candidates = [entry for entry in policy.mapping if platform in entry.platforms]
    if not candidates:
        if platform in policy.manual_instructions:
            return DispatchResult(DispatchStatus.MANUAL_REQUIRED, platform=platform,
                                  message=f"{profile.display_name} requires manual installation",
                                  manual_steps=policy.manual_instructions[platform])
        return DispatchResult(DispatchStatus.UNSUPPORTED_OS, platform=platform,
                              message=f"Unsupported OS for the {policy.name} installer: {profile.os_id}")

    versioned = [entry for entry in candidates if entry.accepts_version(profile)]
    if not versioned:
        version = candidates[0].version_key(profile) or profile.os_version
        return DispatchResult(DispatchStatus.UNSUPPORTED_VERSION, platform=platform,
                              message=f"Unsupported {platform.value} version: {version}")

    for entry in versioned:
        if entry.accepts_architecture(profile):
            logger.debug(f"Selected procedure '{entry.procedure.name}' for {profile}")
            return DispatchResult(DispatchStatus.SELECTED, platform=platform, procedure=entry.procedure,
                                  message=f"Selected {entry.procedure.name}")

    return DispatchResult(DispatchStatus.UNSUPPORTED_ARCHITECTURE, platform=platform,
                          message=f"Unsupported architecture for {profile.display_name}: {profile.architecture}")


# Treasure Data repositories (td-agent)

APT_TD_AGENT = InstallProcedure(
    name="td-agent from the Treasure Data APT repository",
    agent=Agent.TD_AGENT,
    steps=(
        KeyringStep("Setting up repository key", TREASUREDATA_GPG_KEY_URL, FLUENTD_KEYRING_PATH),
        WriteFileStep("Adding Fluentd sources", FLUENTD_APT_LIST_PATH, TREASUREDATA_APT_SOURCE),
        CommandStep("Updating package manager", ["apt-get", "update"], fatal=False),
        CommandStep("Installing Fluentd package", ["apt-get", "install", "-y", "td-agent"],
                    env={"DEBIAN_FRONTEND": "noninteractive"}),
    ),
)

YUM_TD_AGENT = InstallProcedure(
    name="td-agent from the Treasure Data YUM repository",
    agent=Agent.TD_AGENT,
    steps=(
        WriteFileStep("Setting up repository", TD_YUM_REPO_PATH, TREASUREDATA_YUM_REPO),
        CommandStep("Installing Fluentd package", ["yum", "install", "-y", "td-agent"]),
    ),
)

APK_FLUENT_BIT = InstallProcedure(
    name="Fluent Bit from the Alpine repositories",
    agent=Agent.FLUENT_BIT,
    steps=(
        CommandStep("Updating package manager", ["apk", "update"], fatal=False),
        CommandStep("Installing Fluent Bit (Alpine alternative)", ["apk", "add", "--no-cache", "fluent-bit"]),
    ),
    manages_service=False,
)

BREW_FLUENT_BIT = InstallProcedure(
    name="Fluent Bit from Homebrew",
    agent=Agent.FLUENT_BIT,
    steps=(
        RemoteScriptStep("Installing Homebrew", HOMEBREW_INSTALL_SCRIPT_URL, interpreter=("/bin/bash",),
                         env={"NONINTERACTIVE": "1"}, unless_command="brew"),
        CommandStep("Installing Fluent Bit via Homebrew", ["brew", "install", "fluent-bit"]),
    ),
)

# Vendor toolbelt scripts (fluent-package v5 LTS)


def toolbelt_procedure(target):
    url = TOOLBELT_SCRIPT_TEMPLATE.format(target=target)
    return InstallProcedure(
        name=f"fluent-package v5 LTS ({target})",
        agent=Agent.FLUENT_PACKAGE,
        steps=(RemoteScriptStep(f"Running vendor install script for {target}", url),),
    )


FLUENT_BIT_SCRIPT = InstallProcedure(
    name="Fluent Bit from the vendor install script",
    agent=Agent.FLUENT_BIT,
    steps=(RemoteScriptStep("Running Fluent Bit install script", FLUENT_BIT_INSTALL_SCRIPT_URL),),
)

_WINDOWS_STEPS = (
    f"Download the MSI installer: {FLUENTD_MSI_DOCS_URL}",
    "Using Chocolatey (if installed): choco install fluentd",
)
_GEM_STEPS = (
    f"Install Fluentd as a Ruby gem: gem install fluentd ({FLUENTD_GEM_DOCS_URL})",
    f"Or install Fluent Bit from your distribution packages ({FLUENT_BIT_DOCS_URL})",
)


def _toolbelt_mapping():
    entries = []
    for codename in ("noble", "jammy", "focal"):
        entries.append(MappingEntry(frozenset({Platform.UBUNTU}), toolbelt_procedure(f"ubuntu-{codename}"),
                                    MATCH_CODENAME, frozenset({codename}), SUPPORTED_ARCHITECTURES))
    for codename in ("bookworm", "bullseye"):
        entries.append(MappingEntry(frozenset({Platform.DEBIAN}), toolbelt_procedure(f"debian-{codename}"),
                                    MATCH_CODENAME, frozenset({codename}), SUPPORTED_ARCHITECTURES))
    entries.append(MappingEntry(
        frozenset({Platform.RHEL, Platform.CENTOS, Platform.ROCKY, Platform.ALMALINUX, Platform.ORACLE}),
        toolbelt_procedure("redhat"), MATCH_MAJOR_VERSION, frozenset({"8", "9"}), SUPPORTED_ARCHITECTURES))
    entries.append(MappingEntry(frozenset({Platform.AMAZON}), toolbelt_procedure("amazon2"),
                                MATCH_MAJOR_VERSION, frozenset({"2"}), SUPPORTED_ARCHITECTURES))
    entries.append(MappingEntry(frozenset({Platform.AMAZON}), toolbelt_procedure("amazon2023"),
                                MATCH_MAJOR_VERSION, frozenset({"2023"}), SUPPORTED_ARCHITECTURES))
    return tuple(entries)


_TOOLBELT_MANUAL = {
    Platform.ALPINE: (
        "Install Fluent Bit from the Alpine community repository: apk add fluent-bit",
    ) + _GEM_STEPS[:1],
    Platform.FEDORA: _GEM_STEPS,
    Platform.MACOS: ("Install Fluent Bit with Homebrew: brew install fluent-bit",) + _GEM_STEPS[:1],
    Platform.WINDOWS: _WINDOWS_STEPS,
}

CLASSIC = InstallPolicy(
    name="classic",
    description="Treasure Data repositories for td-agent, apk/Homebrew for Fluent Bit",
    mapping=(
        MappingEntry(frozenset({Platform.UBUNTU, Platform.DEBIAN}), APT_TD_AGENT),
        MappingEntry(frozenset({Platform.CENTOS, Platform.RHEL, Platform.FEDORA}), YUM_TD_AGENT),
        MappingEntry(frozenset({Platform.ALPINE}), APK_FLUENT_BIT),
        MappingEntry(frozenset({Platform.MACOS}), BREW_FLUENT_BIT),
    ),
    manual_instructions={Platform.WINDOWS: _WINDOWS_STEPS},
)

TOOLBELT = InstallPolicy(
    name="toolbelt",
    description="Vendor toolbelt scripts for fluent-package v5 LTS, no fallback",
    mapping=_toolbelt_mapping(),
    manual_instructions=_TOOLBELT_MANUAL,
)

TOOLBELT_FLUENT_BIT_FALLBACK = InstallPolicy(
    name="toolbelt-fluent-bit-fallback",
    description="Vendor toolbelt scripts, Fluent Bit install script when they fail",
    mapping=TOOLBELT.mapping,
    manual_instructions=_TOOLBELT_MANUAL,
    fallback=FLUENT_BIT_SCRIPT,
)

POLICIES = {policy.name: policy for policy in (CLASSIC, TOOLBELT, TOOLBELT_FLUENT_BIT_FALLBACK)}


def get_policy(name) -> InstallPolicy:
    try:
        return POLICIES[name]
    except KeyError:
        raise ValueError(f"Unknown install policy: {name} (choose from {', '.join(sorted(POLICIES))})")
