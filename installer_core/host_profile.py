import logging
import os
import platform
from dataclasses import dataclass
from typing import Optional, Tuple

import distro

from installer_core.constants import (
    ARCHITECTURE_ALIASES, DEBIAN_CODENAMES, DEFAULT_CODENAMES, LOGGER_NAME, UBUNTU_CODENAMES, UNKNOWN
)

logger = logging.getLogger(LOGGER_NAME)


@dataclass(frozen=True)
class HostProfile:
    """Operating system identity of the host, detected once per run."""
    os_id: str
    os_version: str
    codename: str
    architecture: str
    pretty_name: str = ""
    like: Tuple[str, ...] = ()

    @classmethod
    def unknown(cls, architecture=UNKNOWN, pretty_name="Unknown OS"):
        return cls(os_id=UNKNOWN, os_version=UNKNOWN, codename="",
                   architecture=architecture, pretty_name=pretty_name)

    @property
    def is_unknown(self) -> bool:
        return self.os_id == UNKNOWN

    @property
    def major_version(self) -> str:
        if not self.os_version or self.os_version == UNKNOWN:
            return ""
        return self.os_version.split(".")[0]

    @property
    def display_name(self) -> str:
        if self.pretty_name:
            return self.pretty_name
        return f"{self.os_id} {self.os_version}"


def normalize_architecture(machine: Optional[str]) -> str:
    machine = (machine or "").strip().lower()
    if not machine:
        return UNKNOWN
    return ARCHITECTURE_ALIASES.get(machine, machine)


def detect_host_profile(system=None, root_dir=None, machine=None) -> HostProfile:
    """
    Classifies the host from its release identification files.

    Never raises: missing or unreadable files degrade to the unknown profile.
    ``root_dir`` points the Linux detection at an alternate filesystem root.
    """
    system = (system or platform.system()).lower()
    architecture = normalize_architecture(machine if machine is not None else platform.machine())
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(f"Detecting host profile (system={system}, architecture={architecture})")

    try:
        if system == "linux":
            profile = _detect_linux(root_dir, architecture)
        elif system == "darwin":
            version = platform.mac_ver()[0] or UNKNOWN
            profile = HostProfile("macos", version, "", architecture, f"macOS {version}")
        elif system == "windows":
            profile = HostProfile("windows", platform.release() or UNKNOWN, "", architecture, "Windows")
        else:
            profile = HostProfile.unknown(architecture)
    except (OSError, ValueError) as e:
        logger.warning(f"Host detection failed, treating host as unknown: {e}")
        profile = HostProfile.unknown(architecture)

    logger.debug(f"Detected host profile: {profile}")
    return profile


def _detect_linux(root_dir, architecture):
    linux_distribution = distro.LinuxDistribution(include_lsb=False, include_uname=False, root_dir=root_dir)
    os_id = linux_distribution.id().lower()
    if os_id:
        version = linux_distribution.version() or UNKNOWN
        codename = linux_distribution.codename()
        # Ubuntu derivatives (Mint, Pop!_OS) name their own release but also
        # carry the Ubuntu base codename that vendor packages are built for
        ubuntu_codename = linux_distribution.os_release_attr("ubuntu_codename")
        if os_id != "ubuntu" and ubuntu_codename:
            codename = ubuntu_codename
        pretty_name = linux_distribution.name(pretty=True)
        like = tuple(linux_distribution.like().lower().split())
    else:
        lsb_path = os.path.join(root_dir or "/", "etc", "lsb-release")
        if not os.path.isfile(lsb_path):
            logger.warning("No release identification files found")
            return HostProfile.unknown(architecture, pretty_name="Linux (Unknown)")
        lsb = _read_lsb_release(lsb_path)
        os_id = lsb.get("DISTRIB_ID", "").lower()
        if not os_id:
            return HostProfile.unknown(architecture, pretty_name="Linux (Unknown)")
        version = lsb.get("DISTRIB_RELEASE") or UNKNOWN
        codename = lsb.get("DISTRIB_CODENAME", "")
        pretty_name = lsb.get("DISTRIB_DESCRIPTION") or f"{lsb.get('DISTRIB_ID')} {version}"
        like = ()

    codename = _resolve_codename(os_id, version, codename)
    return HostProfile(os_id, version, codename, architecture, pretty_name, like)


def _read_lsb_release(path):
    values = {}
    with open(path) as f:
        for line in f:
            key, sep, value = line.partition("=")
            if sep:
                values[key.strip()] = value.strip().strip('"')
    return values


def _resolve_codename(os_id, version, codename):
    codename = (codename or "").strip().lower()
    if codename:
        return codename
    if version and version != UNKNOWN:
        parts = version.split(".")
        if os_id == "ubuntu":
            return UBUNTU_CODENAMES.get(".".join(parts[:2]), "")
        if os_id == "debian":
            return DEBIAN_CODENAMES.get(parts[0], "")
        return ""
    if os_id in DEFAULT_CODENAMES:
        codename = DEFAULT_CODENAMES[os_id]
        logger.warning(f"Could not determine the {os_id} codename for version {version}, assuming {codename}")
    return codename
