"""
Tests for host detection from release files and codename resolution.
"""

import textwrap
from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest

from installer_core.host_profile import HostProfile, detect_host_profile, normalize_architecture
from installer_core.install_mapping import TOOLBELT, dispatch


def write_release_file(root: Path, name: str, content: str):
    etc = root / "etc"
    etc.mkdir(parents=True, exist_ok=True)
    (etc / name).write_text(textwrap.dedent(content))


class TestLinuxDetection:
    def test_ubuntu_os_release(self, tmp_path: Path):
        write_release_file(tmp_path, "os-release", """\
            NAME="Ubuntu"
            VERSION_ID="22.04"
            VERSION="22.04.4 LTS (Jammy Jellyfish)"
            VERSION_CODENAME=jammy
            ID=ubuntu
            ID_LIKE=debian
            PRETTY_NAME="Ubuntu 22.04.4 LTS"
        """)
        profile = detect_host_profile(system="Linux", root_dir=str(tmp_path), machine="amd64")
        assert profile.os_id == "ubuntu"
        assert profile.os_version == "22.04"
        assert profile.codename == "jammy"
        assert profile.architecture == "x86_64"
        assert profile.pretty_name == "Ubuntu 22.04.4 LTS"
        assert profile.like == ("debian",)

    def test_debian_codename_from_version_table(self, tmp_path: Path):
        write_release_file(tmp_path, "os-release", """\
            ID=debian
            VERSION_ID="11"
            PRETTY_NAME="Debian GNU/Linux 11"
        """)
        profile = detect_host_profile(system="Linux", root_dir=str(tmp_path), machine="x86_64")
        assert profile.os_id == "debian"
        assert profile.codename == "bullseye"

    def test_ubuntu_without_version_uses_default_codename(self, tmp_path: Path):
        write_release_file(tmp_path, "os-release", """\
            ID=ubuntu
            NAME="Ubuntu"
        """)
        profile = detect_host_profile(system="Linux", root_dir=str(tmp_path), machine="x86_64")
        assert profile.os_id == "ubuntu"
        assert profile.codename == "jammy"

    def test_unmapped_version_leaves_codename_empty(self, tmp_path: Path):
        write_release_file(tmp_path, "os-release", """\
            ID=ubuntu
            VERSION_ID="23.10"
        """)
        profile = detect_host_profile(system="Linux", root_dir=str(tmp_path), machine="x86_64")
        assert profile.os_version == "23.10"
        assert profile.codename == ""

    def test_rhel_family_major_version(self, tmp_path: Path):
        write_release_file(tmp_path, "os-release", """\
            NAME="Rocky Linux"
            ID="rocky"
            ID_LIKE="rhel centos fedora"
            VERSION_ID="9.3"
            PRETTY_NAME="Rocky Linux 9.3 (Blue Onyx)"
        """)
        profile = detect_host_profile(system="Linux", root_dir=str(tmp_path), machine="aarch64")
        assert profile.os_id == "rocky"
        assert profile.major_version == "9"
        assert profile.architecture == "aarch64"
        assert "rhel" in profile.like

    def test_ubuntu_derivative_uses_base_codename(self, tmp_path: Path):
        write_release_file(tmp_path, "os-release", """\
            NAME="Linux Mint"
            VERSION="21.3 (Virginia)"
            ID=linuxmint
            ID_LIKE="ubuntu debian"
            PRETTY_NAME="Linux Mint 21.3"
            VERSION_ID="21.3"
            VERSION_CODENAME=virginia
            UBUNTU_CODENAME=jammy
        """)
        profile = detect_host_profile(system="Linux", root_dir=str(tmp_path), machine="x86_64")
        assert profile.os_id == "linuxmint"
        assert profile.codename == "jammy"
        assert profile.like == ("ubuntu", "debian")

        result = dispatch(profile, TOOLBELT)
        assert result.selected
        assert result.procedure.steps[0].url.endswith("/install-ubuntu-jammy-fluent-package5-lts.sh")

    def test_lsb_release_fallback(self, tmp_path: Path):
        write_release_file(tmp_path, "lsb-release", """\
            DISTRIB_ID=Ubuntu
            DISTRIB_RELEASE=20.04
            DISTRIB_CODENAME=focal
            DISTRIB_DESCRIPTION="Ubuntu 20.04.6 LTS"
        """)
        profile = detect_host_profile(system="Linux", root_dir=str(tmp_path), machine="x86_64")
        assert profile.os_id == "ubuntu"
        assert profile.os_version == "20.04"
        assert profile.codename == "focal"
        assert profile.pretty_name == "Ubuntu 20.04.6 LTS"

    def test_no_release_files_is_unknown(self, tmp_path: Path):
        (tmp_path / "etc").mkdir()
        profile = detect_host_profile(system="Linux", root_dir=str(tmp_path), machine="x86_64")
        assert profile.is_unknown
        assert profile.os_version == "unknown"
        assert profile.architecture == "x86_64"


class TestOtherSystems:
    def test_windows(self):
        profile = detect_host_profile(system="Windows", machine="AMD64")
        assert profile.os_id == "windows"
        assert profile.architecture == "x86_64"

    def test_macos(self):
        profile = detect_host_profile(system="Darwin", machine="arm64")
        assert profile.os_id == "macos"
        assert profile.architecture == "aarch64"

    def test_unrecognized_system_is_unknown(self):
        profile = detect_host_profile(system="SunOS", machine="sparc")
        assert profile == HostProfile.unknown("sparc")


class TestHostProfile:
    def test_profile_is_immutable(self, jammy):
        with pytest.raises(FrozenInstanceError):
            jammy.os_id = "debian"

    def test_major_version_of_unknown(self):
        assert HostProfile.unknown().major_version == ""

    @pytest.mark.parametrize("machine,expected", [
        ("x86_64", "x86_64"),
        ("AMD64", "x86_64"),
        ("arm64", "aarch64"),
        ("armv7l", "armv7l"),
        ("", "unknown"),
        (None, "unknown"),
    ])
    def test_normalize_architecture(self, machine, expected):
        assert normalize_architecture(machine) == expected
