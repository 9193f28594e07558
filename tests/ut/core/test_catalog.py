"""静态依赖目录测试 — 展开结果与历史安装命令保持一致"""

from __future__ import annotations

import pytest

from provisioner.core.catalog import (
    LOGICAL_PACKAGES,
    MANAGER_PROBES,
    MANAGER_PROFILES,
    SUBMODULES,
    library_candidates,
)
from provisioner.core.models import PackageManager

APT_EXPECTED = [
    "build-essential", "cmake", "ninja-build", "git",
    "libcurl4-openssl-dev", "libminiupnpc-dev", "libssl-dev",
    "libavcodec-dev", "libavutil-dev", "libswscale-dev",
    "libx11-dev", "libxfixes-dev", "libxrandr-dev",
    "libxcb1-dev", "libxcb-shm0-dev", "libxcb-xfixes0-dev",
    "libdrm-dev", "libva-dev", "libvdpau-dev", "libnuma-dev",
    "libpulse-dev", "libopus-dev", "libevdev-dev", "libcap-dev",
    "libboost-all-dev", "libwayland-dev", "wayland-protocols",
    "libnotify-dev", "libappindicator3-dev", "pkg-config",
]

BREW_EXPECTED = [
    "cmake", "ninja", "git", "curl", "miniupnpc",
    "openssl", "ffmpeg", "opus", "boost", "pkg-config",
]


class TestManagerProfiles:
    def test_apt_full_list(self) -> None:
        assert MANAGER_PROFILES[PackageManager.APT].translate(LOGICAL_PACKAGES) == APT_EXPECTED

    def test_brew_subset(self) -> None:
        assert MANAGER_PROFILES[PackageManager.BREW].translate(LOGICAL_PACKAGES) == BREW_EXPECTED

    def test_dnf_and_pacman_edges(self) -> None:
        dnf = MANAGER_PROFILES[PackageManager.DNF].translate(LOGICAL_PACKAGES)
        pacman = MANAGER_PROFILES[PackageManager.PACMAN].translate(LOGICAL_PACKAGES)
        assert dnf[0] == "@development-tools" and dnf[-1] == "pkgconfig"
        assert pacman[0] == "base-devel" and pacman[-1] == "pkgconf"
        assert len(dnf) == 26
        assert len(pacman) == 26

    @pytest.mark.parametrize(("manager", "elevated"), [
        (PackageManager.APT, True),
        (PackageManager.DNF, True),
        (PackageManager.PACMAN, True),
        (PackageManager.BREW, False),
    ])
    def test_elevation_flags(self, manager: PackageManager, elevated: bool) -> None:
        assert MANAGER_PROFILES[manager].needs_elevation is elevated

    def test_no_profile_for_none(self) -> None:
        assert PackageManager.NONE not in MANAGER_PROFILES

    def test_apt_updates_first(self) -> None:
        assert MANAGER_PROFILES[PackageManager.APT].pre_install_commands == (("apt-get", "update"),)


class TestStaticLists:
    def test_probe_order(self) -> None:
        assert [m for m, _ in MANAGER_PROBES] == [
            PackageManager.APT, PackageManager.DNF, PackageManager.PACMAN, PackageManager.BREW,
        ]

    def test_only_moonlight_has_nested(self) -> None:
        nested = [e.path for e in SUBMODULES if e.has_nested_submodules]
        assert nested == ["third-party/moonlight-common-c"]
        assert len(SUBMODULES) == 12

    def test_library_candidates_use_arch(self) -> None:
        candidates = library_candidates("aarch64")
        assert candidates[0] == "/usr/lib/aarch64-linux-gnu"
        assert candidates[1:3] == ("/usr/lib64", "/usr/lib")
