"""
Configuration for the Debian workstation setup.

Everything a step needs from the host (target user, home directory, download
directory, install locations) lives on a single ``Config`` value that is
built once by the CLI and handed to every step.
"""

import getpass
import os
import pwd
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional


def _resolve_username() -> str:
    # SUDO_USER first so that `sudo debian-setup` targets the invoking user.
    for var in ("DEBIAN_SETUP_USER", "SUDO_USER", "USER"):
        value = os.environ.get(var)
        if value:
            return value
    return getpass.getuser()


def _resolve_home(username: str) -> Path:
    override = os.environ.get("DEBIAN_SETUP_HOME")
    if override:
        return Path(override)
    try:
        return Path(pwd.getpwnam(username).pw_dir)
    except KeyError:
        return Path(f"/home/{username}")


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes")


@dataclass
class Config:
    """Configuration settings for the Debian workstation setup."""

    # User configuration
    USERNAME: str = field(default_factory=_resolve_username)
    USER_HOME: Optional[Path] = None
    DOWNLOADS_DIR: Optional[Path] = None

    # File paths
    LOG_FILE: str = "/var/log/debian_setup.log"
    APT_SOURCES_DIR: Path = field(
        default_factory=lambda: Path("/etc/apt/sources.list.d")
    )
    APT_KEYRINGS_DIR: Path = field(default_factory=lambda: Path("/etc/apt/keyrings"))
    SHARE_KEYRINGS_DIR: Path = field(
        default_factory=lambda: Path("/usr/share/keyrings")
    )
    WATERFOX_INSTALL_DIR: Path = field(default_factory=lambda: Path("/opt/waterfox"))
    WATERFOX_BIN_LINK: Path = field(
        default_factory=lambda: Path("/usr/local/bin/waterfox")
    )
    WATERFOX_DESKTOP_FILE: Path = field(
        default_factory=lambda: Path("/usr/share/applications/waterfox.desktop")
    )

    # Software versions
    DEBIAN_CODENAME: str = "trixie"
    VIRTUALBOX_VERSION: str = "7.1.8"
    VIRTUALBOX_BUILD: str = "168469"
    VIRTUALBOX_SHA256: Optional[str] = None
    DISTROBOX_VERSION: str = "1.8.1.2"
    DISTROBOX_INSTALLER_SHA256: Optional[str] = None
    ALLOW_UNVERIFIED: bool = False

    # Package lists
    REMOVE_PACKAGES: List[str] = field(
        default_factory=lambda: ["firefox", "firefox-esr"]
    )

    APT_PACKAGES: List[str] = field(
        default_factory=lambda: [
            "gimp",
            "tailscale",
            "vlc",
            "nano",
            "thunderbird",
            "git",
            "papirus-icon-theme",
            "geany",
            "wine",
            "fish",
            "util-linux",
            "pciutils",
            "hwdata",
            "usbutils",
            "coreutils",
            "binutils",
            "findutils",
            "grep",
            "iproute2",
            "bash",
            "bash-completion",
            "udisks2",
            "build-essential",
            "cmake",
            "extra-cmake-modules",
            "docker-ce",
            "docker-ce-cli",
            "containerd.io",
        ]
    )

    FLATPAK_REMOTE: str = "flathub"
    FLATPAK_REMOTE_URL: str = "https://flathub.org/repo/flathub.flatpakrepo"
    FLATPAK_APPS: List[str] = field(
        default_factory=lambda: [
            "com.mattjakeman.ExtensionManager",
            "com.discordapp.Discord",
            "io.kopia.KopiaUI",
            "com.spotify.Client",
            "com.valvesoftware.Steam",
            "org.telegram.desktop",
            "tv.plex.PlexDesktop",
            "com.nextcloud.desktopclient.nextcloud",
            "im.riot.Riot",
            "com.github.tchx84.Flatseal",
        ]
    )

    DOCKER_PREREQUISITES: List[str] = field(
        default_factory=lambda: ["ca-certificates", "curl", "gnupg"]
    )
    VIRTUALBOX_BUILD_DEPS: List[str] = field(
        default_factory=lambda: ["dkms", "linux-headers-amd64"]
    )

    GNOME_METAPACKAGE: str = "task-gnome-desktop"
    KDE_METAPACKAGE: str = "task-kde-desktop"
    GNOME_PURGE_PACKAGES: List[str] = field(
        default_factory=lambda: [
            "task-gnome-desktop",
            "gnome-core",
            "gnome-shell",
            "gnome-session",
        ]
    )
    KDE_PURGE_PACKAGES: List[str] = field(
        default_factory=lambda: [
            "task-kde-desktop",
            "kde-standard",
            "kde-plasma-desktop",
            "kde-full",
        ]
    )

    def __post_init__(self):
        """Initialize derived configuration values after the dataclass is created."""
        if self.USER_HOME is None:
            self.USER_HOME = _resolve_home(self.USERNAME)
        self.USER_HOME = Path(self.USER_HOME)
        if self.DOWNLOADS_DIR is None:
            self.DOWNLOADS_DIR = self.USER_HOME / "Downloads"
        self.FISH_CONFIG_DIR = self.USER_HOME / ".config" / "fish"
        self.FISH_CONFIG_FILE = self.FISH_CONFIG_DIR / "config.fish"

        self.TAILSCALE_KEY_URL = f"https://pkgs.tailscale.com/stable/debian/{self.DEBIAN_CODENAME}.gpg"
        self.TAILSCALE_LIST_URL = f"https://pkgs.tailscale.com/stable/debian/{self.DEBIAN_CODENAME}.list"
        self.DOCKER_KEY_URL = "https://download.docker.com/linux/debian/gpg"
        self.DOCKER_REPO_URL = "https://download.docker.com/linux/debian"
        self.DISTROBOX_INSTALL_URL = f"https://raw.githubusercontent.com/89luca89/distrobox/{self.DISTROBOX_VERSION}/install"

        self.VIRTUALBOX_FILENAME = f"VirtualBox-{self.VIRTUALBOX_VERSION}-{self.VIRTUALBOX_BUILD}-Linux_amd64.run"
        self.VIRTUALBOX_URL = f"https://download.virtualbox.org/virtualbox/{self.VIRTUALBOX_VERSION}/{self.VIRTUALBOX_FILENAME}"
        self.VIRTUALBOX_SUMS_URL = f"https://download.virtualbox.org/virtualbox/{self.VIRTUALBOX_VERSION}/SHA256SUMS"

    @classmethod
    def from_environment(cls, log_file: Optional[str] = None) -> "Config":
        """Build a Config for the invoking user, honouring DEBIAN_SETUP_* overrides."""
        username = _resolve_username()
        home = _resolve_home(username)
        downloads = os.environ.get("DEBIAN_SETUP_DOWNLOADS")

        return cls(
            USERNAME=username,
            USER_HOME=home,
            DOWNLOADS_DIR=Path(downloads) if downloads else None,
            LOG_FILE=log_file
            or os.environ.get("DEBIAN_SETUP_LOG", "/var/log/debian_setup.log"),
            VIRTUALBOX_SHA256=os.environ.get("DEBIAN_SETUP_VIRTUALBOX_SHA256") or None,
            DISTROBOX_INSTALLER_SHA256=os.environ.get("DEBIAN_SETUP_DISTROBOX_SHA256")
            or None,
            ALLOW_UNVERIFIED=_env_flag("DEBIAN_SETUP_ALLOW_UNVERIFIED"),
        )
