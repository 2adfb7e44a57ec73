"""
Debian Workstation Setup
------------------------

Interactive, menu-driven provisioning for a single Debian trixie
workstation: fish shell profile, third-party APT repositories and the
curated package set, Flatpak applications, VirtualBox, a GNOME/KDE switch
and Waterfox from a downloaded archive.

Note: most steps must be run with root privileges.
"""

__version__ = "1.0.0"
