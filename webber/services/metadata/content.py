"""
Click metadata file contents.

Every function here is pure: the same arguments always produce the same
string, so staged files and the resulting tarballs are reproducible.
"""

from __future__ import annotations

import json

PACKAGE_VERSION = "1.0.0"
CLICK_VERSION = "0.4"
DEBIAN_BINARY_VERSION = "2.0"
FRAMEWORK = "ubuntu-sdk-16.04"
MAINTAINER = "Webber <noreply@ubports.com>"
DESCRIPTION = "Shortcut"
INSTALLED_SIZE = "30"

APPARMOR_FILENAME = "shortcut.apparmor"
DESKTOP_FILENAME = "shortcut.desktop"

LAUNCHER = "webapp-container"


def package_name(appname: str) -> str:
    return f"{appname}.webber"


def control_content(appname: str) -> str:
    """Debian-style control file for the click package."""
    return (
        f"Package: {package_name(appname)}\n"
        f"Version: {PACKAGE_VERSION}\n"
        f"Click-Version: {CLICK_VERSION}\n"
        "Architecture: all\n"
        f"Maintainer: {MAINTAINER}\n"
        f"Description: {DESCRIPTION}\n"
    )


def manifest_content(appname: str, title: str) -> str:
    """Click manifest JSON.

    Args:
        appname: Sanitized appname.
        title: Display title, stored unsanitized.

    Returns:
        JSON text with four-space indentation and a trailing newline.
    """
    manifest = {
        "architecture": "all",
        "description": DESCRIPTION,
        "framework": FRAMEWORK,
        "hooks": {
            package_name(appname): {
                "apparmor": APPARMOR_FILENAME,
                "desktop": DESKTOP_FILENAME,
            },
        },
        "installed-size": INSTALLED_SIZE,
        "maintainer": MAINTAINER,
        "name": package_name(appname),
        "title": title,
        "version": PACKAGE_VERSION,
    }
    return json.dumps(manifest, indent=4, ensure_ascii=False) + "\n"


def preinst_content() -> str:
    return (
        "#! /bin/sh\n"
        'echo "Click packages may not be installed directly using dpkg."\n'
        "echo \"Use 'click install' instead.\"\n"
        "exit 1"
    )


def apparmor_content() -> str:
    """AppArmor policy for a confined webapp."""
    policy = {
        "template": "ubuntu-webapp",
        "policy_groups": ["networking", "webview"],
        "policy_version": 16.04,
    }
    return json.dumps(policy, indent=4) + "\n"


def exec_line(url: str, url_patterns: str) -> str:
    return f"{LAUNCHER} --webappUrlPatterns={url_patterns} --store-session-cookies {url}"


def desktop_content(
    title: str,
    url: str,
    url_patterns: str,
    icon_filename: str,
    theme_color: str,
) -> str:
    """Desktop entry launching the site in the webapp container.

    Args:
        title: Display name.
        url: Site address passed to the launcher.
        url_patterns: Pattern expression for in-app navigation.
        icon_filename: Staged icon file name.
        theme_color: Splash screen color, embedded verbatim.

    Returns:
        INI-style desktop entry text.
    """
    return (
        "[Desktop Entry]\n"
        f"Name={title}\n"
        f"Exec={exec_line(url, url_patterns)}\n"
        f"Icon={icon_filename}\n"
        "Terminal=false\n"
        "Type=Application\n"
        "X-Ubuntu-Touch=true\n"
        f"X-Ubuntu-Splash-Color={theme_color}\n"
    )
