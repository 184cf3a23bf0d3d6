"""Placeholder tokens for save-location path templates.

Catalog entries describe save locations with symbolic tokens such as
``{{p|appdata}}/Publisher/Game``. This module maps every token to its
concrete value on the current machine and to a short identifier
(``{{p5}}``) used to store templates compactly.

The mapping is computed once per process from the OS environment and the
current user; it never depends on application settings.
"""

import getpass
import os
import re
import sys
from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType


class UnknownPlaceholderError(KeyError):
    """Raised when a token has no static resolution."""


# Token -> short identifier. Order matters: token_for() returns the first
# token registered for an identifier.
PLACEHOLDER_IDENTIFIERS: Mapping[str, str] = MappingProxyType(
    {
        "{{p|username}}": "{{p1}}",
        "{{p|userprofile}}": "{{p2}}",
        "{{p|userprofile/documents}}": "{{p3}}",
        "{{p|userprofile/appdata/locallow}}": "{{p4}}",
        "{{p|appdata}}": "{{p5}}",
        "{{p|localappdata}}": "{{p6}}",
        "{{p|programfiles}}": "{{p7}}",
        "{{p|programdata}}": "{{p8}}",
        "{{p|public}}": "{{p9}}",
        "{{p|windir}}": "{{p10}}",
        "{{p|game}}": "{{p11}}",
        "{{p|uid}}": "{{p12}}",
        "{{p|steam}}": "{{p13}}",
        "{{p|uplay}}": "{{p14}}",
        "{{p|ubisoftconnect}}": "{{p14}}",
        "{{p|hkcu}}": "{{p15}}",
        "{{p|hklm}}": "{{p16}}",
        "{{p|wow64}}": "{{p17}}",
        "{{p|osxhome}}": "{{p18}}",
        "{{p|linuxhome}}": "{{p19}}",
        "{{p|xdgdatahome}}": "{{p20}}",
        "{{p|xdgconfighome}}": "{{p21}}",
    }
)

_IDENTIFIER_TOKENS: Mapping[str, str] = MappingProxyType(
    {ident: token for token, ident in reversed(list(PLACEHOLDER_IDENTIFIERS.items()))}
)

# sys.platform -> key used by per-OS rules in catalog data
OS_KEY_MAP: Mapping[str, str] = MappingProxyType(
    {
        "win32": "win",
        "darwin": "mac",
        "linux": "linux",
    }
)

_TOKEN_PATTERN = re.compile(r"\{\{p\|[^{}]+\}\}")
_IDENTIFIER_PATTERN = re.compile(r"\{\{p\d+\}\}")


def _current_username() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return ""


def build_placeholder_mapping(
    env: Mapping[str, str] | None = None,
    home: str | None = None,
    username: str | None = None,
) -> dict[str, str]:
    """Compute the token -> value table for one environment.

    Environment variables that are missing or empty fall back to values
    derived from the home directory or to the Windows defaults.

    Args:
        env: Environment variables (default: os.environ).
        home: Home directory (default: Path.home()).
        username: Login name (default: the current user).

    Returns:
        Ordered mapping of token to resolved path or registry root.
    """
    env = os.environ if env is None else env
    home = home if home is not None else str(Path.home())
    username = username if username is not None else _current_username()

    profile = env.get("USERPROFILE") or home
    return {
        # Windows
        "{{p|username}}": username,
        "{{p|userprofile}}": profile,
        "{{p|userprofile/documents}}": os.path.join(profile, "Documents"),
        "{{p|userprofile/appdata/locallow}}": os.path.join(profile, "AppData", "LocalLow"),
        "{{p|appdata}}": env.get("APPDATA") or os.path.join(profile, "AppData", "Roaming"),
        "{{p|localappdata}}": env.get("LOCALAPPDATA") or os.path.join(profile, "AppData", "Local"),
        "{{p|programfiles}}": env.get("PROGRAMFILES") or "C:\\Program Files",
        "{{p|programdata}}": env.get("PROGRAMDATA") or "C:\\ProgramData",
        "{{p|public}}": env.get("PUBLIC") or "C:\\Users\\Public",
        "{{p|windir}}": env.get("WINDIR") or "C:\\Windows",
        # Registry
        "{{p|hkcu}}": "HKEY_CURRENT_USER",
        "{{p|hklm}}": "HKEY_LOCAL_MACHINE",
        "{{p|wow64}}": "HKEY_LOCAL_MACHINE\\SOFTWARE\\WOW6432Node",
        # Mac
        "{{p|osxhome}}": home,
        # Linux
        "{{p|linuxhome}}": home,
        "{{p|xdgdatahome}}": env.get("XDG_DATA_HOME") or os.path.join(home, ".local", "share"),
        "{{p|xdgconfighome}}": env.get("XDG_CONFIG_HOME") or os.path.join(home, ".config"),
    }


PLACEHOLDER_MAPPING: Mapping[str, str] = MappingProxyType(build_placeholder_mapping())


def resolve(token: str, mapping: Mapping[str, str] | None = None) -> str:
    """Resolve a placeholder token to its value on this machine.

    Args:
        token: Token such as "{{p|appdata}}".
        mapping: Alternative table (default: PLACEHOLDER_MAPPING).

    Returns:
        Resolved path or registry root.

    Raises:
        UnknownPlaceholderError: If the token has no static resolution
            (unknown, or context-dependent like "{{p|game}}").
    """
    table = PLACEHOLDER_MAPPING if mapping is None else mapping
    try:
        return table[token]
    except KeyError:
        raise UnknownPlaceholderError(token) from None


def identifier_for(token: str) -> str:
    """Get the short identifier of a token.

    Raises:
        UnknownPlaceholderError: If the token is unknown.
    """
    try:
        return PLACEHOLDER_IDENTIFIERS[token]
    except KeyError:
        raise UnknownPlaceholderError(token) from None


def token_for(identifier: str) -> str:
    """Get the token of a short identifier (first registered token wins).

    Raises:
        UnknownPlaceholderError: If the identifier is unknown.
    """
    try:
        return _IDENTIFIER_TOKENS[identifier]
    except KeyError:
        raise UnknownPlaceholderError(identifier) from None


def compact_template(template: str) -> str:
    """Replace every known token in a path template by its identifier.

    Unknown tokens are left as they are.
    """
    return _TOKEN_PATTERN.sub(
        lambda m: PLACEHOLDER_IDENTIFIERS.get(m.group(0), m.group(0)),
        template,
    )


def expand_template(template: str) -> str:
    """Replace every known identifier in a path template by its token.

    Unknown identifiers are left as they are.
    """
    return _IDENTIFIER_PATTERN.sub(
        lambda m: _IDENTIFIER_TOKENS.get(m.group(0), m.group(0)),
        template,
    )


def resolve_template(template: str, mapping: Mapping[str, str] | None = None) -> str:
    """Substitute resolved values for the tokens of a path template.

    Compact identifiers are expanded first. Tokens without a static value
    ("{{p|game}}", "{{p|uid}}" ...) are left for the caller to fill in.

    Args:
        template: Path template.
        mapping: Alternative table (default: PLACEHOLDER_MAPPING).

    Returns:
        The template with every resolvable token substituted.
    """
    table = PLACEHOLDER_MAPPING if mapping is None else mapping
    return _TOKEN_PATTERN.sub(
        lambda m: table.get(m.group(0), m.group(0)),
        expand_template(template),
    )


def current_os_key(platform: str | None = None) -> str | None:
    """Get the catalog OS key for a platform.

    Args:
        platform: sys.platform-style identifier (default: sys.platform).

    Returns:
        "win", "mac" or "linux", or None for unsupported platforms.
    """
    return OS_KEY_MAP.get(platform or sys.platform)
