"""Persistent settings model.

Settings are stored as a single JSON object whose keys are camelCase
(``backupPath``, ``maxBackups`` ...). Python code uses the snake_case field
names; either spelling is accepted on input.
"""

import locale
from collections.abc import Mapping
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from savectl.core.paths import get_default_backup_dir

DEFAULT_LANGUAGE = "en_US"

# System locale -> supported UI language
LOCALE_MAPPING: dict[str, str] = {
    "en_US": "en_US",
    "zh_CN": "zh_CN",
    "zh_SG": "zh_CN",
    "zh_HK": "zh_TW",
    "zh_MO": "zh_TW",
    "zh_TW": "zh_TW",
}

# Value of game_installs before the first install scan
UNINITIALIZED = "uninitialized"


def detect_language(system_locale: str | None = None) -> str:
    """Map the system locale to a supported UI language.

    Args:
        system_locale: Locale name such as "zh_CN" or "zh-Hans-CN".
            Defaults to the current process locale.

    Returns:
        Supported language code, "en_US" when the locale is not mapped.
    """
    if system_locale is None:
        system_locale = locale.getlocale()[0]
    if not system_locale:
        return DEFAULT_LANGUAGE

    name = system_locale.split(".")[0].replace("-", "_")
    if name in LOCALE_MAPPING:
        return LOCALE_MAPPING[name]

    # BCP 47 script forms, e.g. zh_Hans_CN / zh_Hant_TW
    parts = name.split("_")
    if len(parts) == 3:
        return LOCALE_MAPPING.get(f"{parts[0]}_{parts[2]}", DEFAULT_LANGUAGE)
    return DEFAULT_LANGUAGE


def _default_backup_path() -> str:
    return str(get_default_backup_dir())


class Settings(BaseModel):
    """Application settings.

    Unknown keys found in the settings file are kept and written back, so
    files produced by newer versions survive a round trip.

    Attributes:
        theme: UI palette ("dark" or "light").
        language: UI language code.
        backup_path: Backup root directory.
        export_path: Default folder for exported archives ("" when unset).
        max_backups: Snapshots kept per tracked item.
        auto_app_update: Check for application updates on start.
        auto_db_update: Update the game catalog on start.
        game_installs: Install directories scanned for games, or
            "uninitialized" before the first scan.
        pinned_games: Item identifiers pinned to the top of the tables.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        validate_assignment=True,
    )

    theme: Literal["dark", "light"] = "dark"
    language: str = Field(default_factory=detect_language)
    backup_path: str = Field(default_factory=_default_backup_path)
    export_path: str = ""
    max_backups: Annotated[int, Field(ge=1)] = 5
    auto_app_update: bool = True
    auto_db_update: bool = False
    game_installs: str | list[str] = UNINITIALIZED
    pinned_games: list[str] = Field(default_factory=list)

    @classmethod
    def field_for_key(cls, key: str) -> str | None:
        """Resolve a snake_case name or camelCase alias to a field name.

        Returns:
            The field name, or None if no field matches.
        """
        if key in cls.model_fields:
            return key
        for name, info in cls.model_fields.items():
            if info.alias == key:
                return name
        return None

    @classmethod
    def from_file_dict(cls, data: Mapping[str, Any]) -> tuple["Settings", list[str]]:
        """Build settings from a settings file object, one field at a time.

        A value that fails validation falls back to the field default; every
        other key (unknown ones included) is kept.

        Args:
            data: Parsed settings file.

        Returns:
            The settings and the keys whose values were rejected.
        """
        values = dict(data)
        rejected: list[str] = []
        while True:
            try:
                return cls.model_validate(values), rejected
            except ValidationError as e:
                bad: set[str] = set()
                for error in e.errors():
                    if not error["loc"]:
                        continue
                    key = str(error["loc"][0])
                    field = cls.field_for_key(key)
                    names = {key}
                    if field is not None:
                        names |= {field, cls.model_fields[field].alias or field}
                    bad.update(name for name in names if name in values)
                if not bad:
                    raise
                for name in bad:
                    del values[name]
                rejected.extend(sorted(bad))

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize for the settings file (camelCase keys, extras included)."""
        return self.model_dump(mode="json", by_alias=True)

    def display_name(self, game: Mapping[str, Any]) -> str:
        """Pick the title of a catalog entry for the configured language.

        Args:
            game: Catalog entry with a "title" and optional localized titles
                keyed by language code.

        Returns:
            Localized title, falling back to the default title.
        """
        title = str(game.get("title", ""))
        if self.language == DEFAULT_LANGUAGE:
            return title
        return str(game.get(self.language) or title)
