from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SettingsModel(BaseModel):
    """Base model for config sections; unknown keys are ignored."""
    model_config = ConfigDict(extra="ignore")


class CleanupSettings(SettingsModel):
    run_builtin_cleanup: bool = True
    skip_during_autosave: bool = True
    merged_command_supported: bool = True
    merged_command: str = ""
    remove_unused_command: str = ""
    sort_command: str = ""
    protected_patterns: str = "using System;||using System.Linq;"


class SortingSettings(SettingsModel):
    collapse_emptied_lines: bool = True


class FormattingSettings(SettingsModel):
    tab_size: int = Field(default=4, ge=1)
    insert_spaces: bool = True

    @property
    def indent_unit(self) -> str:
        return " " * self.tab_size if self.insert_spaces else "\t"


class DirectiveSyntax(SettingsModel):
    keyword: str = "using"
    terminator: str = ";"
    standard_library_root: str = "System"
    scope_keyword: str = "namespace"


SYNTAX_PRESETS: dict[str, DirectiveSyntax] = {
    "csharp": DirectiveSyntax(),
}


class Settings(SettingsModel):
    log_level: str = "warning"
    cleanup: CleanupSettings = Field(default_factory=CleanupSettings)
    sorting: SortingSettings = Field(default_factory=SortingSettings)
    formatting: FormattingSettings = Field(default_factory=FormattingSettings)
    syntax: dict[str, DirectiveSyntax] = Field(default_factory=dict)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "Settings":
        return cls.model_validate({
            "log_level": config.get("logging", {}).get("level", "warning"),
            "cleanup": config.get("cleanup", {}),
            "sorting": config.get("sorting", {}),
            "formatting": config.get("formatting", {}),
            "syntax": config.get("syntax", {}),
        })

    def syntax_for(self, language_id: str) -> DirectiveSyntax | None:
        preset = SYNTAX_PRESETS.get(language_id)
        override = self.syntax.get(language_id)
        if override is None:
            return preset
        if preset is None:
            return override
        return preset.model_copy(update=override.model_dump(exclude_unset=True))
