"""
Data Page Lister settings.

Reads and writes the operator settings blob kept by the host for this tool:
the enabled container templates, per-template field selection and display
toggles. Reading never fails; malformed values fall back to defaults.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from .codegen.core.config import ConfigError
from .codegen.core.naming import get_sanitizer
from .host import ConfigStore
from .logging_config import get_logger

logger = get_logger(__name__)

# Keys of the host settings blob
KEY_TEMPLATES = "dataPageListerTemplates"
KEY_CONFIGS = "dataPageListerConfigs"
KEY_PAGE_SIZE = "dataPageListerPageSize"
KEY_SHOW_HELP = "dataPageListerShowHelp"
KEY_HIDE_CHILDREN = "dataPageListerHideChildren"
KEY_RENAME_EDIT = "dataPageListerRenameEdit"
KEY_SHOW_VIEW = "dataPageListerShowView"

MODE_AUTO = "auto"
MODE_MANUAL = "manual"
SELECTION_FIRST_N = "firstN"
SELECTION_COMMON = "common"

DEFAULT_NUM_FIELDS = 5
DEFAULT_PAGE_SIZE = 50
PAGE_SIZE_MIN = 10
PAGE_SIZE_MAX = 200


@dataclass
class ListerConfig:
    """Field selection for the containers of one template."""

    mode: str = MODE_AUTO
    field_selection_mode: str = SELECTION_FIRST_N
    num_fields: int = DEFAULT_NUM_FIELDS
    fields: str = ""

    @property
    def is_manual(self) -> bool:
        return self.mode == MODE_MANUAL

    @property
    def is_common(self) -> bool:
        return self.field_selection_mode == SELECTION_COMMON

    def field_list(self) -> List[str]:
        """Manual field names: trimmed, empty tokens dropped, order kept."""
        return [part.strip() for part in self.fields.split(",") if part.strip()]

    @classmethod
    def from_dict(cls, data: Any) -> "ListerConfig":
        """Read a stored config; malformed values become defaults."""
        if not isinstance(data, Mapping):
            return cls()

        mode = data.get("mode")
        if mode not in (MODE_AUTO, MODE_MANUAL):
            mode = MODE_AUTO

        selection = data.get("fieldSelectionMode")
        if selection not in (SELECTION_FIRST_N, SELECTION_COMMON):
            selection = SELECTION_FIRST_N

        fields = data.get("fields")
        if not isinstance(fields, str):
            fields = ""

        return cls(
            mode=mode,
            field_selection_mode=selection,
            num_fields=_as_int(data.get("numFields"), DEFAULT_NUM_FIELDS),
            fields=fields,
        )

    def to_dict(self) -> Dict[str, Any]:
        sanitizer = get_sanitizer()
        return {
            "mode": sanitizer.name(self.mode) or MODE_AUTO,
            "numFields": _as_int(self.num_fields, DEFAULT_NUM_FIELDS),
            "fieldSelectionMode": sanitizer.name(self.field_selection_mode) or SELECTION_FIRST_N,
            "fields": sanitizer.text(self.fields),
        }


@dataclass
class StudioSettings:
    """Operator settings of the Data Page Lister."""

    lister_templates: List[str] = field(default_factory=list)
    lister_configs: Dict[str, ListerConfig] = field(default_factory=dict)
    page_size: int = DEFAULT_PAGE_SIZE
    show_help: bool = True
    hide_children: bool = True
    rename_edit: bool = True
    show_view: bool = False

    def is_enabled(self, template_name: str) -> bool:
        return template_name in self.lister_templates

    def config_for(self, template_name: str) -> Optional[ListerConfig]:
        return self.lister_configs.get(template_name)

    @classmethod
    def from_blob(cls, blob: Any) -> "StudioSettings":
        """Read settings from the host blob, defaulting anything unusable."""
        if not isinstance(blob, Mapping):
            if blob is not None:
                logger.warning("Settings blob is not a mapping, using defaults")
            return cls()

        templates = blob.get(KEY_TEMPLATES)
        if isinstance(templates, (list, tuple)):
            templates = [t for t in templates if isinstance(t, str)]
        else:
            templates = []

        raw_configs = blob.get(KEY_CONFIGS)
        configs = {}
        if isinstance(raw_configs, Mapping):
            configs = {
                str(name): ListerConfig.from_dict(value) for name, value in raw_configs.items()
            }

        return cls(
            lister_templates=templates,
            lister_configs=configs,
            page_size=_as_int(blob.get(KEY_PAGE_SIZE), DEFAULT_PAGE_SIZE),
            show_help=_as_bool(blob.get(KEY_SHOW_HELP), True),
            hide_children=_as_bool(blob.get(KEY_HIDE_CHILDREN), True),
            rename_edit=_as_bool(blob.get(KEY_RENAME_EDIT), True),
            show_view=_as_bool(blob.get(KEY_SHOW_VIEW), False),
        )

    def to_blob(self, existing: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """
        Merge these settings into a settings blob.

        Keys that belong to other parts of the tool are kept. Template names
        are sanitized, configs of templates that are not enabled are dropped
        and the page size is clamped.

        Args:
            existing: Blob currently stored by the host

        Returns:
            New blob to store
        """
        sanitizer = get_sanitizer()

        templates = []
        for name in self.lister_templates:
            clean = sanitizer.name(name)
            if clean and clean not in templates:
                templates.append(clean)

        configs = {}
        for name, config in self.lister_configs.items():
            clean = sanitizer.name(name)
            if clean not in templates:
                logger.debug("Dropping lister config of disabled template %s", name)
                continue
            configs[clean] = config.to_dict()

        page_size = min(max(_as_int(self.page_size, DEFAULT_PAGE_SIZE), PAGE_SIZE_MIN), PAGE_SIZE_MAX)

        blob = dict(existing or {})
        blob.update(
            {
                KEY_TEMPLATES: templates,
                KEY_CONFIGS: configs,
                KEY_PAGE_SIZE: page_size,
                KEY_SHOW_HELP: bool(self.show_help),
                KEY_HIDE_CHILDREN: bool(self.hide_children),
                KEY_RENAME_EDIT: bool(self.rename_edit),
                KEY_SHOW_VIEW: bool(self.show_view),
            }
        )
        return blob


class SettingsManager:
    """Loads and saves lister settings from JSON files or a config store."""

    def load(self, path: Union[str, Path]) -> StudioSettings:
        """Load settings from a JSON settings file.

        Raises:
            ConfigError: If the file is missing or not a JSON object.
        """
        return StudioSettings.from_blob(self._read_blob(Path(path)))

    def save(self, settings: StudioSettings, path: Union[str, Path]) -> Dict[str, Any]:
        """Write settings to a JSON file, keeping unrelated keys already in it.

        Raises:
            ConfigError: If the file cannot be read or written.
        """
        path = Path(path)
        existing = self._read_blob(path) if path.exists() else {}
        blob = settings.to_blob(existing)

        try:
            with open(path, "w", encoding="utf-8") as f:
                json.dump(blob, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save settings to {path}: {str(e)}") from e

        logger.info("Saved lister settings to %s", path)
        return blob

    def load_from_store(self, store: ConfigStore) -> StudioSettings:
        return StudioSettings.from_blob(store.get_config())

    def save_to_store(self, settings: StudioSettings, store: ConfigStore) -> Dict[str, Any]:
        blob = settings.to_blob(store.get_config())
        store.save_config(blob)
        return blob

    def _read_blob(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            raise ConfigError(f"Settings file not found: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                blob = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in settings file {path}: {str(e)}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load settings file {path}: {str(e)}") from e

        if not isinstance(blob, dict):
            raise ConfigError(f"Settings file must contain a JSON object: {path}")

        logger.info("Loaded lister settings from %s", path)
        return blob


def _as_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, (bool, int, float)):
        return bool(value)
    if isinstance(value, str):
        return value.strip() not in ("", "0")
    return default
