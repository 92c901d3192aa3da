"""
Settings persistence model for the GUI.

Persists slice settings and UI preferences as JSON. Grid layouts are
never stored: every image starts from the default boundaries.

Any malformed data results in graceful fallback to defaults, never a crash.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from PySide6.QtCore import QObject, Signal

from gridslice.core.models import (
    GRID_PRESETS,
    MAX_QUALITY,
    MIN_QUALITY,
    GridConfig,
    OutputFormat,
    SliceConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_PRESET = "3x3"


class SettingsStore(QObject):
    """Lightweight JSON-backed store for persisting GUI preferences."""

    sliceConfigChanged = Signal(object)
    CURRENT_VERSION = 1

    def __init__(self, path: Path) -> None:
        super().__init__()
        self.path = path
        self.data: Dict[str, object] = {}
        self.load_error: Optional[str] = None

        if self.path.exists():
            try:
                self.data = json.loads(self.path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                self.load_error = f"Settings file is corrupted: {e}"
                self.data = {}
            except OSError as e:
                self.load_error = f"Failed to read settings: {e}"
                self.data = {}
            if self.load_error:
                logger.warning(f"{self.load_error}; using defaults")

        # Ensure version is set for new files
        if "version" not in self._get_dict():
            self.data["version"] = self.CURRENT_VERSION

    # ─────────────────────────────────────────────────────────────────────────
    # Slice settings
    # ─────────────────────────────────────────────────────────────────────────

    def get_slice_config(self) -> SliceConfig:
        """Stored slice settings; invalid entries fall back to defaults."""
        raw = self._get_dict().get("slice")
        if not isinstance(raw, dict):
            return SliceConfig()

        defaults = SliceConfig()
        quality = self._safe_float(raw.get("quality"), defaults.quality)
        quality = min(MAX_QUALITY, max(MIN_QUALITY, quality))

        try:
            output_format = OutputFormat(raw.get("output_format", defaults.output_format.value))
        except ValueError:
            output_format = defaults.output_format

        return SliceConfig(
            quality=quality,
            optimize_resolution=bool(raw.get("optimize_resolution", defaults.optimize_resolution)),
            output_format=output_format,
        )

    def set_slice_config(self, config: SliceConfig) -> None:
        self._get_dict()["slice"] = {
            "quality": config.quality,
            "optimize_resolution": config.optimize_resolution,
            "output_format": config.output_format.value,
        }
        self._save()
        self.sliceConfigChanged.emit(config)

    # ─────────────────────────────────────────────────────────────────────────
    # UI preferences
    # ─────────────────────────────────────────────────────────────────────────

    def get_grid_preset(self) -> str:
        ui = self._get_ui()
        preset = ui.get("grid_preset")
        return preset if preset in GRID_PRESETS else DEFAULT_PRESET

    def get_grid_config(self) -> GridConfig:
        return GridConfig.from_preset(self.get_grid_preset())

    def set_grid_preset(self, preset: str) -> None:
        if preset not in GRID_PRESETS:
            raise ValueError(f"Unknown grid preset: {preset!r}")
        self._get_ui()["grid_preset"] = preset
        self._save()

    def get_last_directory(self) -> Optional[str]:
        value = self._get_ui().get("last_directory")
        return value if isinstance(value, str) else None

    def set_last_directory(self, value: str) -> None:
        self._get_ui()["last_directory"] = value
        self._save()

    def get_window_geometry(self) -> Optional[str]:
        value = self._get_ui().get("window_geometry")
        return value if isinstance(value, str) else None

    def set_window_geometry(self, geometry: str) -> None:
        self._get_ui()["window_geometry"] = geometry
        self._save()

    # ─────────────────────────────────────────────────────────────────────────
    # Internals
    # ─────────────────────────────────────────────────────────────────────────

    def _safe_float(self, value: Any, default: float) -> float:
        """Safely convert a value to float, returning default on failure."""
        if value is None:
            return default
        try:
            return float(value)
        except (ValueError, TypeError):
            return default

    def _get_dict(self) -> Dict[str, object]:
        if not isinstance(self.data, dict):
            self.data = {}
        return self.data  # type: ignore[return-value]

    def _get_ui(self) -> Dict[str, object]:
        ui = self._get_dict().setdefault("ui", {})
        if not isinstance(ui, dict):
            ui = self.data["ui"] = {}
        return ui  # type: ignore[return-value]

    def _save(self) -> None:
        """Safely write settings with atomic replacement.

        Uses a temp file to prevent corruption if write is interrupted.
        """
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            # Write to temp file first
            temp_path = self.path.with_suffix('.tmp')
            temp_path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")

            # Atomic rename (overwrites existing)
            temp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Failed to save settings: {e}")
            if temp_path is not None and temp_path.exists():
                try:
                    temp_path.unlink()
                except OSError:
                    pass
