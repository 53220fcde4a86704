"""Konfigurationsmanager: Laden, Speichern und Validieren der Engine-Konfiguration.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_engine_config
from config.schema import EngineConfig

logger = logging.getLogger(__name__)

yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# ITC-2019 Bewertungs-Engine — Konfiguration
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "evaluation": (
        "Auswertung",
        "num_workers > 1 verteilt die Constraints auf Threads.",
    ),
    "logging": (
        "Logging",
        None,
    ),
    "report": (
        "Bericht",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "engine.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path else self.DEFAULT_CONFIG

    def exists(self) -> bool:
        return self.path.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> EngineConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = Path(path) if path else self.path
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus, um sie anzulegen."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            return EngineConfig.model_validate(dict(raw or {}))
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self, path: Optional[Path] = None) -> EngineConfig:
        """Wie load(), aber ohne Datei → Standardkonfiguration."""
        target = Path(path) if path else self.path
        if not target.exists():
            logger.debug(f"Keine Konfiguration unter {target} – verwende Standardwerte")
            return default_engine_config()
        return self.load(target)

    # ─── Speichern ───

    def save(self, config: EngineConfig, path: Optional[Path] = None) -> Path:
        """Speichere Config als YAML mit Abschnittskommentaren."""
        target = Path(path) if path else self.path
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        logger.info(f"Konfiguration gespeichert: {target}")
        return target

    def _build_commented_yaml(self, config: EngineConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )
        return cm
