"""Konfigurationsschema der Bewertungs-Engine (Pydantic v2)."""

from typing import Literal

from pydantic import BaseModel, Field


# ─── AUSWERTUNG ───

class EvaluationConfig(BaseModel):
    """Steuerung der Constraint-Auswertung."""
    # Anzahl Worker-Threads (0 oder 1 = sequentiell)
    num_workers: int = Field(0, ge=0, le=64,
        description="Worker-Threads für parallele Auswertung (0/1 = sequentiell)")
    # Machbarkeitsprüfung bricht bei der ersten verletzten harten Constraint ab
    stop_at_first_hard_violation: bool = Field(False,
        description="Bei erster harter Verletzung abbrechen (interaktiv)")
    # Studentenkonflikte in Bericht und Zielfunktion einbeziehen
    include_student_conflicts: bool = Field(True,
        description="Studentenkonflikte bewerten")


# ─── LOGGING ───

class LoggingConfig(BaseModel):
    """Logging-Einstellungen für die CLI."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field("INFO",
        description="Log-Level")
    # Tracebacks über Rich formatieren
    rich_tracebacks: bool = Field(True,
        description="Tracebacks mit Rich formatieren")


# ─── BERICHT ───

class ReportConfig(BaseModel):
    """Darstellung des Bewertungsberichts."""
    # Maximale Anzahl Zeilen der Verletzungstabelle
    max_rows: int = Field(50, ge=1,
        description="Maximale Zeilen in der Verletzungstabelle")
    # Auch erfüllte Constraints auflisten
    show_satisfied: bool = Field(False,
        description="Erfüllte Constraints ebenfalls anzeigen")


# ─── GESAMT-CONFIG ───

class EngineConfig(BaseModel):
    """Gesamtkonfiguration der Engine."""
    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
