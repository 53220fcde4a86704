"""Konstanten und Standardwerte der Bewertungs-Engine.

DISTRIBUTION_METADATA beschreibt jede Verteilungs-Constraint nach ITC 2019:
  family        – "pair" (paarweise geprüft) oder "aggregate" (alle Klassen gemeinsam)
  params        – Namen der Parameter in der Reihenfolge des XML-Typs, z.B. MaxBlock(M,S)
  week_average  – Soft-Strafe wird am Ende ganzzahlig durch nr_weeks geteilt
  uses_rooms    – Prädikat benötigt die gewählten Räume
"""

from config.schema import (
    EngineConfig,
    EvaluationConfig,
    LoggingConfig,
    ReportConfig,
)

# Ein Slot = 5 Minuten → 288 Slots decken den ganzen Tag ab (Mitternacht bis Mitternacht)
SLOTS_PER_DAY = 288
MAX_DAYS_PER_WEEK = 7


DISTRIBUTION_METADATA: dict[str, dict] = {
    # ── Paarweise ──
    "SameStart":      {"family": "pair", "params": [], "week_average": False, "uses_rooms": False,
                       "description": "Alle Klassen beginnen im selben Slot."},
    "SameTime":       {"family": "pair", "params": [], "week_average": False, "uses_rooms": False,
                       "description": "Tageszeiten liegen vollständig in der längsten Klasse."},
    "DifferentTime":  {"family": "pair", "params": [], "week_average": False, "uses_rooms": False,
                       "description": "Tageszeiten überlappen sich nicht."},
    "SameDays":       {"family": "pair", "params": [], "week_average": False, "uses_rooms": False,
                       "description": "Tagesmuster sind ineinander enthalten."},
    "DifferentDays":  {"family": "pair", "params": [], "week_average": False, "uses_rooms": False,
                       "description": "Keine gemeinsamen Wochentage."},
    "SameWeeks":      {"family": "pair", "params": [], "week_average": False, "uses_rooms": False,
                       "description": "Wochenmuster sind ineinander enthalten."},
    "DifferentWeeks": {"family": "pair", "params": [], "week_average": False, "uses_rooms": False,
                       "description": "Keine gemeinsamen Wochen."},
    "Overlap":        {"family": "pair", "params": [], "week_average": False, "uses_rooms": False,
                       "description": "Klassen überlappen in Zeit, Tag und Woche."},
    "NotOverlap":     {"family": "pair", "params": [], "week_average": False, "uses_rooms": False,
                       "description": "Klassen überlappen sich nie."},
    "SameRoom":       {"family": "pair", "params": [], "week_average": False, "uses_rooms": True,
                       "description": "Alle Klassen im selben Raum."},
    "DifferentRoom":  {"family": "pair", "params": [], "week_average": False, "uses_rooms": True,
                       "description": "Alle Klassen in verschiedenen Räumen."},
    "SameAttendees":  {"family": "pair", "params": [], "week_average": False, "uses_rooms": True,
                       "description": "Keine Überlappung, Wegezeit zwischen Räumen eingehalten."},
    "Precedence":     {"family": "pair", "params": [], "week_average": False, "uses_rooms": False,
                       "description": "Erste Termine in der angegebenen Reihenfolge."},
    "WorkDay":        {"family": "pair", "params": ["S"], "week_average": False, "uses_rooms": False,
                       "description": "Höchstens S Slots vom ersten Beginn bis zum letzten Ende pro Tag."},
    "MinGap":         {"family": "pair", "params": ["G"], "week_average": False, "uses_rooms": False,
                       "description": "Mindestens G Slots Abstand am selben Tag."},
    # ── Aggregiert ──
    "MaxDays":        {"family": "aggregate", "params": ["D"], "week_average": False, "uses_rooms": False,
                       "description": "Höchstens D verschiedene Wochentage."},
    "MaxDayLoad":     {"family": "aggregate", "params": ["S"], "week_average": True, "uses_rooms": False,
                       "description": "Höchstens S Slots Unterricht pro Tag und Woche."},
    "MaxBreaks":      {"family": "aggregate", "params": ["R", "S"], "week_average": True, "uses_rooms": False,
                       "description": "Höchstens R Pausen > S Slots pro Tag."},
    "MaxBlock":       {"family": "aggregate", "params": ["M", "S"], "week_average": True, "uses_rooms": False,
                       "description": "Blöcke (Lücken ≤ S) höchstens M Slots lang."},
}


def default_evaluation() -> EvaluationConfig:
    """Sequentielle Auswertung mit vollständigem Bericht."""
    return EvaluationConfig(
        num_workers=0,
        stop_at_first_hard_violation=False,
        include_student_conflicts=True,
    )


def default_engine_config() -> EngineConfig:
    """Vollständige Standard-Konfiguration der Engine."""
    return EngineConfig(
        evaluation=default_evaluation(),
        logging=LoggingConfig(level="INFO", rich_tracebacks=True),
        report=ReportConfig(max_rows=50, show_satisfied=False),
    )
