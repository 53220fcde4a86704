"""Fehlerhierarchie der Bewertungs-Engine.

Konstruktionsfehler (ungültige IDs, negative Kapazitäten, kaputte Zeitfenster)
melden die Pydantic-Validatoren direkt als ValidationError. Die Klassen hier
decken die übrigen Fälle ab.
"""


class TimetablingError(Exception):
    """Basisklasse aller Engine-Fehler."""


class InvalidArgumentError(TimetablingError, ValueError):
    """Bit-Vektoren unterschiedlicher Länge wurden verknüpft."""


class NotFoundError(TimetablingError, LookupError):
    """Ein gesuchtes Element (z.B. erstes gesetztes Bit) existiert nicht."""


class AssignmentError(TimetablingError, ValueError):
    """Verletzung des Zuweisungsvertrags (Zeit, Raum oder Einschreibung)."""


class UnscheduledEventError(TimetablingError, RuntimeError):
    """Auswertung eines Events ohne Zeit (oder ohne benötigten Raum)."""


class ProblemDefinitionError(TimetablingError, ValueError):
    """Inkonsistente Probleminstanz (unbekannte IDs, Zyklen, Wegezeit-Matrix)."""


class ItcFormatError(TimetablingError, ValueError):
    """Fehlerhafte ITC-2019-XML-Datei (Problem oder Lösung)."""
