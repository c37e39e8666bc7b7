"""Fehlertypen der Berechnungs-Engine."""


class InvalidInputError(ValueError):
    """Eingabe kann nicht sicher verarbeitet werden (z.B. Gewichte > 100 %).

    Wird nie abgefangen oder korrigiert; der Aufrufer zeigt die Meldung an.
    """
