"""Beispieldaten für Stundenplan und Notenbuch."""
