"""Auswertungen: Überschneidungsprüfung und Notenbericht."""
