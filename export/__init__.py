"""Export-Modul: iCalendar-Export für den Wochenstundenplan."""

from export.ical_export import ICalExporter

__all__ = ["ICalExporter"]
