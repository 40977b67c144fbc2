"""I/O utilities for CSV import/export."""

from .export_csv import export_allocations_csv, export_progress_csv, export_timetable_csv
from .import_csv import import_children_csv, import_staff_csv, import_templates_csv

__all__ = [
    "import_children_csv",
    "import_staff_csv",
    "import_templates_csv",
    "export_timetable_csv",
    "export_allocations_csv",
    "export_progress_csv",
]
