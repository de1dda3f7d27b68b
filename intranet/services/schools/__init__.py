"""
School services: enrollment (matriculados) import.
"""

from .enrollment_import import (
    CourseIndex,
    EnrollmentImportService,
    EnrollmentRow,
    group_rows,
    parse_level,
    read_upload,
)

__all__ = [
    "CourseIndex",
    "EnrollmentImportService",
    "EnrollmentRow",
    "group_rows",
    "parse_level",
    "read_upload",
]
