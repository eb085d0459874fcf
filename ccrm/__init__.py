"""
CCRM: Campus Course & Records Manager

An in-memory academic records manager tracking students, courses, instructors
and enrollments, with CSV import/export and ZIP-based backups over a local
directory tree.
"""

__version__ = "1.0.0"
__author__ = "CCRM Team"
__description__ = "Campus Course & Records Manager"
