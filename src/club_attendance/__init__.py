"""Club attendance package.

Attendance core for the tutor panel of a student-club system, organized by
feature modules (students, attendance, reports, ...) with thin HTTP adapters
over the backend REST API and pure service layers.
"""
