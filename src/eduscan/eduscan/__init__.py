"""EduScan package.

Classroom attendance by live face scanning. The package is organized by
feature modules (students, users, attendance, scanning, reports, ...) with a
thin Flask controller layer over service/repository layers.
"""
