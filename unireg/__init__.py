"""
UniReg: An In-Memory University Registry

Keeps students, courses and grade records together with the registrations
between them, enforcing enrollment capacity, faculty matching and student
status rules, and answers reporting queries over the stored data.
"""

__version__ = "1.0.0"
__author__ = "UniReg Development Team"
__description__ = "In-memory university registry with enrollment rules and reporting"
