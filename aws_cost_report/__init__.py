"""
AWS Daily Cost Report.

Compares yesterday's AWS spend with the day before and files the result as a GitHub issue.
"""

__version__ = "1.0.0"
__author__ = "Platform Engineering"
