"""
uk_accounts Core Package

Shared infrastructure: logging.
"""
