"""
Configuration loading and validation for reader and writer settings.

Provides immutable settings objects with upfront validation, loadable from
code or from NUMCSV_* environment variables.
"""
