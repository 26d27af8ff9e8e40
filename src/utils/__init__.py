"""
Generic utility functions shared across modules.

Includes token splitting, quote stripping, and float parsing/formatting.
"""
