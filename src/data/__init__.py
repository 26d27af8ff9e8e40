"""
Numeric CSV reading, writing, and the table/error contract.

Handles tolerant parsing of hand-produced numeric data files into dense
float64 tables, and canonical serialization of tables back to text.
"""
