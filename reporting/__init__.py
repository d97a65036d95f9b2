"""
Reporting module for the distress scanner.

Command-line scoring of listing exports:

    python -m reporting.cli score export.csv -o scored.csv
"""
