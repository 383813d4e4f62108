"""
Repository Maintainability Index.

Scores a repository's maintainability from documentation, commit hygiene,
activity, issue throughput, community size and branch hygiene, with optional
AI commentary.
"""

__version__ = "1.0.0"
