"""
Noloco integration for the workflow engine: schema-driven field mapping,
filtered cursor-paginated record queries, record writes and a polling trigger.
"""

__version__ = "0.1.0"
