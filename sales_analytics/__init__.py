"""
Sales Analytics Report Engine

Eight aggregation reports over a flat table of marketplace order records.
"""

__version__ = "1.0.0"
