"""Personal reading-list tracker: timeline, table and graph views with CSV import/export."""

__version__ = "0.1.0"
