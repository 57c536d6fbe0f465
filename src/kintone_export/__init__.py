"""
kintone-export - Export kintone app records to CSV or JSON.

Flattens subtables into physical rows, formats every field type for display,
transcodes the output to a requested character set and can download file
attachments alongside the export.
"""

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = ["__version__"]
