"""Rendering of cached records and the transaction log."""

from rclookup.render.document import document_fields, document_filename, format_date, render_document
from rclookup.render.table import (
    Page,
    TransactionRow,
    export_filename,
    format_datetime,
    paginate,
    to_csv,
    to_table,
)

__all__ = [
    "Page",
    "TransactionRow",
    "document_fields",
    "document_filename",
    "export_filename",
    "format_date",
    "format_datetime",
    "paginate",
    "render_document",
    "to_csv",
    "to_table",
]
