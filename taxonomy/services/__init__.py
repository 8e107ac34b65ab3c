"""Business logic services."""

from taxonomy.services.bulk_import import (
    BulkImportService,
    ImportBatch,
    ImportRow,
    RowAssignment,
    parse_rows,
)

__all__ = [
    "BulkImportService",
    "ImportBatch",
    "ImportRow",
    "RowAssignment",
    "parse_rows",
]
