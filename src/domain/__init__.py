"""Domain layer: errors, schemas and the report document model."""

from .document import (
    Block,
    BlockVisitor,
    Cell,
    Document,
    OutlineLine,
    ParseNote,
    PlainText,
    RenderedReport,
    Spacer,
    Table,
    TableKind,
    Title,
    TitleStyle,
)
from .errors import ErrorCodes, PolicyRejectError
from .schemas import ReportRequest, RunLog, WarningLog

__all__ = [
    "PolicyRejectError",
    "ErrorCodes",
    "ReportRequest",
    "RunLog",
    "WarningLog",
    "Block",
    "BlockVisitor",
    "Cell",
    "Document",
    "OutlineLine",
    "ParseNote",
    "PlainText",
    "RenderedReport",
    "Spacer",
    "Table",
    "TableKind",
    "Title",
    "TitleStyle",
]
