"""Document use cases."""

from docarchive.application.use_cases.documents.document_operations import (
    DocumentAggregateService,
)

__all__ = ["DocumentAggregateService"]
