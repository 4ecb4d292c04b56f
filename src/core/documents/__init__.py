from src.core.documents.models import DocumentSequence
from src.core.documents.number_generator import (
    DocumentNumberGenerator,
    ReceiptPrefix,
    get_document_number,
)

__all__ = ["DocumentSequence", "DocumentNumberGenerator", "ReceiptPrefix", "get_document_number"]
