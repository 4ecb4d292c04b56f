from src.core.query.service import Predicate, RecordQueryService, eq, gte, in_, lte

__all__ = ["Predicate", "RecordQueryService", "eq", "gte", "in_", "lte"]
