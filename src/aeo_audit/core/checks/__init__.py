"""The six AEO check functions, one module each."""

from aeo_audit.core.checks.answer_format import check_answer_format, score_answer_format
from aeo_audit.core.checks.extractability import check_extractability, score_extractability
from aeo_audit.core.checks.llms_txt import check_llms_txt
from aeo_audit.core.checks.metadata import check_ai_metadata, score_ai_metadata
from aeo_audit.core.checks.robots import check_ai_crawler_access
from aeo_audit.core.checks.schema import check_structured_data, score_structured_data

__all__ = [
    "check_ai_crawler_access",
    "check_ai_metadata",
    "check_answer_format",
    "check_extractability",
    "check_llms_txt",
    "check_structured_data",
    "score_ai_metadata",
    "score_answer_format",
    "score_extractability",
    "score_structured_data",
]
