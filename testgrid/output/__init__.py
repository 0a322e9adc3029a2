"""Output formatting for validation reports and run summaries."""

from .formatter import format_validation_result
from .summary import format_summary, human_readable_time_diff

__all__ = ["format_validation_result", "format_summary", "human_readable_time_diff"]
