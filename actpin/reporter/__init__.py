from .console_reporter import report_entries, report_failures, report_outdated, report_plans
from .json_reporter import report_json

__all__ = ["report_entries", "report_failures", "report_outdated", "report_plans", "report_json"]
