from src.modules.reports.services.report_generator import IReportGenerator, LLMReportGenerator
from src.modules.reports.services.report_service import GeneratedReport, ReportService

__all__ = [
    "IReportGenerator",
    "LLMReportGenerator",
    "GeneratedReport",
    "ReportService",
]
