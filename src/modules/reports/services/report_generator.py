from abc import ABC, abstractmethod

from langchain_core.messages import HumanMessage

from src.core.utils import get_logger
from src.modules.ai.infrastructure.llm import LLMFactory
from src.modules.reports.exceptions import ReportGenerationError
from src.modules.reports.prompts.analysis import build_analysis_prompt

logger = get_logger(__name__)

FALLBACK_TEXT = "Error generating report"


class IReportGenerator(ABC):
    @abstractmethod
    def generate(self, company_name: str, ticker: str) -> str:
        """Return the report text for one company. Called once per request."""
        pass


class LLMReportGenerator(IReportGenerator):
    """
    Produces the analysis report with a single, non-streaming chat call.
    """

    def __init__(self, llm_factory: LLMFactory, model_key: str):
        self.llm_factory = llm_factory
        self.model_key = model_key

    def generate(self, company_name: str, ticker: str) -> str:
        prompt = build_analysis_prompt(company_name, ticker)

        try:
            model = self.llm_factory.get_model(self.model_key)
            response = model.invoke([HumanMessage(content=prompt)])
        except Exception as e:
            logger.error("llm_call_failed", model=self.model_key, ticker=ticker, error=str(e))
            raise ReportGenerationError(f"Failed to generate report for {ticker}", original_error=e)

        return self._extract_text(response.content)

    @staticmethod
    def _extract_text(content) -> str:
        if isinstance(content, str):
            return content or FALLBACK_TEXT

        # Content blocks: only the first block is the report, as long as it is text
        if content:
            first = content[0]
            if isinstance(first, str):
                return first
            if isinstance(first, dict) and first.get("type") == "text":
                return first.get("text", FALLBACK_TEXT)
        return FALLBACK_TEXT
