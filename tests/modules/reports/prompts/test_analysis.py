from src.modules.reports.prompts.analysis import ANALYSIS_PROMPT, build_analysis_prompt


def test_company_and_ticker_are_inserted():
    prompt = build_analysis_prompt("Tesla Inc.", "TSLA")

    assert prompt.startswith("I'm analyzing Tesla Inc. (TSLA) as a potential long-term investment")


def test_only_first_placeholder_is_replaced():
    prompt = build_analysis_prompt("Tesla Inc.", "TSLA")

    assert prompt.count("[COMPANY_NAME]") == ANALYSIS_PROMPT.count("[COMPANY_NAME]") - 1


def test_prompt_covers_report_sections():
    prompt = build_analysis_prompt("Apple Inc.", "AAPL")

    for section in ("BUSINESS MODEL DEEP DIVE", "COMPETITIVE ADVANTAGES", "FINANCIAL QUALITY METRICS"):
        assert section in prompt
