"""Prompt construction for query analysis."""

from __future__ import annotations

from aiexplain.models import AnalysisRequest

PROMPT_TEMPLATE = """I have a MySQL query analysis request. Please analyze the information below and provide:
1. An explanation of the EXPLAIN plan, in particular why each select_type and access type (the "type" column) has its current value
2. Query optimization suggestions based on the table structures and indexes
3. Potential problems in the current execution plan

MySQL version: {version}

The analysis request data, in JSON format:

{payload}

Please give a detailed answer with clear explanations and actionable optimization advice."""


def build_prompt(request: AnalysisRequest) -> str:
    """
    Render the analysis request as an instruction for the model.

    Same request in, byte-identical prompt out.
    """
    return PROMPT_TEMPLATE.format(
        version=request.mysql_version or "unknown",
        payload=request.to_json(),
    )
