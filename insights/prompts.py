"""
Prompt templates for the insight flows.
"""

from __future__ import annotations

import textwrap


def build_forecast_prompt(historical_data: str, market_trends: str, business_description: str) -> str:
    return textwrap.dedent(
        f"""\
        You are an AI assistant that analyzes business data and provides forecasts.

        Analyze the provided historical data, market trends, and business description to
        identify key areas that need prioritization and generate forecasts for the business.

        Historical Data: {historical_data}
        Market Trends: {market_trends}
        Business Description: {business_description}

        Based on your analysis, provide the prioritized areas and forecasts in a clear and
        concise manner. Put the key business areas to prioritize in "prioritizedAreas" and
        the forecasts, including potential challenges and opportunities, in "forecasts".
        """
    )


def build_prioritize_prompt(business_data: str) -> str:
    return textwrap.dedent(
        f"""\
        Analyze the following business data and identify the most critical areas the client
        should focus on to improve their business performance. Provide a ranked list of these
        areas in "prioritizedAreas" (most important first) and a concise summary of your
        analysis in "summary".

        Business Data: {business_data}
        """
    )
