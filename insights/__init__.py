"""
insights — LLM prompt flows that turn business data into text forecasts.
"""
