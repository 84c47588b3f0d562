"""widgetsmith: LLM pipeline that turns feature requests into dashboard widget code."""
