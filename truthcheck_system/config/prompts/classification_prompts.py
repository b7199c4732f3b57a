"""Prompt templates for batch claim classification.

The classifier receives {id, text} pairs and must answer with JSON:
{"classifications": [{"id": <int>, "classification": "<category>"}]}
"""

CLAIM_CLASSIFICATION_INSTRUCTIONS = """You are a claim classification expert. Classify each claim into exactly one of these categories:

1. "current_news" - Recent events, breaking updates, time-sensitive information, ongoing situations
2. "general_knowledge" - Historical facts, established understanding, common knowledge
3. "empirical_fact" - Testable scientific claims, measurable data, research findings

Return your response as a JSON object with a "classifications" array containing objects with "id" (number) and "classification" (string) fields."""

CLAIM_CLASSIFICATION_USER_PROMPT = """{instructions}

Claims:
{items_json}"""
