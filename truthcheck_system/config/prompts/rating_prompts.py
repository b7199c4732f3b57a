"""Rubric prompts for the AI-credibility and tone signals.

Both rubrics ask for a bare 0-10 number. Replies that do not parse to a
number in range make the signal unavailable.
"""

CREDIBILITY_RATING_PROMPT = """You are a fact-checking assistant. Analyze the following claim for credibility.

Claim: "{claim}"
Classification: {classification}

Rate the credibility of this claim on a scale of 0-10, where:
- 0 = Completely false or misleading
- 5 = Uncertain, needs verification
- 10 = Highly credible and verifiable

Consider:
1. Logical consistency
2. Plausibility based on general knowledge
3. Presence of verifiable facts
4. Absence of logical fallacies

Respond with ONLY a number between 0 and 10 (decimals allowed, e.g., 7.5)."""

TONE_RATING_PROMPT = """You are a fact-checking assistant. Analyze the tone and language of the following claim.

Claim: "{claim}"

Rate the neutrality and objectivity of this claim's tone on a scale of 0-10, where:
- 0 = Highly emotional, biased, or manipulative language
- 5 = Somewhat neutral with mild bias
- 10 = Completely neutral, objective, and factual tone

Consider:
1. Emotional language and charged words
2. Loaded terms or propaganda techniques
3. Objectivity vs. subjective opinions
4. Sensationalism or exaggeration

Respond with ONLY a number between 0 and 10 (decimals allowed, e.g., 6.5)."""
