"""Evidence scoring and trust aggregation.

- AIScorer: AI-credibility and tone signals (remote rater)
- ScholarScorer: scholarly corroboration for empirical claims
- WebScorer: cross-spectrum web reinforcement
- TrustCalculator: weighted aggregation with renormalization
- ScoreAggregator: concurrent per-claim scoring with per-signal timeouts
- Serper*SearchProvider: concrete search collaborators
"""

from truthcheck_system.agents.sifters.scoring.ai_scorer import AIScorer
from truthcheck_system.agents.sifters.scoring.scholar_scorer import (
    ScholarScorer,
    calculate_scholar_score,
    extract_scholar_terms,
)
from truthcheck_system.agents.sifters.scoring.score_aggregator import ScoreAggregator
from truthcheck_system.agents.sifters.scoring.search_providers import (
    SerperScholarSearchProvider,
    SerperWebSearchProvider,
)
from truthcheck_system.agents.sifters.scoring.trust_calculator import TrustCalculator
from truthcheck_system.agents.sifters.scoring.web_scorer import (
    WebScorer,
    calculate_web_score,
)

__all__ = [
    "AIScorer",
    "ScholarScorer",
    "ScoreAggregator",
    "SerperScholarSearchProvider",
    "SerperWebSearchProvider",
    "TrustCalculator",
    "WebScorer",
    "calculate_scholar_score",
    "calculate_web_score",
    "extract_scholar_terms",
]
