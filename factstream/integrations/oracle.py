"""Verification oracle contract and factory.

An oracle looks at claim text (plus optional location/urgency context) and
returns an ``OracleVerdict``. It never touches the database; persisting the
verdict is the verification pipeline's job.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from factstream.models.claim import (
    CREDIBILITY_LEVELS, STATUS_FALSE, STATUS_INVESTIGATING, STATUS_VERIFIED,
)

# Raw oracle labels -> claim verification status
VERDICT_STATUS = {
    'true': STATUS_VERIFIED,
    'partially-true': STATUS_VERIFIED,
    'false': STATUS_FALSE,
    'unverified': STATUS_INVESTIGATING,
}


@dataclass
class OracleVerdict:
    verdict: str
    confidence: int
    correction: str
    sources: List[Dict[str, str]] = field(default_factory=list)
    context: Optional[str] = None
    related_claims: List[str] = field(default_factory=list)

    def __post_init__(self):
        if self.verdict not in VERDICT_STATUS:
            raise ValueError(f"Unknown verdict label: {self.verdict!r}")
        if not isinstance(self.confidence, int) or not 0 <= self.confidence <= 100:
            raise ValueError(f"Confidence must be an integer in [0, 100], got {self.confidence!r}")
        for source in self.sources:
            if source.get('credibility') not in CREDIBILITY_LEVELS:
                raise ValueError(f"Invalid source credibility: {source.get('credibility')!r}")

    @property
    def status(self):
        return VERDICT_STATUS[self.verdict]

    def to_dict(self):
        return {
            'verdict': self.verdict,
            'status': self.status,
            'confidence': self.confidence,
            'correction': self.correction,
            'context': self.context,
            'sources': list(self.sources),
            'related_claims': list(self.related_claims),
        }


class VerificationOracle:
    name = 'base'

    def check(self, text, context=None) -> OracleVerdict:
        """Produce a verdict for ``text``. Raise OracleUnavailableError when unreachable."""
        raise NotImplementedError


def build_oracle(app_config):
    """Instantiate the oracle selected by VERIFICATION_ORACLE."""
    kind = (app_config.get('VERIFICATION_ORACLE') or 'keyword').lower()
    if kind == 'keyword':
        from factstream.integrations.keyword_oracle import KeywordOracle
        return KeywordOracle()
    if kind == 'llm':
        from factstream.integrations.llm_oracle import LLMOracle
        return LLMOracle(app_config)
    raise ValueError(f"Unknown VERIFICATION_ORACLE: {kind!r}")
