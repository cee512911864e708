from factstream.integrations.oracle import OracleVerdict, VerificationOracle
from factstream.utils.text import contains_any

DEBUNKED_KEYWORDS = ('vaccine', '5g')
UNVERIFIED_KEYWORDS = ('government', 'cover')


class KeywordOracle(VerificationOracle):
    """
    Deterministic stand-in for a fact-checking service.
    Branches purely on keyword containment, so the same text always gets the same verdict.
    """
    name = 'keyword'

    def check(self, text, context=None):
        if contains_any(text, DEBUNKED_KEYWORDS):
            return OracleVerdict(
                verdict='false',
                confidence=92,
                correction='This claim has been debunked by multiple health authorities and scientific studies.',
                context=(
                    'Misinformation about vaccines and 5G technology often spreads during health crises. '
                    'Official health organizations provide evidence-based information.'
                ),
                sources=[
                    {'name': 'WHO Health Advisory', 'url': 'https://www.who.int/emergencies', 'credibility': 'high'},
                    {'name': 'CDC Scientific Review', 'url': 'https://www.cdc.gov/', 'credibility': 'high'},
                    {'name': 'Medical Journal Research', 'url': 'https://www.nejm.org/', 'credibility': 'high'},
                ],
                related_claims=[
                    'Similar false claims about vaccine side effects',
                    '5G conspiracy theories during pandemic',
                ],
            )

        if contains_any(text, UNVERIFIED_KEYWORDS):
            return OracleVerdict(
                verdict='unverified',
                confidence=45,
                correction='Insufficient credible evidence to verify this claim. Investigation ongoing.',
                context=(
                    'Claims involving government actions require careful verification '
                    'from multiple independent sources.'
                ),
                sources=[
                    {'name': 'Government Response Team', 'url': 'https://www.usa.gov/', 'credibility': 'high'},
                    {'name': 'Independent Investigators', 'url': 'https://www.propublica.org/', 'credibility': 'medium'},
                ],
                related_claims=['Similar unverified government-related claims'],
            )

        location = (context or {}).get('location')
        return OracleVerdict(
            verdict='partially-true',
            confidence=76,
            correction=(
                'The claim contains some accurate information but lacks important context '
                'and contains misleading elements.'
            ),
            context=(
                'Partial truths can be misleading during crises. Complete and accurate information '
                'is essential for public safety.'
                + (f' Check official updates for {location}.' if location else '')
            ),
            sources=[
                {'name': 'Emergency Management Agency', 'url': 'https://www.fema.gov/', 'credibility': 'high'},
                {'name': 'Local News Verification', 'url': 'https://www.apnews.com/', 'credibility': 'medium'},
                {'name': 'Community Reports', 'url': 'https://www.reddit.com/', 'credibility': 'low'},
            ],
            related_claims=[
                'Related emergency response claims',
                'Similar partially accurate statements',
            ],
        )
