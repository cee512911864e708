import logging
from datetime import datetime, timezone
from flask import current_app
from factstream.exceptions import (
    ConflictError, FactStreamError, InvalidTransitionError, OracleUnavailableError, ValidationError,
)
from factstream.extensions import db
from factstream.integrations.oracle import build_oracle
from factstream.models.claim import (
    Claim, SourceCitation, VerificationTransition, CREDIBILITY_LEVELS,
    STATUS_FALSE, STATUS_INVESTIGATING, STATUS_PENDING, STATUS_VERIFIED, TERMINAL_STATUSES,
)
from factstream.services.claim_store import ClaimStore
from factstream.utils.text import is_http_url

logger = logging.getLogger(__name__)

# Verification only moves forward; terminal states have no outgoing edges.
ALLOWED_TRANSITIONS = {
    STATUS_PENDING: frozenset({STATUS_INVESTIGATING}),
    STATUS_INVESTIGATING: frozenset({STATUS_INVESTIGATING, STATUS_FALSE, STATUS_VERIFIED}),
    STATUS_FALSE: frozenset(),
    STATUS_VERIFIED: frozenset(),
}


def check_transition(from_status, to_status, operation=None, claim_id=None):
    if to_status not in ALLOWED_TRANSITIONS.get(from_status, ()):
        raise InvalidTransitionError(from_status, to_status, operation=operation, claim_id=claim_id)


def transition_path(from_status, to_status):
    """Edges needed to move from_status to to_status. A pending claim passes through investigating."""
    if from_status == STATUS_PENDING:
        if to_status == STATUS_INVESTIGATING:
            return [(STATUS_PENDING, STATUS_INVESTIGATING)]
        return [(STATUS_PENDING, STATUS_INVESTIGATING), (STATUS_INVESTIGATING, to_status)]
    return [(from_status, to_status)]


def _check_confidence(confidence, operation, claim_id):
    if isinstance(confidence, bool) or not isinstance(confidence, int) or not 0 <= confidence <= 100:
        raise ValidationError(
            f"Confidence must be an integer in [0, 100], got {confidence!r}",
            operation=operation, claim_id=claim_id,
        )


def _check_sources(sources, operation, claim_id):
    for source in sources:
        if not source.get('name'):
            raise ValidationError('Source citation needs a name', operation=operation, claim_id=claim_id)
        if not is_http_url(source.get('url')):
            raise ValidationError(
                f"Malformed source URL: {source.get('url')!r}", operation=operation, claim_id=claim_id,
            )
        if source.get('credibility') not in CREDIBILITY_LEVELS:
            raise ValidationError(
                f"Invalid source credibility: {source.get('credibility')!r}",
                operation=operation, claim_id=claim_id,
            )


class VerificationPipeline:
    """
    Drives a claim through pending -> investigating -> {false, verified}.

    Verdicts come from a pluggable oracle. Nothing is written until the oracle
    has answered, and everything for one verdict is written in one transaction,
    so an unreachable oracle or an abandoned call leaves the claim untouched.
    """

    def __init__(self, oracle=None, claim_store=None):
        self.oracle = oracle or build_oracle(current_app.config)
        self.claims = claim_store or ClaimStore()

    def begin_investigation(self, claim_id):
        op = 'begin_investigation'
        claim = self.claims.get(claim_id, operation=op)
        if claim.verification_status == STATUS_INVESTIGATING:
            return claim
        check_transition(claim.verification_status, STATUS_INVESTIGATING, op, claim_id)

        self._swap(claim, claim.verification_status, STATUS_INVESTIGATING, [
            (STATUS_PENDING, STATUS_INVESTIGATING),
        ], {'confidence': claim.confidence or 0}, op)
        db.session.commit()
        logger.info(f"Claim {claim_id} under investigation")
        return claim

    def verify(self, claim_id):
        """Ask the oracle about the claim and persist its verdict. Terminal claims are left alone."""
        op = 'verify_claim'
        claim = self.claims.get(claim_id, operation=op)
        if claim.is_terminal:
            logger.info(f"Claim {claim_id} already {claim.verification_status}, skipping")
            return claim

        context = {'location': claim.location, 'urgency': claim.urgency}
        try:
            verdict = self.oracle.check(claim.content, context)
        except OracleUnavailableError as e:
            e.operation, e.claim_id = op, claim_id
            logger.warning(f"Oracle unavailable for claim {claim_id}; status stays {claim.verification_status}")
            raise

        return self._apply(
            claim, verdict.status, verdict.confidence,
            correction=verdict.correction,
            sources=verdict.sources,
            verdict=verdict.verdict,
            context=verdict.context,
            related_claims=verdict.related_claims,
            operation=op,
        )

    def apply_update(self, claim_id, status, confidence, correction=None, sources=None):
        """Validated entry point for verdicts produced outside this process."""
        op = 'apply_verification'
        _check_confidence(confidence, op, claim_id)
        claim = self.claims.get(claim_id, operation=op)
        return self._apply(claim, status, confidence, correction=correction,
                           sources=sources, operation=op)

    def _apply(self, claim, status, confidence, correction=None, sources=None,
               verdict=None, context=None, related_claims=None, operation=None):
        claim_id = claim.id
        current = claim.verification_status
        sources = list(sources or [])

        _check_confidence(confidence, operation, claim_id)
        _check_sources(sources, operation, claim_id)
        edges = transition_path(current, status)
        for from_status, to_status in edges:
            check_transition(from_status, to_status, operation, claim_id)

        known = {(s.name, s.url) for s in claim.sources}
        new_sources = [s for s in sources if (s['name'], s['url']) not in known]
        if (current == status and confidence == claim.confidence
                and not new_sources and correction in (None, claim.correction)):
            return claim

        values = {'confidence': confidence}
        if correction is not None:
            values['correction'] = correction
        if verdict is not None:
            values['verdict'] = verdict
        if context is not None:
            values['context'] = context
        if related_claims:
            values['related_claims'] = list(related_claims)
        if status in TERMINAL_STATUSES:
            values['verified_at'] = datetime.now(timezone.utc)

        self._swap(claim, current, status, edges, values, operation)

        position = len(claim.sources)
        for source in new_sources:
            db.session.add(SourceCitation(
                claim_id=claim_id,
                position=position,
                name=source['name'],
                url=source['url'],
                credibility=source['credibility'],
            ))
            position += 1
        db.session.commit()

        logger.info(f"Claim {claim_id}: {current} -> {status} (confidence {confidence})")
        return self.claims.get(claim_id, operation=operation)

    def _swap(self, claim, expected, target, edges, values, operation):
        """Compare-and-swap on the current status, logging every edge taken."""
        updated = Claim.query.filter(
            Claim.id == claim.id,
            Claim.verification_status == expected,
        ).update({'verification_status': target, **values}, synchronize_session=False)
        if updated == 0:
            db.session.rollback()
            raise ConflictError(
                f"Claim {claim.id} changed status concurrently", operation=operation, claim_id=claim.id,
            )
        for from_status, to_status in edges:
            db.session.add(VerificationTransition(
                claim_id=claim.id,
                from_status=from_status,
                to_status=to_status,
                confidence=values.get('confidence', 0),
            ))

    def sweep_pending(self, limit=25):
        """Verify the oldest unresolved claims. Per-claim failures are counted, not fatal."""
        claims = Claim.query.filter(
            Claim.verification_status.in_((STATUS_PENDING, STATUS_INVESTIGATING))
        ).order_by(Claim.created_at.asc(), Claim.id.asc()).limit(limit).all()

        stats = {'processed': 0, 'resolved': 0, 'failed': 0}
        for claim_id in [c.id for c in claims]:
            stats['processed'] += 1
            try:
                result = self.verify(claim_id)
            except FactStreamError as e:
                stats['failed'] += 1
                logger.warning(f"Sweep could not verify claim {claim_id}: {e}")
                continue
            if result.is_terminal:
                stats['resolved'] += 1

        logger.info(
            f"Verification sweep: {stats['processed']} processed, "
            f"{stats['resolved']} resolved, {stats['failed']} failed"
        )
        return stats
