import logging
from collections import defaultdict
from flask import current_app
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from factstream.exceptions import ConflictError, ValidationError
from factstream.extensions import db
from factstream.models.reaction import Reaction, REACTION_TYPES
from factstream.services.claim_store import ClaimStore

logger = logging.getLogger(__name__)

DEFAULT_TOGGLE_ATTEMPTS = 3


class ReactionLedger:
    """Per-user, per-claim, per-type reactions. Toggling is the only mutation."""

    def __init__(self, claim_store=None, max_attempts=None):
        self.claims = claim_store or ClaimStore()
        if max_attempts is None:
            max_attempts = current_app.config.get('REACTION_TOGGLE_MAX_ATTEMPTS', DEFAULT_TOGGLE_ATTEMPTS)
        self.max_attempts = max(1, int(max_attempts))

    def _check_type(self, reaction_type, operation, claim_id=None):
        if reaction_type not in REACTION_TYPES:
            raise ValidationError(
                f"Invalid reaction type: {reaction_type!r}", operation=operation, claim_id=claim_id,
            )

    def toggle(self, user_id, claim_id, reaction_type):
        """
        Flip the (user, claim, type) reaction.
        Returns {'active': True} when the reaction now exists, {'active': False} when removed.
        Lost races against a concurrent toggle of the same triple are retried.
        """
        op = 'toggle_reaction'
        if not user_id:
            raise ValidationError('user_id is required', operation=op, claim_id=claim_id)
        self._check_type(reaction_type, op, claim_id)
        self.claims.get(claim_id, operation=op)

        for attempt in range(1, self.max_attempts + 1):
            try:
                active = self._toggle_once(user_id, claim_id, reaction_type)
            except ConflictError:
                logger.warning(
                    f"Reaction toggle conflict on ({user_id}, {claim_id}, {reaction_type}), "
                    f"attempt {attempt}/{self.max_attempts}"
                )
                continue
            return {'active': active}

        logger.error(f"Reaction toggle gave up after {self.max_attempts} attempts on claim {claim_id}")
        raise ConflictError(
            f"Concurrent updates to {reaction_type} reaction; try again",
            operation=op, claim_id=claim_id,
        )

    def _toggle_once(self, user_id, claim_id, reaction_type):
        """Conditional delete, else insert guarded by the unique constraint."""
        deleted = Reaction.query.filter_by(
            user_id=user_id, claim_id=claim_id, reaction_type=reaction_type,
        ).delete(synchronize_session=False)
        if deleted:
            db.session.commit()
            return False

        db.session.add(Reaction(user_id=user_id, claim_id=claim_id, reaction_type=reaction_type))
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ConflictError(
                'Reaction inserted concurrently', operation='toggle_reaction', claim_id=claim_id,
            )
        return True

    def count_by_type(self, claim_id, reaction_type):
        self._check_type(reaction_type, 'count_reactions', claim_id)
        return db.session.query(func.count(func.distinct(Reaction.user_id))).filter(
            Reaction.claim_id == claim_id,
            Reaction.reaction_type == reaction_type,
        ).scalar() or 0

    def is_active(self, user_id, claim_id, reaction_type):
        self._check_type(reaction_type, 'is_active', claim_id)
        return db.session.query(
            Reaction.query.filter_by(
                user_id=user_id, claim_id=claim_id, reaction_type=reaction_type,
            ).exists()
        ).scalar()

    def counts_for_claims(self, claim_ids):
        """{claim_id: {type: count}} with every type present, zeros included."""
        counts = {cid: {t: 0 for t in REACTION_TYPES} for cid in claim_ids}
        if not claim_ids:
            return counts
        rows = db.session.query(
            Reaction.claim_id, Reaction.reaction_type, func.count(func.distinct(Reaction.user_id)),
        ).filter(Reaction.claim_id.in_(claim_ids)).group_by(
            Reaction.claim_id, Reaction.reaction_type,
        ).all()
        for claim_id, reaction_type, count in rows:
            counts[claim_id][reaction_type] = count
        return counts

    def active_types_for_user(self, user_id, claim_ids):
        """{claim_id: set(types)} the user currently has active."""
        active = defaultdict(set)
        if not user_id or not claim_ids:
            return active
        rows = db.session.query(Reaction.claim_id, Reaction.reaction_type).filter(
            Reaction.user_id == user_id,
            Reaction.claim_id.in_(claim_ids),
        ).all()
        for claim_id, reaction_type in rows:
            active[claim_id].add(reaction_type)
        return active
