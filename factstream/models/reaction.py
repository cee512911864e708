from datetime import datetime, timezone
from factstream.extensions import db

REACTION_TYPES = ('like', 'share', 'bookmark', 'flag')


class Reaction(db.Model):
    __tablename__ = 'reactions'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False)
    claim_id = db.Column(db.String(36), db.ForeignKey('claims.id', ondelete='CASCADE'), nullable=False)
    reaction_type = db.Column(db.String(16), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    claim = db.relationship('Claim', back_populates='reactions')

    __table_args__ = (
        # At most one active reaction of a type per user per claim
        db.UniqueConstraint('user_id', 'claim_id', 'reaction_type', name='uq_reactions_user_claim_type'),
        db.Index('ix_reactions_claim_type', 'claim_id', 'reaction_type'),
    )
