import uuid
from datetime import datetime, timezone
from factstream.extensions import db

URGENCY_LEVELS = ('low', 'medium', 'high', 'critical')
CREDIBILITY_LEVELS = ('high', 'medium', 'low')

STATUS_PENDING = 'pending'
STATUS_INVESTIGATING = 'investigating'
STATUS_VERIFIED = 'verified'
STATUS_FALSE = 'false'
VERIFICATION_STATUSES = (STATUS_PENDING, STATUS_INVESTIGATING, STATUS_VERIFIED, STATUS_FALSE)
TERMINAL_STATUSES = (STATUS_VERIFIED, STATUS_FALSE)


def _utcnow():
    return datetime.now(timezone.utc)


def _new_id():
    return str(uuid.uuid4())


def _iso(dt):
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.isoformat()


class Claim(db.Model):
    __tablename__ = 'claims'

    id = db.Column(db.String(36), primary_key=True, default=_new_id)
    author_id = db.Column(db.String(64), nullable=False)
    content = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.String(2048))
    source_url = db.Column(db.String(2048))
    location = db.Column(db.String(256))
    urgency = db.Column(db.String(16), nullable=False, default='medium')

    # Verification state, written only by the verification pipeline
    verification_status = db.Column(db.String(16), nullable=False, default=STATUS_PENDING)
    confidence = db.Column(db.Integer, nullable=False, default=0)
    verdict = db.Column(db.String(32))
    correction = db.Column(db.Text)
    context = db.Column(db.Text)
    related_claims = db.Column(db.JSON)
    verified_at = db.Column(db.DateTime(timezone=True))

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), onupdate=_utcnow)

    topics = db.relationship(
        'Topic', secondary='claim_topics', order_by='Topic.name', viewonly=True, lazy='selectin',
    )
    topic_links = db.relationship('ClaimTopic', back_populates='claim', cascade='all, delete-orphan')
    sources = db.relationship(
        'SourceCitation', back_populates='claim', order_by='SourceCitation.position',
        cascade='all, delete-orphan', lazy='selectin',
    )
    comments = db.relationship(
        'Comment', back_populates='claim', cascade='all, delete-orphan', lazy='dynamic',
    )
    reactions = db.relationship('Reaction', back_populates='claim', cascade='all, delete-orphan', lazy='dynamic')
    transitions = db.relationship(
        'VerificationTransition', back_populates='claim', order_by='VerificationTransition.id',
        cascade='all, delete-orphan', lazy='dynamic',
    )

    __table_args__ = (
        db.CheckConstraint('confidence >= 0 AND confidence <= 100', name='ck_claims_confidence_range'),
        db.Index('ix_claims_created_id', 'created_at', 'id'),
        db.Index('ix_claims_status', 'verification_status'),
        db.Index('ix_claims_author', 'author_id'),
    )

    @property
    def topic_ids(self):
        return {t.id for t in self.topics}

    @property
    def is_terminal(self):
        return self.verification_status in TERMINAL_STATUSES

    def verification_dict(self):
        return {
            'status': self.verification_status,
            'confidence': self.confidence or 0,
            'verdict': self.verdict,
            'correction': self.correction,
            'context': self.context,
            'related_claims': list(self.related_claims or []),
            'verified_at': _iso(self.verified_at),
            'sources': [s.to_dict() for s in self.sources],
        }

    def to_dict(self):
        return {
            'id': self.id,
            'author_id': self.author_id,
            'content': self.content,
            'image_url': self.image_url,
            'source_url': self.source_url,
            'location': self.location,
            'urgency': self.urgency,
            'created_at': _iso(self.created_at),
            'verification': self.verification_dict(),
            'topics': [t.to_dict() for t in self.topics],
        }


class ClaimTopic(db.Model):
    __tablename__ = 'claim_topics'

    id = db.Column(db.Integer, primary_key=True)
    claim_id = db.Column(db.String(36), db.ForeignKey('claims.id', ondelete='CASCADE'), nullable=False)
    topic_id = db.Column(db.Integer, db.ForeignKey('topics.id'), nullable=False)

    claim = db.relationship('Claim', back_populates='topic_links')

    __table_args__ = (
        db.UniqueConstraint('claim_id', 'topic_id', name='uq_claim_topics_claim_topic'),
        db.Index('ix_claim_topics_topic', 'topic_id'),
    )


class SourceCitation(db.Model):
    __tablename__ = 'source_citations'

    id = db.Column(db.Integer, primary_key=True)
    claim_id = db.Column(db.String(36), db.ForeignKey('claims.id', ondelete='CASCADE'), nullable=False)
    position = db.Column(db.Integer, nullable=False)
    name = db.Column(db.String(256), nullable=False)
    url = db.Column(db.String(2048), nullable=False)
    credibility = db.Column(db.String(16), nullable=False)

    claim = db.relationship('Claim', back_populates='sources')

    def to_dict(self):
        return {
            'name': self.name,
            'url': self.url,
            'credibility': self.credibility,
        }


class Comment(db.Model):
    __tablename__ = 'comments'

    id = db.Column(db.Integer, primary_key=True)
    claim_id = db.Column(db.String(36), db.ForeignKey('claims.id', ondelete='CASCADE'), nullable=False)
    author_id = db.Column(db.String(64), nullable=False)
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    claim = db.relationship('Claim', back_populates='comments')

    __table_args__ = (
        db.Index('ix_comments_claim_created', 'claim_id', 'created_at'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'claim_id': self.claim_id,
            'author_id': self.author_id,
            'content': self.content,
            'created_at': _iso(self.created_at),
        }


class VerificationTransition(db.Model):
    __tablename__ = 'verification_transitions'

    id = db.Column(db.Integer, primary_key=True)
    claim_id = db.Column(db.String(36), db.ForeignKey('claims.id', ondelete='CASCADE'), nullable=False)
    from_status = db.Column(db.String(16), nullable=False)
    to_status = db.Column(db.String(16), nullable=False)
    confidence = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    claim = db.relationship('Claim', back_populates='transitions')

    def to_dict(self):
        return {
            'claim_id': self.claim_id,
            'from': self.from_status,
            'to': self.to_status,
            'confidence': self.confidence,
            'created_at': _iso(self.created_at),
        }
