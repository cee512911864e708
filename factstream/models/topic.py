from datetime import datetime, timezone
from factstream.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


class Topic(db.Model):
    __tablename__ = 'topics'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(128), nullable=False, unique=True)
    color = db.Column(db.String(16), nullable=False, default='#64748b')
    icon = db.Column(db.String(64))
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'icon': self.icon,
        }


class UserTopicSubscription(db.Model):
    __tablename__ = 'user_topics'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False)
    topic_id = db.Column(db.Integer, db.ForeignKey('topics.id', ondelete='CASCADE'), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)

    topic = db.relationship('Topic')

    __table_args__ = (
        db.UniqueConstraint('user_id', 'topic_id', name='uq_user_topics_user_topic'),
        db.Index('ix_user_topics_user', 'user_id'),
    )


class UserProfile(db.Model):
    __tablename__ = 'profiles'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(64), nullable=False, unique=True)
    display_name = db.Column(db.String(128))
    username = db.Column(db.String(64))
    bio = db.Column(db.Text)
    location = db.Column(db.String(256))
    website = db.Column(db.String(2048))
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), onupdate=_utcnow)

    def to_dict(self):
        return {
            'user_id': self.user_id,
            'display_name': self.display_name or 'Anonymous',
            'username': self.username or 'user',
            'bio': self.bio,
            'location': self.location,
            'website': self.website,
        }
