import logging
import re
from sqlalchemy.exc import IntegrityError
from factstream.exceptions import NotFoundError, ValidationError
from factstream.extensions import db
from factstream.models.topic import Topic, UserTopicSubscription, UserProfile
from factstream.utils.text import clean_text, is_http_url

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r'^#[0-9a-fA-F]{6}$')
PROFILE_FIELDS = ('display_name', 'username', 'bio', 'location', 'website')


class TopicRegistry:
    """Reference topics, per-user topic subscriptions and user profiles."""

    def list_topics(self):
        return Topic.query.order_by(Topic.name).all()

    def require_topics(self, topic_ids, operation=None):
        """Load all of topic_ids, raising NotFoundError naming any that are unknown."""
        if topic_ids is None:
            return []
        if not isinstance(topic_ids, (list, tuple, set)) or not all(
            isinstance(t, int) and not isinstance(t, bool) for t in topic_ids
        ):
            raise ValidationError(f"topic_ids must be a list of integers, got {topic_ids!r}",
                                  operation=operation)
        wanted = set(topic_ids)
        if not wanted:
            return []
        found = Topic.query.filter(Topic.id.in_(wanted)).all()
        missing = wanted - {t.id for t in found}
        if missing:
            raise NotFoundError(f"Unknown topic ids: {sorted(missing)}", operation=operation)
        return found

    def create_topic(self, name, color='#64748b', icon=None):
        """Register a topic. Administrative; topics are immutable afterwards."""
        name = clean_text(name) if isinstance(name, str) else ''
        if not name:
            raise ValidationError('Topic name is required', operation='create_topic')
        if not isinstance(color, str) or not HEX_COLOR.match(color):
            raise ValidationError(f"Invalid topic color: {color!r}", operation='create_topic')

        topic = Topic(name=name, color=color, icon=icon)
        db.session.add(topic)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise ValidationError(f"Topic {name!r} already exists", operation='create_topic')
        logger.info(f"Created topic {topic.id} ({name})")
        return topic

    def subscribed_topic_ids(self, user_id):
        rows = db.session.query(UserTopicSubscription.topic_id).filter(
            UserTopicSubscription.user_id == user_id
        ).all()
        return {r.topic_id for r in rows}

    def subscribed_topics(self, user_id):
        return Topic.query.join(
            UserTopicSubscription, UserTopicSubscription.topic_id == Topic.id
        ).filter(UserTopicSubscription.user_id == user_id).order_by(Topic.name).all()

    def set_subscriptions(self, user_id, topic_ids):
        """Replace the user's subscription set (onboarding / preferences flow)."""
        if not topic_ids:
            raise ValidationError('Select at least one topic', operation='set_subscriptions')
        topic_ids = {t.id for t in self.require_topics(topic_ids, operation='set_subscriptions')}

        UserTopicSubscription.query.filter_by(user_id=user_id).delete(synchronize_session=False)
        for topic_id in sorted(topic_ids):
            db.session.add(UserTopicSubscription(user_id=user_id, topic_id=topic_id))
        db.session.commit()
        logger.info(f"User {user_id} subscribed to {len(topic_ids)} topics")
        return self.subscribed_topics(user_id)

    def get_profile(self, user_id):
        return UserProfile.query.filter_by(user_id=user_id).first()

    def upsert_profile(self, user_id, **fields):
        unknown = set(fields) - set(PROFILE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown profile fields: {sorted(unknown)}", operation='upsert_profile')
        not_text = sorted(k for k, v in fields.items() if v is not None and not isinstance(v, str))
        if not_text:
            raise ValidationError(f"Profile fields must be strings: {not_text}", operation='upsert_profile')
        website = fields.get('website')
        if website and not is_http_url(website):
            raise ValidationError(f"Invalid website URL: {website!r}", operation='upsert_profile')

        profile = self.get_profile(user_id)
        if not profile:
            profile = UserProfile(user_id=user_id)
            db.session.add(profile)
        for field, value in fields.items():
            setattr(profile, field, value)
        db.session.commit()
        return profile
