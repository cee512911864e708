import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from flask import current_app
from sqlalchemy import case, func
from factstream.exceptions import ValidationError
from factstream.extensions import db
from factstream.models.claim import (
    Claim, ClaimTopic, STATUS_FALSE, STATUS_INVESTIGATING, STATUS_PENDING, STATUS_VERIFIED,
    TERMINAL_STATUSES,
)
from factstream.models.topic import Topic, UserProfile

logger = logging.getLogger(__name__)


@dataclass
class TopicTrend:
    topic: Topic
    claim_count: int
    previous_count: int
    trend_direction: str
    change_percent: float

    def to_dict(self):
        return {
            'topic': self.topic.to_dict(),
            'claim_count': self.claim_count,
            'previous_count': self.previous_count,
            'trend_direction': self.trend_direction,
            'change_percent': self.change_percent,
        }


def compare_windows(current, previous):
    """Return (direction, change_percent) for two window counts."""
    if current > previous:
        direction = 'up'
    elif current < previous:
        direction = 'down'
    else:
        direction = 'stable'

    if previous == 0:
        change = 100.0 if current > 0 else 0.0
    else:
        change = round(abs(current - previous) / previous * 100, 1)
    return direction, change


class TrendingService:
    def _topic_counts(self, start, end):
        rows = db.session.query(ClaimTopic.topic_id, func.count(Claim.id)).join(
            Claim, Claim.id == ClaimTopic.claim_id
        ).filter(
            Claim.created_at >= start,
            Claim.created_at < end,
        ).group_by(ClaimTopic.topic_id).all()
        return dict(rows)

    def compute_topic_trends(self, window=None, now=None, limit=None):
        """
        Topic claim counts in [now - window, now) against the window before it.
        Sorted by current count (desc) then name; top ``limit`` only.
        """
        if window is None:
            window = timedelta(hours=current_app.config.get('TREND_WINDOW_HOURS', 24))
        if limit is None:
            limit = current_app.config.get('TRENDING_TOPICS_LIMIT', 5)
        if window <= timedelta(0):
            raise ValidationError('Trend window must be positive', operation='compute_topic_trends')
        if not isinstance(limit, int) or limit < 0:
            raise ValidationError(f"limit must be a non-negative integer, got {limit!r}",
                                  operation='compute_topic_trends')
        now = now or datetime.now(timezone.utc)

        current = self._topic_counts(now - window, now)
        previous = self._topic_counts(now - 2 * window, now - window)

        trends = []
        for topic in Topic.query.all():
            cur, prev = current.get(topic.id, 0), previous.get(topic.id, 0)
            direction, change = compare_windows(cur, prev)
            trends.append(TopicTrend(
                topic=topic,
                claim_count=cur,
                previous_count=prev,
                trend_direction=direction,
                change_percent=change,
            ))
        trends.sort(key=lambda t: (-t.claim_count, t.topic.name))
        return trends[:limit]

    def compute_global_stats(self):
        rows = dict(db.session.query(Claim.verification_status, func.count(Claim.id)).group_by(
            Claim.verification_status
        ).all())
        stats = {
            'verified_count': rows.get(STATUS_VERIFIED, 0),
            'false_count': rows.get(STATUS_FALSE, 0),
            'investigating_count': rows.get(STATUS_INVESTIGATING, 0),
            'pending_count': rows.get(STATUS_PENDING, 0),
            'active_user_count': UserProfile.query.count(),
        }
        # Derived from the per-status counts so the identity always holds
        stats['total_claims'] = (
            stats['verified_count'] + stats['false_count']
            + stats['investigating_count'] + stats['pending_count']
        )
        return stats

    def top_contributors(self, limit=5):
        """Profiles by number of claims posted; accuracy = verified share of resolved claims."""
        verified = func.sum(case((Claim.verification_status == STATUS_VERIFIED, 1), else_=0))
        resolved = func.sum(case((Claim.verification_status.in_(TERMINAL_STATUSES), 1), else_=0))
        claim_count = func.count(Claim.id)

        rows = db.session.query(UserProfile, claim_count, verified, resolved).join(
            Claim, Claim.author_id == UserProfile.user_id
        ).group_by(UserProfile.id).order_by(
            claim_count.desc(), UserProfile.user_id.asc()
        ).limit(limit).all()

        contributors = []
        for profile, count, verified_n, resolved_n in rows:
            resolved_n = resolved_n or 0
            contributors.append({
                **profile.to_dict(),
                'claim_count': count,
                'accuracy': round((verified_n or 0) / resolved_n * 100, 1) if resolved_n else None,
            })
        return contributors
