import logging
from sqlalchemy import and_, or_
from factstream.exceptions import NotFoundError, ValidationError
from factstream.extensions import db
from factstream.models.claim import (
    Claim, ClaimTopic, Comment, STATUS_PENDING, URGENCY_LEVELS, VERIFICATION_STATUSES,
)
from factstream.services.topic_registry import TopicRegistry
from factstream.utils.cursor import decode_cursor, encode_cursor
from factstream.utils.text import clean_text, is_http_url

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
MAX_CONTENT_CHARS = 5000


def _check_limit(limit, operation):
    if not isinstance(limit, int) or limit < 1:
        raise ValidationError(f"limit must be a positive integer, got {limit!r}", operation=operation)
    return min(limit, MAX_PAGE_SIZE)


def _newest_first(query):
    return query.order_by(Claim.created_at.desc(), Claim.id.asc())


class ClaimStore:
    def __init__(self, topic_registry=None):
        self.topics = topic_registry or TopicRegistry()

    def create(self, author_id, content, urgency='medium', image_url=None,
               source_url=None, location=None, topic_ids=None):
        """Validate and persist a new claim in the pending state. Returns the claim id."""
        op = 'create_claim'
        content = content.strip() if isinstance(content, str) else ''
        if not content:
            raise ValidationError('Claim content is required', operation=op)
        if len(content) > MAX_CONTENT_CHARS:
            raise ValidationError(f"Claim content exceeds {MAX_CONTENT_CHARS} characters", operation=op)
        if not author_id:
            raise ValidationError('author_id is required', operation=op)
        if urgency not in URGENCY_LEVELS:
            raise ValidationError(f"Invalid urgency: {urgency!r}", operation=op)
        for label, url in (('image_url', image_url), ('source_url', source_url)):
            if url and not is_http_url(url):
                raise ValidationError(f"Malformed {label}: {url!r}", operation=op)
        if location is not None and not isinstance(location, str):
            raise ValidationError(f"location must be a string, got {location!r}", operation=op)

        topics = self.topics.require_topics(topic_ids, operation=op)

        claim = Claim(
            author_id=author_id,
            content=content,
            urgency=urgency,
            image_url=image_url or None,
            source_url=source_url or None,
            location=clean_text(location) or None,
            verification_status=STATUS_PENDING,
            confidence=0,
        )
        db.session.add(claim)
        db.session.flush()
        for topic in topics:
            db.session.add(ClaimTopic(claim_id=claim.id, topic_id=topic.id))
        db.session.commit()

        logger.info(f"Claim {claim.id} created by {author_id} ({urgency}, {len(topics)} topics)")
        return claim.id

    def get(self, claim_id, operation='get_claim'):
        claim = db.session.get(Claim, claim_id)
        if not claim:
            raise NotFoundError(f"Claim {claim_id} not found", operation=operation, claim_id=claim_id)
        return claim

    def list_recent(self, limit=20, cursor=None):
        """Claims newest first, ties broken by id ascending; resumes after ``cursor``."""
        limit = _check_limit(limit, 'list_recent')
        query = Claim.query
        if cursor:
            try:
                after_ts, after_id = decode_cursor(cursor)
            except ValueError as e:
                raise ValidationError(str(e), operation='list_recent')
            query = query.filter(or_(
                Claim.created_at < after_ts,
                and_(Claim.created_at == after_ts, Claim.id > after_id),
            ))
        return _newest_first(query).limit(limit).all()

    def next_cursor(self, claims, limit):
        """Cursor for the page after ``claims``, or None when the page was short."""
        if not claims or len(claims) < min(limit, MAX_PAGE_SIZE):
            return None
        last = claims[-1]
        return encode_cursor(last.created_at, last.id)

    def attach_topics(self, claim_id, topic_ids):
        """Tag a claim; topic ids already attached are skipped."""
        claim = self.get(claim_id, operation='attach_topics')
        topics = self.topics.require_topics(topic_ids, operation='attach_topics')

        existing = claim.topic_ids
        added = 0
        for topic in topics:
            if topic.id in existing:
                continue
            db.session.add(ClaimTopic(claim_id=claim.id, topic_id=topic.id))
            added += 1
        db.session.commit()
        if added:
            logger.info(f"Attached {added} topics to claim {claim_id}")
        return claim

    def search(self, term=None, status=None, urgency=None, limit=20):
        limit = _check_limit(limit, 'search_claims')
        query = Claim.query
        term = clean_text(term)
        if term:
            query = query.filter(Claim.content.ilike(f'%{term}%'))
        if status:
            if status not in VERIFICATION_STATUSES:
                raise ValidationError(f"Invalid status filter: {status!r}", operation='search_claims')
            query = query.filter(Claim.verification_status == status)
        if urgency:
            if urgency not in URGENCY_LEVELS:
                raise ValidationError(f"Invalid urgency filter: {urgency!r}", operation='search_claims')
            query = query.filter(Claim.urgency == urgency)
        return _newest_first(query).limit(limit).all()

    # Comments

    def add_comment(self, claim_id, author_id, content):
        content = content.strip() if isinstance(content, str) else ''
        if not content:
            raise ValidationError('Comment content is required', operation='add_comment', claim_id=claim_id)
        if not author_id:
            raise ValidationError('author_id is required', operation='add_comment', claim_id=claim_id)
        self.get(claim_id, operation='add_comment')

        comment = Comment(claim_id=claim_id, author_id=author_id, content=content)
        db.session.add(comment)
        db.session.commit()
        return comment

    def list_comments(self, claim_id):
        """All comments, oldest first."""
        self.get(claim_id, operation='list_comments')
        return Comment.query.filter_by(claim_id=claim_id).order_by(
            Comment.created_at.asc(), Comment.id.asc()
        ).all()

    def preview_comments(self, claim_id, n=2):
        """The ``n`` most recent comments, newest first."""
        return Comment.query.filter_by(claim_id=claim_id).order_by(
            Comment.created_at.desc(), Comment.id.desc()
        ).limit(n).all()

    def comment_count(self, claim_id):
        return Comment.query.filter_by(claim_id=claim_id).count()

    def comment_counts(self, claim_ids):
        if not claim_ids:
            return {}
        rows = db.session.query(Comment.claim_id, db.func.count(Comment.id)).filter(
            Comment.claim_id.in_(claim_ids)
        ).group_by(Comment.claim_id).all()
        return {claim_id: count for claim_id, count in rows}
