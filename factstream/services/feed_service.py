import logging
from dataclasses import dataclass, field
from typing import Dict, List, Set
from flask import current_app
from factstream.models.claim import Claim
from factstream.services.claim_store import ClaimStore
from factstream.services.reaction_ledger import ReactionLedger
from factstream.services.topic_registry import TopicRegistry
from factstream.utils.cursor import as_utc

logger = logging.getLogger(__name__)


def _recency_key(claim):
    # Newest first; equal timestamps fall back to the lower id.
    return (-as_utc(claim.created_at).timestamp(), claim.id)


def rank_claims(claims, subscribed_topic_ids):
    """
    Personalized ordering: claims sharing a topic with the viewer's subscriptions
    come first, then everything else. Each group is newest first. Nothing is dropped.
    Returns [(claim, for_you)].
    """
    subscribed = set(subscribed_topic_ids or ())
    relevant, other = [], []
    for claim in claims:
        if subscribed and not claim.topic_ids.isdisjoint(subscribed):
            relevant.append(claim)
        else:
            other.append(claim)
    relevant.sort(key=_recency_key)
    other.sort(key=_recency_key)
    return [(c, True) for c in relevant] + [(c, False) for c in other]


@dataclass
class FeedEntry:
    claim: Claim
    for_you: bool
    reaction_counts: Dict[str, int]
    viewer_reactions: Set[str] = field(default_factory=set)
    comment_count: int = 0
    comment_preview: List[dict] = field(default_factory=list)

    def to_dict(self):
        return {
            **self.claim.to_dict(),
            'for_you': self.for_you,
            'reaction_counts': dict(self.reaction_counts),
            'viewer_reactions': sorted(self.viewer_reactions),
            'comment_count': self.comment_count,
            'comment_preview': list(self.comment_preview),
        }


class FeedService:
    def __init__(self, claim_store=None, topic_registry=None, reaction_ledger=None):
        self.topics = topic_registry or TopicRegistry()
        self.claims = claim_store or ClaimStore(self.topics)
        self.reactions = reaction_ledger or ReactionLedger(self.claims)

    def rank(self, viewer_id, claims):
        """Reorder ``claims`` for the viewer. Always a permutation of the input."""
        subscribed = self.topics.subscribed_topic_ids(viewer_id) if viewer_id else set()
        return [claim for claim, _ in rank_claims(claims, subscribed)]

    def build_feed(self, viewer_id, limit=None, cursor=None):
        """One page of the feed: recent claims, ranked, joined with engagement."""
        if limit is None:
            limit = current_app.config.get('FEED_PAGE_SIZE', 20)
        preview_size = current_app.config.get('COMMENT_PREVIEW_LIMIT', 2)

        page = self.claims.list_recent(limit=limit, cursor=cursor)
        next_cursor = self.claims.next_cursor(page, limit)

        subscribed = self.topics.subscribed_topic_ids(viewer_id) if viewer_id else set()
        ranked = rank_claims(page, subscribed)

        claim_ids = [c.id for c in page]
        counts = self.reactions.counts_for_claims(claim_ids)
        mine = self.reactions.active_types_for_user(viewer_id, claim_ids)
        comment_counts = self.claims.comment_counts(claim_ids)

        entries = []
        for claim, for_you in ranked:
            entries.append(FeedEntry(
                claim=claim,
                for_you=for_you,
                reaction_counts=counts[claim.id],
                viewer_reactions=set(mine.get(claim.id, ())),
                comment_count=comment_counts.get(claim.id, 0),
                comment_preview=[c.to_dict() for c in self.claims.preview_comments(claim.id, preview_size)]
                if comment_counts.get(claim.id) else [],
            ))

        logger.debug(f"Feed for {viewer_id}: {len(entries)} entries, {sum(e.for_you for e in entries)} for you")
        return {'entries': entries, 'next_cursor': next_cursor}
