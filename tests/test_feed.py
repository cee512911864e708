from datetime import timedelta
from factstream.services.claim_store import ClaimStore, MAX_PAGE_SIZE
from factstream.services.feed_service import FeedService, rank_claims
from factstream.services.reaction_ledger import ReactionLedger
from factstream.services.topic_registry import TopicRegistry


class TestRankClaims:
    def test_subscribed_topics_come_first(self, make_claim, sample_topics):
        health = sample_topics['Public Health']
        transport = sample_topics['Transportation']
        older_health = make_claim(content='Clinic out of insulin', hours_ago=5, topic_ids=[health.id])
        newer_transport = make_claim(content='Bus lines suspended', hours_ago=1, topic_ids=[transport.id])

        TopicRegistry().set_subscriptions('viewer', [health.id])
        ranked = FeedService().rank('viewer', [newer_transport, older_health])

        assert [c.id for c in ranked] == [older_health.id, newer_transport.id]

    def test_rank_is_a_permutation(self, make_claim, sample_topics):
        health = sample_topics['Public Health']
        claims = [
            make_claim(content=f'claim {i}', hours_ago=i, topic_ids=[health.id] if i % 2 else None)
            for i in range(1, 7)
        ]
        TopicRegistry().set_subscriptions('viewer', [health.id])

        ranked = FeedService().rank('viewer', list(reversed(claims)))
        assert sorted(c.id for c in ranked) == sorted(c.id for c in claims)
        assert len(ranked) == len(claims)

    def test_each_group_newest_first(self, make_claim, sample_topics):
        health = sample_topics['Public Health']
        h_old = make_claim(content='h old', hours_ago=6, topic_ids=[health.id])
        h_new = make_claim(content='h new', hours_ago=2, topic_ids=[health.id])
        o_old = make_claim(content='o old', hours_ago=5)
        o_new = make_claim(content='o new', hours_ago=1)

        ranked = rank_claims([o_old, h_old, o_new, h_new], {health.id})
        assert [(c.id, for_you) for c, for_you in ranked] == [
            (h_new.id, True), (h_old.id, True), (o_new.id, False), (o_old.id, False),
        ]

    def test_equal_timestamps_are_stable(self, make_claim, now):
        same_time = now - timedelta(hours=3)
        claims = [make_claim(content=f'tied {i}', created_at=same_time) for i in range(4)]

        first = rank_claims(claims, set())
        second = rank_claims(list(reversed(claims)), set())
        assert [c.id for c, _ in first] == [c.id for c, _ in second] == sorted(c.id for c in claims)

    def test_anonymous_viewer_gets_recency(self, make_claim, sample_topics):
        health = sample_topics['Public Health']
        old = make_claim(content='old', hours_ago=4, topic_ids=[health.id])
        new = make_claim(content='new', hours_ago=1)

        assert [c.id for c in FeedService().rank(None, [old, new])] == [new.id, old.id]

    def test_empty_input(self, db_session):
        assert FeedService().rank('viewer', []) == []


class TestBuildFeed:
    def test_entries_carry_engagement(self, make_claim, sample_topics):
        health = sample_topics['Public Health']
        claim = make_claim(content='Water unsafe in zone 3', topic_ids=[health.id])
        other = make_claim(content='Bridge closed', hours_ago=0.5)

        store = ClaimStore()
        store.add_comment(claim.id, 'bob', 'Confirmed by the utility')
        store.add_comment(claim.id, 'carol', 'Boil notice posted')
        store.add_comment(claim.id, 'dave', 'Lifted at 6pm?')

        ledger = ReactionLedger()
        ledger.toggle('viewer', claim.id, 'like')
        ledger.toggle('bob', claim.id, 'like')
        ledger.toggle('viewer', claim.id, 'bookmark')
        TopicRegistry().set_subscriptions('viewer', [health.id])

        feed = FeedService().build_feed('viewer', limit=10)
        entries = feed['entries']

        assert [e.claim.id for e in entries] == [claim.id, other.id]
        top = entries[0]
        assert top.for_you is True
        assert top.reaction_counts['like'] == 2
        assert top.viewer_reactions == {'like', 'bookmark'}
        assert top.comment_count == 3
        assert [c['content'] for c in top.comment_preview] == ['Lifted at 6pm?', 'Boil notice posted']

        bottom = entries[1].to_dict()
        assert bottom['for_you'] is False
        assert bottom['comment_count'] == 0
        assert bottom['comment_preview'] == []
        assert bottom['reaction_counts'] == {'like': 0, 'share': 0, 'bookmark': 0, 'flag': 0}
        assert feed['next_cursor'] is None

    def test_feed_pages(self, make_claim):
        for i in range(5):
            make_claim(content=f'claim {i}', hours_ago=i + 1)

        service = FeedService()
        first = service.build_feed(None, limit=3)
        assert len(first['entries']) == 3
        assert first['next_cursor']

        second = service.build_feed(None, limit=3, cursor=first['next_cursor'])
        assert len(second['entries']) == 2
        assert second['next_cursor'] is None
        seen = {e.claim.id for e in first['entries']} | {e.claim.id for e in second['entries']}
        assert len(seen) == 5

    def test_limit_above_page_cap(self, make_claim):
        for i in range(MAX_PAGE_SIZE + 3):
            make_claim(content=f'claim {i}', hours_ago=i + 1)

        service = FeedService()
        first = service.build_feed(None, limit=150)
        assert len(first['entries']) == MAX_PAGE_SIZE
        assert first['next_cursor'] is not None

        second = service.build_feed(None, limit=150, cursor=first['next_cursor'])
        assert len(second['entries']) == 3
        assert second['next_cursor'] is None
