import pytest
from datetime import timedelta
from factstream.exceptions import ValidationError
from factstream.models.topic import Topic
from factstream.services.trending_service import TrendingService, compare_windows
from factstream.services.verification_pipeline import VerificationPipeline
from factstream.integrations.keyword_oracle import KeywordOracle

WINDOW = timedelta(hours=24)


class TestCompareWindows:
    @pytest.mark.parametrize('current,previous,expected', [
        (6, 3, ('up', 100.0)),
        (2, 4, ('down', 50.0)),
        (5, 5, ('stable', 0.0)),
        (3, 0, ('up', 100.0)),
        (0, 0, ('stable', 0.0)),
        (0, 2, ('down', 100.0)),
        (4, 3, ('up', 33.3)),
    ])
    def test_direction_and_change(self, current, previous, expected):
        assert compare_windows(current, previous) == expected


class TestTopicTrends:
    def test_up_down_stable(self, make_claim, sample_topics, now):
        health = sample_topics['Public Health']
        transport = sample_topics['Transportation']
        emergency = sample_topics['Emergency Response']

        # health: 3 now vs 1 before
        for h in (1, 2, 3):
            make_claim(content=f'health {h}', hours_ago=h, topic_ids=[health.id])
        make_claim(content='health old', hours_ago=30, topic_ids=[health.id])
        # transport: 1 now vs 2 before
        make_claim(content='transport now', hours_ago=5, topic_ids=[transport.id])
        make_claim(content='transport old 1', hours_ago=26, topic_ids=[transport.id])
        make_claim(content='transport old 2', hours_ago=40, topic_ids=[transport.id])
        # emergency: 1 and 1
        make_claim(content='emergency now', hours_ago=10, topic_ids=[emergency.id])
        make_claim(content='emergency old', hours_ago=35, topic_ids=[emergency.id])
        # outside both windows
        make_claim(content='ancient', hours_ago=80, topic_ids=[health.id])

        trends = TrendingService().compute_topic_trends(window=WINDOW, now=now)
        by_name = {t.topic.name: t for t in trends}

        assert [t.topic.name for t in trends] == ['Public Health', 'Emergency Response', 'Transportation']
        assert (by_name['Public Health'].claim_count, by_name['Public Health'].previous_count) == (3, 1)
        assert by_name['Public Health'].trend_direction == 'up'
        assert by_name['Public Health'].change_percent == 200.0
        assert by_name['Transportation'].trend_direction == 'down'
        assert by_name['Transportation'].change_percent == 50.0
        assert by_name['Emergency Response'].trend_direction == 'stable'

    def test_claim_counts_for_every_topic_it_carries(self, make_claim, sample_topics, now):
        health = sample_topics['Public Health']
        emergency = sample_topics['Emergency Response']
        make_claim(content='Hospital evacuating', hours_ago=2, topic_ids=[health.id, emergency.id])

        trends = TrendingService().compute_topic_trends(window=WINDOW, now=now)
        counts = {t.topic.name: t.claim_count for t in trends}
        assert counts == {'Public Health': 1, 'Emergency Response': 1, 'Transportation': 0}

    def test_window_boundaries(self, make_claim, sample_topics, now):
        health = sample_topics['Public Health']
        make_claim(content='at start of window', created_at=now - WINDOW, topic_ids=[health.id])
        make_claim(content='at now', created_at=now, topic_ids=[health.id])

        trend = TrendingService().compute_topic_trends(window=WINDOW, now=now)[0]
        assert trend.topic.name == 'Public Health'
        assert (trend.claim_count, trend.previous_count) == (1, 0)

    def test_limit_to_top_five(self, make_claim, db_session, now):
        topics = [Topic(name=f'Topic {i}', color='#000000') for i in range(7)]
        db_session.add_all(topics)
        db_session.commit()
        for i, topic in enumerate(topics):
            for n in range(i):
                make_claim(content=f'{topic.name} claim {n}', hours_ago=1, topic_ids=[topic.id])

        trends = TrendingService().compute_topic_trends(window=WINDOW, now=now)
        assert len(trends) == 5
        assert [t.claim_count for t in trends] == [6, 5, 4, 3, 2]

    def test_explicit_zero_limit(self, make_claim, sample_topics, now):
        make_claim(content='Clinic closed', hours_ago=1, topic_ids=[sample_topics['Public Health'].id])
        service = TrendingService()

        assert service.compute_topic_trends(window=WINDOW, now=now, limit=0) == []
        assert len(service.compute_topic_trends(window=WINDOW, now=now)) == 3
        with pytest.raises(ValidationError):
            service.compute_topic_trends(window=WINDOW, now=now, limit=-1)

    def test_non_positive_window_rejected(self, db_session, now):
        with pytest.raises(ValidationError):
            TrendingService().compute_topic_trends(window=timedelta(0), now=now)
        with pytest.raises(ValidationError):
            TrendingService().compute_topic_trends(window=timedelta(hours=-1), now=now)


class TestGlobalStats:
    def test_counts_sum_to_total(self, make_claim, sample_profiles):
        make_claim(content='5G towers cause illness')
        make_claim(content='Highway 15 closed')
        make_claim(content='government cover up')
        make_claim(content='Shelter open on Elm St')

        pipeline = VerificationPipeline(oracle=KeywordOracle())
        pipeline.sweep_pending(limit=3)

        stats = TrendingService().compute_global_stats()
        assert stats['total_claims'] == 4
        assert stats['total_claims'] == (
            stats['verified_count'] + stats['false_count']
            + stats['investigating_count'] + stats['pending_count']
        )
        assert stats['active_user_count'] == 2

    def test_empty(self, db_session):
        stats = TrendingService().compute_global_stats()
        assert stats == {
            'verified_count': 0, 'false_count': 0, 'investigating_count': 0,
            'pending_count': 0, 'active_user_count': 0, 'total_claims': 0,
        }


class TestTopContributors:
    def test_ranked_by_claims_with_accuracy(self, make_claim, sample_profiles):
        pipeline = VerificationPipeline(oracle=KeywordOracle())
        for content in ('Highway 15 closed', '5G towers cause illness', 'Shelter open on Elm St'):
            pipeline.verify(make_claim(content=content, author_id='alice').id)
        make_claim(content='Power out downtown', author_id='bob')

        contributors = TrendingService().top_contributors(limit=5)
        assert [c['user_id'] for c in contributors] == ['alice', 'bob']
        assert contributors[0]['claim_count'] == 3
        assert contributors[0]['accuracy'] == 66.7
        assert contributors[1]['accuracy'] is None
