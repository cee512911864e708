import pytest
from unittest.mock import patch
from sqlalchemy.exc import IntegrityError
from factstream.exceptions import ConflictError, NotFoundError, ValidationError
from factstream.extensions import db
from factstream.models.reaction import Reaction
from factstream.services.reaction_ledger import ReactionLedger


class TestToggle:
    def test_toggle_round_trip(self, make_claim):
        claim = make_claim()
        ledger = ReactionLedger()
        before = ledger.count_by_type(claim.id, 'like')

        assert ledger.toggle('alice', claim.id, 'like') == {'active': True}
        assert ledger.count_by_type(claim.id, 'like') == before + 1
        assert ledger.toggle('alice', claim.id, 'like') == {'active': False}
        assert ledger.count_by_type(claim.id, 'like') == before

    def test_two_users_like_same_claim(self, make_claim):
        claim = make_claim()
        other = make_claim(content='Another claim')
        ledger = ReactionLedger()

        ledger.toggle('alice', claim.id, 'like')
        ledger.toggle('bob', claim.id, 'like')

        assert ledger.count_by_type(claim.id, 'like') == 2
        assert ledger.is_active('alice', claim.id, 'like') is True
        assert ledger.is_active('bob', claim.id, 'like') is True
        assert ledger.is_active('alice', other.id, 'like') is False

        ledger.toggle('alice', claim.id, 'like')
        assert ledger.is_active('alice', claim.id, 'like') is False
        assert ledger.is_active('bob', claim.id, 'like') is True
        assert ledger.count_by_type(claim.id, 'like') == 1

    def test_types_are_independent(self, make_claim):
        claim = make_claim()
        ledger = ReactionLedger()
        ledger.toggle('alice', claim.id, 'like')
        ledger.toggle('alice', claim.id, 'flag')

        assert ledger.is_active('alice', claim.id, 'bookmark') is False
        assert ledger.counts_for_claims([claim.id])[claim.id] == {
            'like': 1, 'share': 0, 'bookmark': 0, 'flag': 1,
        }
        assert ledger.active_types_for_user('alice', [claim.id])[claim.id] == {'like', 'flag'}

    def test_is_active_agrees_with_last_toggle(self, make_claim):
        claim = make_claim()
        ledger = ReactionLedger()
        for _ in range(5):
            result = ledger.toggle('alice', claim.id, 'bookmark')
            assert ledger.is_active('alice', claim.id, 'bookmark') is result['active']

    def test_invalid_type(self, make_claim):
        claim = make_claim()
        with pytest.raises(ValidationError):
            ReactionLedger().toggle('alice', claim.id, 'love')

    def test_unknown_claim(self, db_session):
        with pytest.raises(NotFoundError):
            ReactionLedger().toggle('alice', 'missing', 'like')


class TestConcurrentToggle:
    def test_conflict_is_retried(self, make_claim):
        claim = make_claim()
        ledger = ReactionLedger(max_attempts=3)
        conflict = ConflictError('raced', operation='toggle_reaction', claim_id=claim.id)

        with patch.object(ledger, '_toggle_once', side_effect=[conflict, True]) as toggle_once:
            assert ledger.toggle('alice', claim.id, 'like') == {'active': True}
        assert toggle_once.call_count == 2

    def test_gives_up_after_max_attempts(self, make_claim):
        claim = make_claim()
        ledger = ReactionLedger(max_attempts=2)
        conflict = ConflictError('raced', operation='toggle_reaction', claim_id=claim.id)

        with patch.object(ledger, '_toggle_once', side_effect=[conflict, conflict]):
            with pytest.raises(ConflictError) as exc:
                ledger.toggle('alice', claim.id, 'like')
        assert exc.value.claim_id == claim.id

    def test_lost_insert_race_flips_off_on_retry(self, make_claim):
        """
        Another session inserts the same triple between our delete and insert.
        The unique constraint rejects our insert; the retry then removes the row,
        so two toggles net out to no reaction and never two rows.
        """
        claim = make_claim()
        ledger = ReactionLedger()
        real_commit = db.session.commit
        calls = {'n': 0}

        def commit_losing_first_insert():
            calls['n'] += 1
            if calls['n'] == 1:
                db.session.rollback()
                # the concurrent session's row
                db.session.add(Reaction(user_id='alice', claim_id=claim.id, reaction_type='like'))
                real_commit()
                raise IntegrityError('INSERT INTO reactions', {}, Exception('unique violation'))
            return real_commit()

        with patch.object(db.session, 'commit', side_effect=commit_losing_first_insert):
            result = ledger.toggle('alice', claim.id, 'like')

        assert result == {'active': False}
        assert Reaction.query.filter_by(user_id='alice', claim_id=claim.id).count() == 0

    def test_unique_constraint_blocks_duplicates(self, make_claim):
        claim = make_claim()
        db.session.add(Reaction(user_id='alice', claim_id=claim.id, reaction_type='share'))
        db.session.commit()

        db.session.add(Reaction(user_id='alice', claim_id=claim.id, reaction_type='share'))
        with pytest.raises(IntegrityError):
            db.session.commit()
        db.session.rollback()
        assert ReactionLedger().count_by_type(claim.id, 'share') == 1
