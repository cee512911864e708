import os
import pytest
from datetime import datetime, timedelta, timezone

# Set test env vars before importing app
os.environ['FF_AUTO_VERIFY'] = 'false'

from factstream import create_app
from factstream.extensions import db as _db
from factstream.models.claim import Claim
from factstream.models.topic import Topic, UserProfile
from factstream.services.claim_store import ClaimStore
from config import TestConfig

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope='session')
def app():
    """Create app with test config."""
    app = create_app(TestConfig)
    return app


@pytest.fixture(autouse=True)
def setup_db(app):
    """Create tables before each test, drop after."""
    with app.app_context():
        _db.create_all()
        yield
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers(app):
    return {'X-Admin-Key': app.config['ADMIN_API_KEY']}


@pytest.fixture
def db_session(app):
    with app.app_context():
        yield _db.session


@pytest.fixture
def sample_topics(db_session):
    """Insert the reference topics used across tests."""
    topics = [
        Topic(name='Public Health', color='#16a34a', icon='heart-pulse'),
        Topic(name='Transportation', color='#2563eb', icon='car'),
        Topic(name='Emergency Response', color='#dc2626', icon='siren'),
    ]
    db_session.add_all(topics)
    db_session.commit()
    return {t.name: t for t in topics}


@pytest.fixture
def sample_profiles(db_session):
    profiles = [
        UserProfile(user_id='alice', display_name='Alice', username='alice'),
        UserProfile(user_id='bob', display_name='Bob', username='bob'),
    ]
    db_session.add_all(profiles)
    db_session.commit()
    return profiles


@pytest.fixture
def make_claim(db_session):
    """Create a claim through the store, then pin its created_at for ordering tests."""
    store = ClaimStore()

    def _make(content='Bridge on Route 9 is closed', author_id='alice',
              hours_ago=1, topic_ids=None, created_at=None, **kwargs):
        claim_id = store.create(author_id=author_id, content=content, topic_ids=topic_ids, **kwargs)
        claim = _db.session.get(Claim, claim_id)
        claim.created_at = created_at or (NOW - timedelta(hours=hours_ago))
        _db.session.commit()
        return claim

    return _make


@pytest.fixture
def now():
    """Fixed reference time that make_claim offsets from."""
    return NOW
