import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-change-me')
    ADMIN_API_KEY = os.getenv('ADMIN_API_KEY')
    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'postgresql://localhost/factstream')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {'pool_pre_ping': True, 'pool_size': 5}

    # Verification oracle: 'keyword' (deterministic) or 'llm'
    VERIFICATION_ORACLE = os.getenv('VERIFICATION_ORACLE', 'keyword')
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    LLM_MODEL = os.getenv('LLM_MODEL', 'gpt-4.1-mini')
    LLM_TIMEOUT_SECONDS = float(os.getenv('LLM_TIMEOUT_SECONDS', '20'))

    # Engagement
    REACTION_TOGGLE_MAX_ATTEMPTS = int(os.getenv('REACTION_TOGGLE_MAX_ATTEMPTS', '3'))

    # Feed
    FEED_PAGE_SIZE = int(os.getenv('FEED_PAGE_SIZE', '20'))
    COMMENT_PREVIEW_LIMIT = int(os.getenv('COMMENT_PREVIEW_LIMIT', '2'))

    # Trending
    TREND_WINDOW_HOURS = int(os.getenv('TREND_WINDOW_HOURS', '24'))
    TRENDING_TOPICS_LIMIT = int(os.getenv('TRENDING_TOPICS_LIMIT', '5'))

    # Scheduler
    SCHEDULER_ENABLED = os.getenv('SCHEDULER_ENABLED', 'true').lower() == 'true'
    SCHEDULER_API_ENABLED = False
    VERIFICATION_SWEEP_MINUTES = int(os.getenv('VERIFICATION_SWEEP_MINUTES', '2'))
    VERIFICATION_SWEEP_BATCH = int(os.getenv('VERIFICATION_SWEEP_BATCH', '25'))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


class TestConfig(Config):
    TESTING = True
    ADMIN_API_KEY = 'test-admin-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SQLALCHEMY_ENGINE_OPTIONS = {}  # SQLite doesn't support pool_size
    SCHEDULER_ENABLED = False
    VERIFICATION_ORACLE = 'keyword'
    OPENAI_API_KEY = 'test-key'
    TREND_WINDOW_HOURS = 24
    TRENDING_TOPICS_LIMIT = 5
