import pytest
from datetime import datetime, timezone
from factstream import feature_flags
from factstream.utils.cursor import as_utc, decode_cursor, encode_cursor
from factstream.utils.text import clean_text, contains_any, is_http_url


class TestCursor:
    def test_round_trip_keeps_key(self):
        ts = datetime(2025, 3, 1, 9, 30, 15, 123456, tzinfo=timezone.utc)
        assert decode_cursor(encode_cursor(ts, 'abc-123')) == (ts, 'abc-123')

    def test_naive_timestamps_treated_as_utc(self):
        naive = datetime(2025, 3, 1, 9, 30)
        created_at, _ = decode_cursor(encode_cursor(naive, 'x'))
        assert created_at == naive.replace(tzinfo=timezone.utc)
        assert as_utc(None) is None

    @pytest.mark.parametrize('cursor', ['', 'garbage!!', 'eyJ0IjogMX0=', None])
    def test_malformed(self, cursor):
        with pytest.raises(ValueError):
            decode_cursor(cursor)


class TestText:
    def test_clean_text(self):
        assert clean_text('  Road\n closed \t now ') == 'Road closed now'
        assert clean_text(None) == ''

    def test_contains_any(self):
        assert contains_any('New 5G mast', ('5g',))
        assert not contains_any(None, ('5g',))

    @pytest.mark.parametrize('value,expected', [
        ('https://www.who.int/emergencies', True),
        ('http://localhost:8080/x', True),
        ('ftp://files.example.org', False),
        ('www.example.org', False),
        ('', False),
        (None, False),
        (123, False),
    ])
    def test_is_http_url(self, value, expected):
        assert is_http_url(value) is expected


class TestFeatureFlags:
    def teardown_method(self):
        feature_flags.init_flags()

    def test_defaults(self):
        feature_flags.init_flags({})
        assert feature_flags.all_flags() == {'auto_verify': False}
        assert feature_flags.is_enabled('unknown_flag') is False

    def test_env_overrides(self):
        feature_flags.init_flags({'FF_AUTO_VERIFY': 'yes', 'FF_BETA_FEED': '1', 'OTHER': 'true'})
        assert feature_flags.is_enabled('auto_verify') is True
        assert feature_flags.is_enabled('beta_feed') is True
        assert 'other' not in feature_flags.all_flags()

    def test_set_flag(self):
        feature_flags.init_flags({})
        feature_flags.set_flag('auto_verify', 1)
        assert feature_flags.is_enabled('auto_verify') is True
