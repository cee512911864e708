"""Process-level feature flags read from ``FF_*`` environment variables."""
import os

# Known flags and their defaults when no FF_* variable is set.
DEFAULT_FLAGS = {
    'auto_verify': False,   # run the verification pipeline right after claim creation
}

_FLAGS = dict(DEFAULT_FLAGS)


def _parse(val):
    return str(val).strip().lower() in ('true', '1', 'yes', 'on')


def init_flags(environ=None):
    environ = os.environ if environ is None else environ
    _FLAGS.clear()
    _FLAGS.update(DEFAULT_FLAGS)
    for key, val in environ.items():
        if key.startswith('FF_'):
            _FLAGS[key[3:].lower()] = _parse(val)


def is_enabled(flag_name: str) -> bool:
    return _FLAGS.get(flag_name, False)


def all_flags() -> dict:
    return dict(_FLAGS)


def set_flag(flag_name: str, value: bool):
    _FLAGS[flag_name] = bool(value)
