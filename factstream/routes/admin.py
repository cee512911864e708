import hmac
from functools import wraps
from flask import Blueprint, jsonify, request, current_app
from factstream import feature_flags
from factstream.services.topic_registry import TopicRegistry
from factstream.services.verification_pipeline import VerificationPipeline

admin_bp = Blueprint('admin', __name__)


def _extract_admin_token():
    auth_header = request.headers.get('Authorization', '')
    if auth_header.lower().startswith('bearer '):
        return auth_header.split(' ', 1)[1].strip()
    return (request.headers.get('X-Admin-Key') or '').strip()


def require_admin_key(func):
    """Require ADMIN_API_KEY for all admin endpoints."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        configured_key = current_app.config.get('ADMIN_API_KEY')
        if not configured_key:
            return jsonify({'error': 'Admin API is disabled: ADMIN_API_KEY is not configured'}), 503

        presented_key = _extract_admin_token()
        if not presented_key or not hmac.compare_digest(presented_key, configured_key):
            return jsonify({'error': 'Unauthorized'}), 401

        return func(*args, **kwargs)

    return wrapper


@admin_bp.route('/topics', methods=['POST'])
@require_admin_key
def add_topic():
    """Register a reference topic."""
    data = request.get_json(silent=True)
    if not data or 'name' not in data:
        return jsonify({'error': 'JSON body with "name" required'}), 400

    topic = TopicRegistry().create_topic(
        name=data['name'],
        color=data.get('color', '#64748b'),
        icon=data.get('icon'),
    )
    return jsonify(topic.to_dict()), 201


@admin_bp.route('/verification/sweep', methods=['POST'])
@require_admin_key
def trigger_sweep():
    """Verify a batch of unresolved claims now."""
    data = request.get_json(silent=True) or {}
    limit = data.get('limit', current_app.config.get('VERIFICATION_SWEEP_BATCH', 25))
    if not isinstance(limit, int) or limit < 1:
        return jsonify({'error': '"limit" must be a positive integer'}), 400

    stats = VerificationPipeline().sweep_pending(limit=limit)
    return jsonify({'status': 'complete', **stats})


@admin_bp.route('/flags')
@require_admin_key
def list_flags():
    """List all feature flags."""
    return jsonify(feature_flags.all_flags())


@admin_bp.route('/flags/<key>', methods=['PUT'])
@require_admin_key
def toggle_flag(key):
    """Toggle a feature flag at runtime."""
    data = request.get_json(silent=True)
    if data is None or 'value' not in data:
        return jsonify({'error': 'JSON body with "value" (bool) required'}), 400

    if not isinstance(data['value'], bool):
        return jsonify({'error': '"value" must be a boolean'}), 400

    feature_flags.set_flag(key, data['value'])
    return jsonify({'flag': key, 'value': feature_flags.is_enabled(key)})
