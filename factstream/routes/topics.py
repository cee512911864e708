from flask import Blueprint, g, jsonify, request
from factstream.routes.identity import require_user
from factstream.services.topic_registry import PROFILE_FIELDS, TopicRegistry

topics_bp = Blueprint('topics', __name__)


@topics_bp.route('/topics')
def list_topics():
    return jsonify([t.to_dict() for t in TopicRegistry().list_topics()])


@topics_bp.route('/me/topics')
@require_user
def my_topics():
    topics = TopicRegistry().subscribed_topics(g.user_id)
    return jsonify([t.to_dict() for t in topics])


@topics_bp.route('/me/topics', methods=['PUT'])
@require_user
def set_my_topics():
    """Replace the caller's topic subscriptions."""
    data = request.get_json(silent=True) or {}
    topic_ids = data.get('topic_ids')
    if not isinstance(topic_ids, list):
        return jsonify({'error': '"topic_ids" must be a list'}), 400

    topics = TopicRegistry().set_subscriptions(g.user_id, topic_ids)
    return jsonify([t.to_dict() for t in topics])


@topics_bp.route('/me/profile', methods=['PUT'])
@require_user
def update_profile():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'JSON body required'}), 400

    fields = {k: data[k] for k in PROFILE_FIELDS if k in data}
    profile = TopicRegistry().upsert_profile(g.user_id, **fields)
    return jsonify(profile.to_dict())
