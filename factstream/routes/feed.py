from flask import Blueprint, jsonify, request
from factstream.routes.identity import current_user_id
from factstream.services.feed_service import FeedService

feed_bp = Blueprint('feed', __name__)


@feed_bp.route('')
def get_feed():
    """Personalized feed page. Anonymous viewers get plain recency order."""
    feed = FeedService().build_feed(
        current_user_id(),
        limit=request.args.get('limit', type=int),
        cursor=request.args.get('cursor'),
    )
    return jsonify({
        'entries': [e.to_dict() for e in feed['entries']],
        'next_cursor': feed['next_cursor'],
    })
