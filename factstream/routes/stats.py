from datetime import timedelta
from flask import Blueprint, jsonify, request
from factstream.services.trending_service import TrendingService

stats_bp = Blueprint('stats', __name__)


@stats_bp.route('/global')
def global_stats():
    return jsonify(TrendingService().compute_global_stats())


@stats_bp.route('/trends')
def topic_trends():
    """Trending topics. ``hours`` overrides the configured trend window."""
    hours = request.args.get('hours', type=int)
    if hours is not None and hours <= 0:
        return jsonify({'error': '"hours" must be a positive integer'}), 400

    window = timedelta(hours=hours) if hours else None
    trends = TrendingService().compute_topic_trends(window=window)
    return jsonify([t.to_dict() for t in trends])


@stats_bp.route('/contributors')
def contributors():
    limit = request.args.get('limit', 5, type=int)
    return jsonify(TrendingService().top_contributors(limit=max(1, min(limit, 50))))
