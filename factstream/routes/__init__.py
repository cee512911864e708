import logging
from flask import jsonify
from factstream.exceptions import FactStreamError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.errorhandler(FactStreamError)
    def handle_domain_error(e):
        if e.status_code >= 500:
            logger.error(f"{type(e).__name__} during {e.operation} (claim {e.claim_id}): {e.message}")
        return jsonify(e.to_dict()), e.status_code


def register_blueprints(app):
    from factstream.routes.health import health_bp
    from factstream.routes.claims import claims_bp
    from factstream.routes.feed import feed_bp
    from factstream.routes.topics import topics_bp
    from factstream.routes.stats import stats_bp
    from factstream.routes.admin import admin_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(claims_bp, url_prefix='/api/claims')
    app.register_blueprint(feed_bp, url_prefix='/api/feed')
    app.register_blueprint(topics_bp, url_prefix='/api')
    app.register_blueprint(stats_bp, url_prefix='/api/stats')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    register_error_handlers(app)
