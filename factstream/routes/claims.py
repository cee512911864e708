import logging
from flask import Blueprint, current_app, g, jsonify, request
from factstream import feature_flags
from factstream.exceptions import OracleUnavailableError
from factstream.routes.identity import current_user_id, require_user
from factstream.services.claim_store import ClaimStore
from factstream.services.reaction_ledger import ReactionLedger
from factstream.services.verification_pipeline import VerificationPipeline

logger = logging.getLogger(__name__)

claims_bp = Blueprint('claims', __name__)

CLAIM_FIELDS = ('content', 'urgency', 'image_url', 'source_url', 'location', 'topic_ids')


@claims_bp.route('', methods=['POST'])
@require_user
def create_claim():
    """Post a new claim. Starts in the pending verification state."""
    data = request.get_json(silent=True)
    if not data:
        return jsonify({'error': 'JSON body required'}), 400
    if 'content' not in data:
        return jsonify({'error': "Missing fields: ['content']"}), 400

    store = ClaimStore()
    claim_id = store.create(author_id=g.user_id, **{k: data[k] for k in CLAIM_FIELDS if k in data})

    if feature_flags.is_enabled('auto_verify'):
        try:
            VerificationPipeline(claim_store=store).verify(claim_id)
        except OracleUnavailableError as e:
            # The claim is stored; it stays pending until a sweep or explicit verify succeeds
            logger.warning(f"Auto-verify deferred for claim {claim_id}: {e}")

    return jsonify(store.get(claim_id).to_dict()), 201


@claims_bp.route('')
def list_claims():
    """Recent claims, newest first, cursor-paginated."""
    limit = request.args.get('limit', current_app.config.get('FEED_PAGE_SIZE', 20), type=int)
    cursor = request.args.get('cursor')

    store = ClaimStore()
    claims = store.list_recent(limit=limit, cursor=cursor)
    return jsonify({
        'claims': [c.to_dict() for c in claims],
        'next_cursor': store.next_cursor(claims, limit),
    })


@claims_bp.route('/search')
def search_claims():
    claims = ClaimStore().search(
        term=request.args.get('q'),
        status=request.args.get('status'),
        urgency=request.args.get('urgency'),
        limit=request.args.get('limit', 20, type=int),
    )
    return jsonify({'claims': [c.to_dict() for c in claims]})


@claims_bp.route('/<claim_id>')
def get_claim(claim_id):
    return jsonify(ClaimStore().get(claim_id).to_dict())


@claims_bp.route('/<claim_id>/topics', methods=['POST'])
@require_user
def attach_topics(claim_id):
    data = request.get_json(silent=True) or {}
    topic_ids = data.get('topic_ids')
    if not isinstance(topic_ids, list):
        return jsonify({'error': '"topic_ids" must be a list'}), 400

    claim = ClaimStore().attach_topics(claim_id, topic_ids)
    return jsonify(claim.to_dict())


@claims_bp.route('/<claim_id>/verify', methods=['POST'])
def verify_claim(claim_id):
    """Run the verification pipeline now. 503 if the oracle is unavailable (claim unchanged)."""
    claim = VerificationPipeline().verify(claim_id)
    return jsonify(claim.to_dict())


@claims_bp.route('/<claim_id>/verification/history')
def verification_history(claim_id):
    claim = ClaimStore().get(claim_id)
    return jsonify([t.to_dict() for t in claim.transitions])


@claims_bp.route('/<claim_id>/comments')
def list_comments(claim_id):
    comments = ClaimStore().list_comments(claim_id)
    return jsonify([c.to_dict() for c in comments])


@claims_bp.route('/<claim_id>/comments', methods=['POST'])
@require_user
def add_comment(claim_id):
    data = request.get_json(silent=True) or {}
    comment = ClaimStore().add_comment(claim_id, g.user_id, data.get('content'))
    return jsonify(comment.to_dict()), 201


@claims_bp.route('/<claim_id>/reactions/<reaction_type>', methods=['POST'])
@require_user
def toggle_reaction(claim_id, reaction_type):
    ledger = ReactionLedger()
    result = ledger.toggle(g.user_id, claim_id, reaction_type)
    return jsonify({
        **result,
        'type': reaction_type,
        'count': ledger.count_by_type(claim_id, reaction_type),
    })


@claims_bp.route('/<claim_id>/reactions')
def reaction_summary(claim_id):
    """Counts per type, plus the caller's active types when a user id is supplied."""
    ledger = ReactionLedger()
    ClaimStore().get(claim_id)
    user_id = current_user_id()
    return jsonify({
        'counts': ledger.counts_for_claims([claim_id])[claim_id],
        'active': sorted(ledger.active_types_for_user(user_id, [claim_id]).get(claim_id, ())),
    })
