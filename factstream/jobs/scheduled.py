import logging

logger = logging.getLogger(__name__)


def _verification_sweep_job(app):
    with app.app_context():
        from factstream.services.verification_pipeline import VerificationPipeline
        batch = app.config.get('VERIFICATION_SWEEP_BATCH', 25)
        logger.info(f"[Job] Verification sweep (batch {batch})")
        stats = VerificationPipeline().sweep_pending(limit=batch)
        logger.info(f"[Job] Verification sweep: {stats['resolved']}/{stats['processed']} resolved")


def _upsert_job(scheduler, **kwargs):
    scheduler.add_job(replace_existing=True, **kwargs)


def register_jobs(scheduler, app):
    """Register all scheduled jobs."""
    minutes = max(1, int(app.config.get('VERIFICATION_SWEEP_MINUTES', 2)))
    _upsert_job(
        scheduler,
        id='verification_sweep',
        func=_verification_sweep_job,
        trigger='interval',
        args=[app],
        minutes=minutes,
        misfire_grace_time=300,
        coalesce=True,
        max_instances=1,
    )
    logger.info(f"All scheduled jobs registered (verification sweep every {minutes} min)")
