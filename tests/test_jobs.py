from unittest.mock import MagicMock
from factstream.jobs.scheduled import _verification_sweep_job, register_jobs
from factstream.models.claim import Claim


class TestScheduledJobs:
    def test_register_jobs_upserts_sweep(self, app):
        scheduler = MagicMock()
        register_jobs(scheduler, app)

        scheduler.add_job.assert_called_once()
        kwargs = scheduler.add_job.call_args.kwargs
        assert kwargs['id'] == 'verification_sweep'
        assert kwargs['replace_existing'] is True
        assert kwargs['trigger'] == 'interval'
        assert kwargs['minutes'] == app.config['VERIFICATION_SWEEP_MINUTES']
        assert kwargs['args'] == [app]

    def test_sweep_job_verifies_pending(self, app, make_claim):
        claim = make_claim(content='5G towers cause illness')
        _verification_sweep_job(app)

        assert Claim.query.filter_by(id=claim.id).one().verification_status == 'false'
