#!/usr/bin/env python3
"""Run one verification sweep over unresolved claims, for testing/debugging."""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from factstream import create_app
from factstream.services.verification_pipeline import VerificationPipeline

if __name__ == '__main__':
    app = create_app()
    limit = int(sys.argv[1]) if len(sys.argv) > 1 else app.config.get('VERIFICATION_SWEEP_BATCH', 25)

    print(f"Verifying up to {limit} unresolved claims...")
    with app.app_context():
        stats = VerificationPipeline().sweep_pending(limit=limit)
    print(f"Sweep complete. Processed {stats['processed']}, "
          f"resolved {stats['resolved']}, failed {stats['failed']}")
