#!/usr/bin/env python3
"""Load seed topics into the database. Idempotent."""

import json
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from factstream import create_app
from factstream.models.topic import Topic
from factstream.services.topic_registry import TopicRegistry


def seed_topics(filepath):
    """Load topics from JSON. Skip existing by name."""
    with open(filepath) as f:
        topics = json.load(f)

    registry = TopicRegistry()
    added = 0
    skipped = 0
    for t in topics:
        if Topic.query.filter_by(name=t['name']).first():
            skipped += 1
            continue
        registry.create_topic(name=t['name'], color=t.get('color', '#64748b'), icon=t.get('icon'))
        added += 1

    print(f"Topics: {added} added, {skipped} skipped (already exist)")


if __name__ == '__main__':
    app = create_app()
    project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

    with app.app_context():
        print("Seeding database...")
        seed_topics(os.path.join(project_root, 'seed', 'topics.json'))
        print("Done.")
