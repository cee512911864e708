"""Initial claim engine schema: topics, claims, verification, engagement

Revision ID: 3b1e9c2d7a41
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3b1e9c2d7a41'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'topics',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('color', sa.String(length=16), nullable=False),
        sa.Column('icon', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
    )

    op.create_table(
        'profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('display_name', sa.String(length=128), nullable=True),
        sa.Column('username', sa.String(length=64), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('location', sa.String(length=256), nullable=True),
        sa.Column('website', sa.String(length=2048), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id'),
    )

    op.create_table(
        'user_topics',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('topic_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['topic_id'], ['topics.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'topic_id', name='uq_user_topics_user_topic'),
    )
    op.create_index('ix_user_topics_user', 'user_topics', ['user_id'], unique=False)

    op.create_table(
        'claims',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('author_id', sa.String(length=64), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(length=2048), nullable=True),
        sa.Column('source_url', sa.String(length=2048), nullable=True),
        sa.Column('location', sa.String(length=256), nullable=True),
        sa.Column('urgency', sa.String(length=16), nullable=False),
        sa.Column('verification_status', sa.String(length=16), nullable=False),
        sa.Column('confidence', sa.Integer(), nullable=False),
        sa.Column('verdict', sa.String(length=32), nullable=True),
        sa.Column('correction', sa.Text(), nullable=True),
        sa.Column('context', sa.Text(), nullable=True),
        sa.Column('related_claims', sa.JSON(), nullable=True),
        sa.Column('verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint('confidence >= 0 AND confidence <= 100', name='ck_claims_confidence_range'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_claims_created_id', 'claims', ['created_at', 'id'], unique=False)
    op.create_index('ix_claims_status', 'claims', ['verification_status'], unique=False)
    op.create_index('ix_claims_author', 'claims', ['author_id'], unique=False)

    op.create_table(
        'claim_topics',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('claim_id', sa.String(length=36), nullable=False),
        sa.Column('topic_id', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['claim_id'], ['claims.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['topic_id'], ['topics.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('claim_id', 'topic_id', name='uq_claim_topics_claim_topic'),
    )
    op.create_index('ix_claim_topics_topic', 'claim_topics', ['topic_id'], unique=False)

    op.create_table(
        'source_citations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('claim_id', sa.String(length=36), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=256), nullable=False),
        sa.Column('url', sa.String(length=2048), nullable=False),
        sa.Column('credibility', sa.String(length=16), nullable=False),
        sa.ForeignKeyConstraint(['claim_id'], ['claims.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('claim_id', sa.String(length=36), nullable=False),
        sa.Column('author_id', sa.String(length=64), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['claim_id'], ['claims.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_comments_claim_created', 'comments', ['claim_id', 'created_at'], unique=False)

    op.create_table(
        'verification_transitions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('claim_id', sa.String(length=36), nullable=False),
        sa.Column('from_status', sa.String(length=16), nullable=False),
        sa.Column('to_status', sa.String(length=16), nullable=False),
        sa.Column('confidence', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['claim_id'], ['claims.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table(
        'reactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(length=64), nullable=False),
        sa.Column('claim_id', sa.String(length=36), nullable=False),
        sa.Column('reaction_type', sa.String(length=16), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['claim_id'], ['claims.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'claim_id', 'reaction_type', name='uq_reactions_user_claim_type'),
    )
    op.create_index('ix_reactions_claim_type', 'reactions', ['claim_id', 'reaction_type'], unique=False)


def downgrade():
    op.drop_index('ix_reactions_claim_type', table_name='reactions')
    op.drop_table('reactions')
    op.drop_table('verification_transitions')
    op.drop_index('ix_comments_claim_created', table_name='comments')
    op.drop_table('comments')
    op.drop_table('source_citations')
    op.drop_index('ix_claim_topics_topic', table_name='claim_topics')
    op.drop_table('claim_topics')
    op.drop_index('ix_claims_author', table_name='claims')
    op.drop_index('ix_claims_status', table_name='claims')
    op.drop_index('ix_claims_created_id', table_name='claims')
    op.drop_table('claims')
    op.drop_index('ix_user_topics_user', table_name='user_topics')
    op.drop_table('user_topics')
    op.drop_table('profiles')
    op.drop_table('topics')
