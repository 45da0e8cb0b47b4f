"""Initial schema: activities and strava_credentials

Revision ID: 001_initial
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create activities table
    op.create_table(
        'activities',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('start_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('distance_m', sa.Integer(), nullable=False),
        sa.Column('moving_time_s', sa.Integer(), nullable=False),
        sa.Column('elev_gain_m', sa.Integer(), nullable=True),
        sa.Column('avg_hr', sa.Integer(), nullable=True),
        sa.Column('type', sa.String(50), nullable=True),
        sa.Column('title', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('shoe', sa.String(100), nullable=True),
        sa.Column('perceived_exertion', sa.Integer(), nullable=True),
        sa.Column('source', sa.String(20), nullable=False, server_default='manual'),
        sa.Column('is_public', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('strava_activity_id', sa.BigInteger(), nullable=True),
        sa.Column('strava_athlete_id', sa.BigInteger(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('strava_activity_id', name='uq_activities_strava_activity_id'),
    )

    op.create_index('ix_activities_start_time', 'activities', ['start_time'])
    op.create_index('ix_activities_source', 'activities', ['source'])
    op.create_index('ix_activities_is_public', 'activities', ['is_public'])

    # Create strava_credentials table
    op.create_table(
        'strava_credentials',
        sa.Column('athlete_id', sa.BigInteger(), primary_key=True, autoincrement=False),
        sa.Column('athlete_username', sa.String(255), nullable=True),
        sa.Column('athlete_firstname', sa.String(255), nullable=True),
        sa.Column('athlete_lastname', sa.String(255), nullable=True),
        sa.Column('access_token', sa.Text(), nullable=False),
        sa.Column('refresh_token', sa.Text(), nullable=False),
        sa.Column('token_type', sa.String(50), nullable=False, server_default='Bearer'),
        sa.Column('scope', sa.String(255), nullable=True),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_index('ix_strava_credentials_refresh_token', 'strava_credentials', ['refresh_token'])


def downgrade() -> None:
    op.drop_index('ix_strava_credentials_refresh_token', 'strava_credentials')
    op.drop_table('strava_credentials')

    op.drop_index('ix_activities_is_public', 'activities')
    op.drop_index('ix_activities_source', 'activities')
    op.drop_index('ix_activities_start_time', 'activities')
    op.drop_table('activities')
