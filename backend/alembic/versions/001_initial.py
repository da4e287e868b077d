"""Initial migration - chapters, routes, events, riders, registrations, results

Revision ID: 001_initial
Revises:
Create Date: 2026-01-08

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
    op.create_table(
        'chapters',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('slug', sa.String(100), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('vp_email', sa.String(255), nullable=True),
    )
    op.create_index('ix_chapters_slug', 'chapters', ['slug'], unique=True)

    op.create_table(
        'riders',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('first_name', sa.String(100), nullable=False),
        sa.Column('last_name', sa.String(100), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('gender', sa.String(1), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_riders_email', 'riders', ['email'])

    op.create_table(
        'routes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('chapter_id', sa.String(36), sa.ForeignKey('chapters.id'), nullable=True),
        sa.Column('distance_km', sa.Float(), nullable=True),
        sa.Column('rwgps_id', sa.String(20), nullable=True),
    )
    op.create_index('ix_routes_slug', 'routes', ['slug'], unique=True)

    op.create_table(
        'route_controls',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('route_id', sa.String(36), sa.ForeignKey('routes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('distance_km', sa.Float(), nullable=False),
        sa.UniqueConstraint('route_id', 'position', name='uq_route_control_position'),
    )
    op.create_index('ix_route_controls_route_id', 'route_controls', ['route_id'])

    op.create_table(
        'events',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('slug', sa.String(150), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('distance_km', sa.Integer(), nullable=False),
        sa.Column('event_type', sa.String(20), nullable=False),
        sa.Column('event_date', sa.Date(), nullable=False),
        sa.Column('start_time', sa.String(8), nullable=True),
        sa.Column('start_location', sa.String(255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('chapter_id', sa.String(36), sa.ForeignKey('chapters.id'), nullable=True),
        sa.Column('route_id', sa.String(36), sa.ForeignKey('routes.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_events_slug', 'events', ['slug'], unique=True)
    op.create_index('ix_events_event_date', 'events', ['event_date'])
    op.create_index('ix_events_status', 'events', ['status'])
    op.create_index('ix_events_chapter_id', 'events', ['chapter_id'])

    op.create_table(
        'registrations',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('event_id', sa.String(36), sa.ForeignKey('events.id', ondelete='CASCADE'), nullable=False),
        sa.Column('rider_id', sa.String(36), sa.ForeignKey('riders.id'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('share_registration', sa.Boolean(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('registered_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('event_id', 'rider_id', name='uq_registration_event_rider'),
    )
    op.create_index('ix_registrations_event_id', 'registrations', ['event_id'])
    op.create_index('ix_registrations_rider_id', 'registrations', ['rider_id'])

    op.create_table(
        'results',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('event_id', sa.String(36), sa.ForeignKey('events.id'), nullable=False),
        sa.Column('rider_id', sa.String(36), sa.ForeignKey('riders.id'), nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('finish_time', sa.String(8), nullable=True),
        sa.Column('season', sa.Integer(), nullable=True),
        sa.Column('distance_km', sa.Integer(), nullable=True),
        sa.Column('submission_token', sa.String(64), nullable=False),
        sa.Column('gpx_url', sa.String(500), nullable=True),
        sa.Column('gpx_file_path', sa.String(500), nullable=True),
        sa.Column('control_card_front_path', sa.String(500), nullable=True),
        sa.Column('control_card_back_path', sa.String(500), nullable=True),
        sa.Column('rider_notes', sa.Text(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('event_id', 'rider_id', name='uq_result_event_rider'),
    )
    op.create_index('ix_results_submission_token', 'results', ['submission_token'], unique=True)
    op.create_index('ix_results_event_id', 'results', ['event_id'])
    op.create_index('ix_results_rider_id', 'results', ['rider_id'])
    op.create_index('ix_results_season', 'results', ['season'])


def downgrade() -> None:
    op.drop_table('results')
    op.drop_table('registrations')
    op.drop_table('events')
    op.drop_table('route_controls')
    op.drop_table('routes')
    op.drop_table('riders')
    op.drop_table('chapters')
