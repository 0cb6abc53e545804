"""Baseline migration - organizations, services, incidents, maintenance

Revision ID: 0001_baseline
Revises:
Create Date: 2026-10-19

Creates the tenant table and every status page table. Column types are
portable so the same revision runs on PostgreSQL and SQLite.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_baseline'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all status page tables."""

    # ==========================================================================
    # Organizations
    # ==========================================================================
    op.create_table(
        'organizations',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('external_id', sa.String(255), nullable=False, unique=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False, unique=True),
        *_timestamps(),
    )

    # ==========================================================================
    # Services and status history
    # ==========================================================================
    op.create_table(
        'services',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'organization_id',
            sa.Uuid(),
            sa.ForeignKey('organizations.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False),
        *_timestamps(),
    )
    op.create_index('idx_services_org_created', 'services', ['organization_id', 'created_at'])

    op.create_table(
        'status_history',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'service_id',
            sa.Uuid(),
            sa.ForeignKey('services.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('changed_by', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        'idx_status_history_service_created', 'status_history', ['service_id', 'created_at']
    )

    # ==========================================================================
    # Incidents
    # ==========================================================================
    op.create_table(
        'incidents',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'organization_id',
            sa.Uuid(),
            sa.ForeignKey('organizations.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('impact', sa.String(32), nullable=False),
        sa.Column('resolved_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('idx_incidents_org_created', 'incidents', ['organization_id', 'created_at'])

    op.create_table(
        'incident_updates',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'incident_id',
            sa.Uuid(),
            sa.ForeignKey('incidents.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index(
        'idx_incident_updates_incident_created',
        'incident_updates',
        ['incident_id', 'created_at'],
    )

    op.create_table(
        'service_incidents',
        sa.Column(
            'service_id',
            sa.Uuid(),
            sa.ForeignKey('services.id', ondelete='CASCADE'),
            primary_key=True,
        ),
        sa.Column(
            'incident_id',
            sa.Uuid(),
            sa.ForeignKey('incidents.id', ondelete='CASCADE'),
            primary_key=True,
        ),
    )

    # ==========================================================================
    # Maintenance windows
    # ==========================================================================
    op.create_table(
        'maintenance_windows',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column(
            'organization_id',
            sa.Uuid(),
            sa.ForeignKey('organizations.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('scheduled_start', sa.DateTime(timezone=True), nullable=False),
        sa.Column('scheduled_end', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', sa.String(32), nullable=False),
        *_timestamps(),
    )
    op.create_index(
        'idx_maintenance_org_start', 'maintenance_windows', ['organization_id', 'scheduled_start']
    )

    op.create_table(
        'service_maintenance',
        sa.Column(
            'service_id',
            sa.Uuid(),
            sa.ForeignKey('services.id', ondelete='CASCADE'),
            primary_key=True,
        ),
        sa.Column(
            'maintenance_id',
            sa.Uuid(),
            sa.ForeignKey('maintenance_windows.id', ondelete='CASCADE'),
            primary_key=True,
        ),
    )


def downgrade() -> None:
    """Drop all status page tables."""
    op.drop_table('service_maintenance')
    op.drop_table('maintenance_windows')
    op.drop_table('service_incidents')
    op.drop_table('incident_updates')
    op.drop_table('incidents')
    op.drop_table('status_history')
    op.drop_table('services')
    op.drop_table('organizations')
