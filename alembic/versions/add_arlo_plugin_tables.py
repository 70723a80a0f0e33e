"""Add Arlo plugin tables

Revision ID: add_arlo_plugin_tables
Revises:
Create Date: 2026-10-17

Creates the tables owned by the plugin:
- enrol_arlo_contact: Arlo contacts linked to users (one per user)
- enrol_arlo_registration: Arlo registrations per enrolment instance
- enrol_arlo_emailqueue: queued outbound emails
- enrol_arlo_privacy_audit: privacy request audit trail

Host tables (user, context, role, enrol, groups, groups_members,
config_plugins) belong to the host and are not managed here.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "add_arlo_plugin_tables"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the plugin tables with their indexes."""
    op.create_table(
        'enrol_arlo_contact',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('userid', sa.Integer(), nullable=False),
        sa.Column('sourceid', sa.Integer(), nullable=False),
        sa.Column('sourceguid', sa.String(36), nullable=False, server_default=''),
        sa.Column('firstname', sa.String(64), nullable=False, server_default=''),
        sa.Column('lastname', sa.String(64), nullable=False, server_default=''),
        sa.Column('email', sa.String(256), nullable=False, server_default=''),
        sa.Column('codeprimary', sa.String(50), nullable=False, server_default=''),
        sa.Column('phonework', sa.String(64), nullable=False, server_default=''),
        sa.Column('phonemobile', sa.String(64), nullable=False, server_default=''),
        sa.Column('timecreated', sa.Integer(), nullable=False),
        sa.Column('timemodified', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_enrol_arlo_contact_userid', 'enrol_arlo_contact', ['userid'], unique=True)
    op.create_index('ix_enrol_arlo_contact_sourceid', 'enrol_arlo_contact', ['sourceid'])

    op.create_table(
        'enrol_arlo_registration',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('enrolid', sa.Integer(), nullable=False),
        sa.Column('userid', sa.Integer(), nullable=False),
        sa.Column('sourceid', sa.Integer(), nullable=False),
        sa.Column('sourceguid', sa.String(36), nullable=False, server_default=''),
        sa.Column('grade', sa.String(64), nullable=False, server_default=''),
        sa.Column('outcome', sa.String(64), nullable=False, server_default=''),
        sa.Column('lastactivity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('progressstatus', sa.String(64), nullable=False, server_default=''),
        sa.Column('progresspercent', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('sourcecontactid', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('sourcecontactguid', sa.String(36), nullable=False, server_default=''),
        sa.Column('timecreated', sa.Integer(), nullable=False),
        sa.Column('timemodified', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['enrolid'], ['enrol.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_enrol_arlo_registration_enrolid', 'enrol_arlo_registration', ['enrolid'])
    op.create_index('ix_enrol_arlo_registration_userid', 'enrol_arlo_registration', ['userid'])
    op.create_index('idx_arlo_registration_enrol_user', 'enrol_arlo_registration', ['enrolid', 'userid'])

    op.create_table(
        'enrol_arlo_emailqueue',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('area', sa.String(20), nullable=False),
        sa.Column('instanceid', sa.Integer(), nullable=False),
        sa.Column('userid', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('status', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('extra', sa.Text(), nullable=True),
        sa.Column('timecreated', sa.Integer(), nullable=False),
        sa.Column('timemodified', sa.Integer(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_enrol_arlo_emailqueue_area', 'enrol_arlo_emailqueue', ['area'])
    op.create_index('ix_enrol_arlo_emailqueue_instanceid', 'enrol_arlo_emailqueue', ['instanceid'])
    op.create_index('ix_enrol_arlo_emailqueue_userid', 'enrol_arlo_emailqueue', ['userid'])
    op.create_index('idx_arlo_emailqueue_area_instance', 'enrol_arlo_emailqueue', ['area', 'instanceid'])

    op.create_table(
        'enrol_arlo_privacy_audit',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('audit_id', sa.String(36), nullable=False),
        sa.Column('operation', sa.String(20), nullable=False),
        sa.Column('target_userid', sa.Integer(), nullable=True),
        sa.Column('target_contextid', sa.Integer(), nullable=True),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('started_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_enrol_arlo_privacy_audit_audit_id', 'enrol_arlo_privacy_audit', ['audit_id'], unique=True)
    op.create_index('ix_enrol_arlo_privacy_audit_operation', 'enrol_arlo_privacy_audit', ['operation'])
    op.create_index('ix_enrol_arlo_privacy_audit_target_userid', 'enrol_arlo_privacy_audit', ['target_userid'])
    op.create_index('ix_enrol_arlo_privacy_audit_target_contextid', 'enrol_arlo_privacy_audit', ['target_contextid'])


def downgrade() -> None:
    """Drop the plugin tables."""
    op.drop_table('enrol_arlo_privacy_audit')
    op.drop_table('enrol_arlo_emailqueue')
    op.drop_table('enrol_arlo_registration')
    op.drop_table('enrol_arlo_contact')
