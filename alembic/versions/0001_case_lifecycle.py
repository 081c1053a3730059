"""Case lifecycle: cases, assignments, audit trail and court counters.

Revision ID: 0001_case_lifecycle
Revises:
Create Date: 2026-10-19

Creates:
- cases (soft delete, version column, unique case number)
- case_assignments
- audit_log_entries (append-only, no FK to cases)
- court_sequence_counters
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_case_lifecycle'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # ==========================================================================
    # cases
    # ==========================================================================
    op.create_table(
        'cases',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('case_number', sa.String(40), nullable=False),
        sa.Column('case_type', sa.String(50), nullable=False),
        sa.Column('status', sa.String(40), server_default='APPLICATION', nullable=False),
        sa.Column('status_reason', sa.Text(), nullable=True),
        sa.Column('version', sa.Integer(), server_default=sa.text('1'), nullable=False),
        sa.Column('assigned_court', sa.String(200), nullable=False),
        sa.Column('organisation_id', sa.String(100), nullable=True),
        sa.Column('internal_notes', sa.Text(), nullable=True),
        sa.Column('staff_comments', sa.Text(), nullable=True),
        sa.Column('external_reference', sa.String(100), nullable=True),
        sa.Column('created_by', sa.String(100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('case_number', name='uq_case_number'),
    )
    op.create_index('idx_cases_court_created', 'cases', ['assigned_court', 'created_at'])
    op.create_index('idx_cases_status', 'cases', ['status'])

    # ==========================================================================
    # case_assignments
    # ==========================================================================
    op.create_table(
        'case_assignments',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('case_id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.String(100), nullable=False),
        sa.Column('assignment_type', sa.String(30), nullable=False),
        sa.Column('created_by', sa.String(100), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.ForeignKeyConstraint(['case_id'], ['cases.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('case_id', 'user_id', 'assignment_type', name='uq_case_assignment'),
    )
    op.create_index(
        'idx_case_assignments_user_type', 'case_assignments', ['user_id', 'assignment_type']
    )

    # ==========================================================================
    # audit_log_entries
    # ==========================================================================
    op.create_table(
        'audit_log_entries',
        sa.Column(
            'id',
            sa.BigInteger().with_variant(sa.Integer(), 'sqlite'),
            autoincrement=True,
            nullable=False,
        ),
        sa.Column('case_id', sa.Uuid(), nullable=False),
        sa.Column('action', sa.String(30), nullable=False),
        sa.Column('actor', sa.String(100), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('changes', sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_audit_case_timestamp', 'audit_log_entries', ['case_id', 'timestamp'])

    # ==========================================================================
    # court_sequence_counters
    # ==========================================================================
    op.create_table(
        'court_sequence_counters',
        sa.Column('court_code', sa.String(20), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('current_value', sa.Integer(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('court_code', 'year'),
    )


def downgrade() -> None:
    op.drop_table('court_sequence_counters')
    op.drop_index('idx_audit_case_timestamp', table_name='audit_log_entries')
    op.drop_table('audit_log_entries')
    op.drop_index('idx_case_assignments_user_type', table_name='case_assignments')
    op.drop_table('case_assignments')
    op.drop_index('idx_cases_status', table_name='cases')
    op.drop_index('idx_cases_court_created', table_name='cases')
    op.drop_table('cases')
