"""Initial background verification schema

Revision ID: initial_verification
Revises:
Create Date: 2026-10-18

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'initial_verification'
down_revision = None
branch_labels = None
depends_on = None

VERIFICATION_STATUS = sa.Enum(
    'PENDING', 'IN_PROGRESS', 'CLEAR', 'DISCREPANCY', 'FAILED', name='verification_status'
)
DOCUMENT_TYPE = sa.Enum('OFFER_LETTER', 'RELIEVING_LETTER', name='document_type')


def upgrade():
    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('joining_designation', sa.String(length=255), nullable=True),
        sa.Column('resume_url', sa.String(length=1000), nullable=True),
        sa.Column('resume_uploaded_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_candidates_id'), 'candidates', ['id'], unique=False)
    op.create_index(op.f('ix_candidates_email'), 'candidates', ['email'], unique=True)
    op.create_index(op.f('ix_candidates_city'), 'candidates', ['city'], unique=False)

    op.create_table(
        'candidate_notes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('candidate_id', sa.Integer(), nullable=False),
        sa.Column('note', sa.Text(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidates.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_candidate_notes_id'), 'candidate_notes', ['id'], unique=False)
    op.create_index(op.f('ix_candidate_notes_candidate_id'), 'candidate_notes', ['candidate_id'], unique=False)
    op.create_index(op.f('ix_candidate_notes_created_at'), 'candidate_notes', ['created_at'], unique=False)

    op.create_table(
        'employment_verifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('candidate_id', sa.Integer(), nullable=False),
        sa.Column('previous_company_name', sa.String(length=255), nullable=False),
        sa.Column('previous_company_email', sa.String(length=255), nullable=False),
        sa.Column('designation', sa.String(length=255), nullable=True),
        sa.Column('tenure_from', sa.Date(), nullable=True),
        sa.Column('tenure_to', sa.Date(), nullable=True),
        sa.Column('reason_for_exit', sa.Text(), nullable=True),
        sa.Column('hr_contact_name', sa.String(length=255), nullable=True),
        sa.Column('hr_contact_phone', sa.String(length=50), nullable=True),
        sa.Column('verification_token', sa.String(length=128), nullable=False),
        sa.Column('token_expires_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', VERIFICATION_STATUS, nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('completed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['candidate_id'], ['candidates.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_employment_verifications_id'), 'employment_verifications', ['id'], unique=False)
    op.create_index(
        op.f('ix_employment_verifications_candidate_id'), 'employment_verifications', ['candidate_id'], unique=False
    )
    op.create_index(
        op.f('ix_employment_verifications_verification_token'),
        'employment_verifications',
        ['verification_token'],
        unique=True,
    )
    op.create_index(op.f('ix_employment_verifications_status'), 'employment_verifications', ['status'], unique=False)

    op.create_table(
        'verification_responses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employment_verification_id', sa.Integer(), nullable=False),
        sa.Column('answers', sa.JSON(), nullable=False),
        sa.Column('submitted_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['employment_verification_id'], ['employment_verifications.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('employment_verification_id'),
    )
    op.create_index(op.f('ix_verification_responses_id'), 'verification_responses', ['id'], unique=False)

    op.create_table(
        'verification_documents',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('response_id', sa.Integer(), nullable=False),
        sa.Column('document_type', DOCUMENT_TYPE, nullable=False),
        sa.Column('file_url', sa.String(length=1000), nullable=False),
        sa.Column('uploaded_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['response_id'], ['verification_responses.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_verification_documents_id'), 'verification_documents', ['id'], unique=False)
    op.create_index(
        op.f('ix_verification_documents_response_id'), 'verification_documents', ['response_id'], unique=False
    )

    op.create_table(
        'calling_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('employment_verification_id', sa.Integer(), nullable=False),
        sa.Column('call_time', sa.DateTime(timezone=True), nullable=False),
        sa.Column('outcome', sa.String(length=255), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['employment_verification_id'], ['employment_verifications.id'], ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_calling_logs_id'), 'calling_logs', ['id'], unique=False)
    op.create_index(
        op.f('ix_calling_logs_employment_verification_id'), 'calling_logs', ['employment_verification_id'], unique=False
    )


def downgrade():
    op.drop_table('calling_logs')
    op.drop_table('verification_documents')
    op.drop_table('verification_responses')
    op.drop_table('employment_verifications')
    op.drop_table('candidate_notes')
    op.drop_table('candidates')
    DOCUMENT_TYPE.drop(op.get_bind(), checkfirst=True)
    VERIFICATION_STATUS.drop(op.get_bind(), checkfirst=True)
