"""create_timeclock_tables

Revision ID: 0001
Revises:
Create Date: 2026-10-19 09:00:00.000000

타각 관리 테이블 생성: workers, locations, sectors, managers, punches, justifications.
Create time-clock tables: directories, punches and justifications.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # workers — 조합원 작업자 (is_placeholder: 스윕이 생성한 임시 행)
    # Cooperative workers; placeholders are synthesized by the sweep
    op.create_table(
        'workers',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('registration', sa.String(64), nullable=True),
        sa.Column('specialty', sa.String(120), nullable=True),
        sa.Column('status', sa.String(20), server_default='ACTIVE', nullable=False),
        sa.Column('is_placeholder', sa.Boolean(), server_default=sa.text('false'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # locations — 병원 (slug 유니크 제약 없음, 스윕이 중복 제거)
    # Hospitals; slug uniqueness is repaired by the sweep, not enforced
    op.create_table(
        'locations',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_locations_slug', 'locations', ['slug'])

    # sectors — 병원 내 부서 (Sectors inside a location)
    op.create_table(
        'sectors',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('location_id', sa.String(64), sa.ForeignKey('locations.id', ondelete='SET NULL'), nullable=True),
        sa.Column('name', sa.String(255), nullable=False),
    )

    # managers — 관리자 계정 (username 유니크 제약 없음)
    # Manager accounts; username uniqueness is repaired by the sweep
    op.create_table(
        'managers',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('username', sa.String(120), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # punches — 타각 기록 (worker_id, pair_ref는 FK 아님: 서비스 계층에서 검증)
    # Punch records; worker_id and pair_ref are validated in the service layer
    op.create_table(
        'punches',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('worker_id', sa.String(64), nullable=False),
        sa.Column('worker_name', sa.String(255), server_default='', nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.Column('kind', sa.String(20), nullable=False),
        sa.Column('location_id', sa.String(64), nullable=True),
        sa.Column('sector_id', sa.String(64), nullable=True),
        sa.Column('location_label', sa.String(255), nullable=True),
        sa.Column('code', sa.String(64), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('origin', sa.String(20), server_default='BIOMETRIC', nullable=False),
        sa.Column('status', sa.String(40), server_default='OPEN', nullable=False),
        sa.Column('approved_by', sa.String(255), nullable=True),
        sa.Column('rejected_by', sa.String(255), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('pair_ref', sa.String(64), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_punches_worker_timestamp', 'punches', ['worker_id', 'timestamp'])
    op.create_index('ix_punches_pair_ref', 'punches', ['pair_ref'])

    # justifications — 소명 요청 (Worker justification requests)
    op.create_table(
        'justifications',
        sa.Column('id', sa.String(64), primary_key=True),
        sa.Column('worker_id', sa.String(64), nullable=False),
        sa.Column('worker_name', sa.String(255), server_default='', nullable=False),
        sa.Column('sector_id', sa.String(64), nullable=True),
        sa.Column('linked_punch_id', sa.String(64), nullable=True),
        sa.Column('reason', sa.String(40), server_default='FORGOT', nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('status', sa.String(40), server_default='PENDING', nullable=False),
        sa.Column('requested_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('decided_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('decided_by', sa.String(255), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_justifications_worker', 'justifications', ['worker_id'])
    op.create_index('ix_justifications_status', 'justifications', ['status'])
    op.create_index('ix_justifications_linked_punch', 'justifications', ['linked_punch_id'])


def downgrade() -> None:
    op.drop_table('justifications')
    op.drop_table('punches')
    op.drop_table('managers')
    op.drop_table('sectors')
    op.drop_table('locations')
    op.drop_table('workers')
