"""create user schedules and notifications

Revision ID: 4c1e2a7d9b10
Revises:
Create Date: 2025-10-02 18:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '4c1e2a7d9b10'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'UserSchedules',
        sa.Column('schedule_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('scheduled_date', sa.Date(), nullable=False),
        sa.Column('scheduled_time', sa.Time(), nullable=False),
        sa.Column('activity_type', sa.Enum('Exercise', 'Meal', 'Meditation', 'Sleep', name='activity_type_enum'), nullable=False),
        sa.Column('activity_details', sa.Text(), nullable=True),
        sa.Column('notes', sa.String(length=500), nullable=True),
        sa.Column('is_completed', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('schedule_id')
    )
    op.create_index(op.f('ix_UserSchedules_schedule_id'), 'UserSchedules', ['schedule_id'], unique=False)
    op.create_index(op.f('ix_UserSchedules_user_id'), 'UserSchedules', ['user_id'], unique=False)
    op.create_index('ix_user_schedules_due', 'UserSchedules', ['is_completed', 'scheduled_date', 'scheduled_time'], unique=False)

    op.create_table(
        'Notifications',
        sa.Column('notification_id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('send_time', sa.DateTime(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False),
        sa.Column('is_read', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.PrimaryKeyConstraint('notification_id')
    )
    op.create_index(op.f('ix_Notifications_notification_id'), 'Notifications', ['notification_id'], unique=False)
    op.create_index(op.f('ix_Notifications_user_id'), 'Notifications', ['user_id'], unique=False)
    op.create_index('ix_notifications_due', 'Notifications', ['is_read', 'send_time'], unique=False)


def downgrade() -> None:
    op.drop_index('ix_notifications_due', table_name='Notifications')
    op.drop_index(op.f('ix_Notifications_user_id'), table_name='Notifications')
    op.drop_index(op.f('ix_Notifications_notification_id'), table_name='Notifications')
    op.drop_table('Notifications')
    op.drop_index('ix_user_schedules_due', table_name='UserSchedules')
    op.drop_index(op.f('ix_UserSchedules_user_id'), table_name='UserSchedules')
    op.drop_index(op.f('ix_UserSchedules_schedule_id'), table_name='UserSchedules')
    op.drop_table('UserSchedules')
    sa.Enum(name='activity_type_enum').drop(op.get_bind(), checkfirst=True)
