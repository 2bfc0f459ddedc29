"""create task matching schema

Revision ID: 5f0c2a9d7e31
Revises:
Create Date: 2026-10-18 09:12:44.103215

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
import sqlmodel


# revision identifiers, used by Alembic.
revision: str = '5f0c2a9d7e31'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

# Enum columns store member names, matching SQLModel's default Enum mapping
user_role = sa.Enum('VOLUNTEER', 'NGO', 'ADMIN', name='userrole')
ngo_status = sa.Enum('PENDING', 'APPROVED', 'REJECTED', name='ngostatus')
task_category = sa.Enum(
    'HEALTHCARE', 'EDUCATION', 'ENVIRONMENT', 'COMMUNITY_SERVICE',
    'ANIMAL_WELFARE', 'DISASTER_RELIEF', 'HUMAN_RIGHTS', 'ARTS_AND_CULTURE',
    'SPORTS', 'TECHNOLOGY', 'OTHER',
    name='taskcategory',
)
task_status = sa.Enum(
    'DRAFT', 'ACTIVE', 'IN_PROGRESS', 'COMPLETED', 'CANCELLED', name='taskstatus'
)
recurring_pattern = sa.Enum('DAILY', 'WEEKLY', 'MONTHLY', name='recurringpattern')
experience_level = sa.Enum('BEGINNER', 'INTERMEDIATE', 'ADVANCED', name='experiencelevel')
application_status = sa.Enum(
    'PENDING', 'APPROVED', 'REJECTED', 'WITHDRAWN', name='applicationstatus'
)
availability = sa.Enum('FULL_TIME', 'PART_TIME', 'FLEXIBLE', name='availability')


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'user',
        sa.Column('name', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('email', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('role', user_role, nullable=False),
        sa.Column('id_user', sa.Integer(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('total_hours', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id_user'),
    )
    op.create_index(op.f('ix_user_email'), 'user', ['email'], unique=True)
    op.create_index(op.f('ix_user_role'), 'user', ['role'], unique=False)

    op.create_table(
        'ngo',
        sa.Column('organization_name', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('registration_number', sqlmodel.sql.sqltypes.AutoString(length=50), nullable=False),
        sa.Column('category', task_category, nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=False),
        sa.Column('city', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('state', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('country', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('id_ngo', sa.Integer(), nullable=False),
        sa.Column('id_user', sa.Integer(), nullable=False),
        sa.Column('status', ngo_status, nullable=False),
        sa.Column('is_verified', sa.Boolean(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('admin_notes', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('rejection_reason', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('total_tasks', sa.Integer(), nullable=False),
        sa.Column('completed_tasks', sa.Integer(), nullable=False),
        sa.Column('total_volunteers', sa.Integer(), nullable=False),
        sa.Column('total_hours', sa.Float(), nullable=False),
        sa.Column('average_rating', sa.Float(), nullable=False),
        sa.ForeignKeyConstraint(['id_user'], ['user.id_user']),
        sa.PrimaryKeyConstraint('id_ngo'),
        sa.UniqueConstraint('id_user'),
    )
    op.create_index(op.f('ix_ngo_registration_number'), 'ngo', ['registration_number'], unique=True)
    op.create_index(op.f('ix_ngo_status'), 'ngo', ['status'], unique=False)

    op.create_table(
        'task',
        sa.Column('title', sqlmodel.sql.sqltypes.AutoString(length=100), nullable=False),
        sa.Column('description', sqlmodel.sql.sqltypes.AutoString(length=2000), nullable=False),
        sa.Column('category', task_category, nullable=False),
        sa.Column('address', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('city', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('state', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('zip_code', sqlmodel.sql.sqltypes.AutoString(length=20), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('is_recurring', sa.Boolean(), nullable=False),
        sa.Column('recurring_pattern', recurring_pattern, nullable=False),
        sa.Column('volunteers_needed', sa.Integer(), nullable=False),
        sa.Column('age_min', sa.Integer(), nullable=False),
        sa.Column('age_max', sa.Integer(), nullable=True),
        sa.Column('skills', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=False),
        sa.Column('experience', experience_level, nullable=False),
        sa.Column('training_provided', sa.Boolean(), nullable=False),
        sa.Column('training_description', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('benefits', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('is_urgent', sa.Boolean(), nullable=False),
        sa.Column('id_task', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('id_ngo', sa.Integer(), nullable=False),
        sa.Column('status', task_status, nullable=False),
        sa.Column('is_featured', sa.Boolean(), nullable=False),
        sa.Column('contact_name', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('contact_email', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('contact_phone', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('additional_info', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('total_applications', sa.Integer(), nullable=False),
        sa.Column('approved_applications', sa.Integer(), nullable=False),
        sa.Column('total_volunteers', sa.Integer(), nullable=False),
        sa.Column('total_hours', sa.Float(), nullable=False),
        sa.Column('average_rating', sa.Float(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['id_ngo'], ['ngo.id_ngo']),
        sa.PrimaryKeyConstraint('id_task'),
    )
    op.create_index(op.f('ix_task_category'), 'task', ['category'], unique=False)
    op.create_index(op.f('ix_task_city'), 'task', ['city'], unique=False)
    op.create_index(op.f('ix_task_id_ngo'), 'task', ['id_ngo'], unique=False)
    op.create_index(op.f('ix_task_is_featured'), 'task', ['is_featured'], unique=False)
    op.create_index(op.f('ix_task_is_urgent'), 'task', ['is_urgent'], unique=False)
    op.create_index(op.f('ix_task_status'), 'task', ['status'], unique=False)

    op.create_table(
        'application',
        sa.Column('message', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.Column('availability', availability, nullable=False),
        sa.Column('id_application', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('id_task', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('id_volunteer', sa.Integer(), nullable=False),
        sa.Column('status', application_status, nullable=False),
        sa.Column('applied_at', sa.DateTime(), nullable=False),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('rejected_at', sa.DateTime(), nullable=True),
        sa.Column('rejection_reason', sqlmodel.sql.sqltypes.AutoString(length=500), nullable=True),
        sa.ForeignKeyConstraint(['id_task'], ['task.id_task'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['id_volunteer'], ['user.id_user']),
        sa.PrimaryKeyConstraint('id_application'),
    )
    op.create_index(op.f('ix_application_id_task'), 'application', ['id_task'], unique=False)
    op.create_index(op.f('ix_application_id_volunteer'), 'application', ['id_volunteer'], unique=False)
    # At most one non-withdrawn application per volunteer and task
    op.create_index(
        'uq_application_active_volunteer',
        'application',
        ['id_task', 'id_volunteer'],
        unique=True,
        postgresql_where=sa.text("status != 'WITHDRAWN'"),
        sqlite_where=sa.text("status != 'WITHDRAWN'"),
    )

    op.create_table(
        'volunteerrecord',
        sa.Column('id_record', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('id_task', sqlmodel.sql.sqltypes.AutoString(), nullable=False),
        sa.Column('id_volunteer', sa.Integer(), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.Column('hours_worked', sa.Float(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('feedback', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['id_task'], ['task.id_task'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['id_volunteer'], ['user.id_user']),
        sa.PrimaryKeyConstraint('id_record'),
        sa.UniqueConstraint('id_task', 'id_volunteer', name='uq_volunteerrecord_task_volunteer'),
    )
    op.create_index(op.f('ix_volunteerrecord_id_task'), 'volunteerrecord', ['id_task'], unique=False)
    op.create_index(op.f('ix_volunteerrecord_id_volunteer'), 'volunteerrecord', ['id_volunteer'], unique=False)

    op.create_table(
        'completedtask',
        sa.Column('id_task', sqlmodel.sql.sqltypes.AutoString(), nullable=True),
        sa.Column('completed_at', sa.DateTime(), nullable=False),
        sa.Column('hours_worked', sa.Float(), nullable=False),
        sa.Column('rating', sa.Integer(), nullable=True),
        sa.Column('feedback', sqlmodel.sql.sqltypes.AutoString(length=1000), nullable=True),
        sa.Column('id_completed', sa.Integer(), nullable=False),
        sa.Column('id_user', sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(['id_task'], ['task.id_task'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['id_user'], ['user.id_user'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id_completed'),
        sa.UniqueConstraint('id_user', 'id_task', name='uq_completedtask_user_task'),
    )
    op.create_index(op.f('ix_completedtask_id_user'), 'completedtask', ['id_user'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_completedtask_id_user'), table_name='completedtask')
    op.drop_table('completedtask')
    op.drop_index(op.f('ix_volunteerrecord_id_volunteer'), table_name='volunteerrecord')
    op.drop_index(op.f('ix_volunteerrecord_id_task'), table_name='volunteerrecord')
    op.drop_table('volunteerrecord')
    op.drop_index('uq_application_active_volunteer', table_name='application')
    op.drop_index(op.f('ix_application_id_volunteer'), table_name='application')
    op.drop_index(op.f('ix_application_id_task'), table_name='application')
    op.drop_table('application')
    op.drop_index(op.f('ix_task_status'), table_name='task')
    op.drop_index(op.f('ix_task_is_urgent'), table_name='task')
    op.drop_index(op.f('ix_task_is_featured'), table_name='task')
    op.drop_index(op.f('ix_task_id_ngo'), table_name='task')
    op.drop_index(op.f('ix_task_city'), table_name='task')
    op.drop_index(op.f('ix_task_category'), table_name='task')
    op.drop_table('task')
    op.drop_index(op.f('ix_ngo_status'), table_name='ngo')
    op.drop_index(op.f('ix_ngo_registration_number'), table_name='ngo')
    op.drop_table('ngo')
    op.drop_index(op.f('ix_user_role'), table_name='user')
    op.drop_index(op.f('ix_user_email'), table_name='user')
    op.drop_table('user')

    bind = op.get_bind()
    for enum_type in (
        availability, application_status, experience_level, recurring_pattern,
        task_status, task_category, ngo_status, user_role,
    ):
        enum_type.drop(bind, checkfirst=True)
