"""init

Revision ID: 0001_init
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_init"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
  op.create_table(
    "users",
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("username", sa.String(length=50), nullable=False),
    sa.Column("email", sa.String(length=100), nullable=False),
    sa.Column("password_hash", sa.String(length=255), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
  )
  op.create_index("ix_users_username", "users", ["username"], unique=True)
  op.create_index("ix_users_email", "users", ["email"], unique=True)

  op.create_table(
    "boards",
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("title", sa.String(length=100), nullable=False),
    sa.Column("description", sa.String(length=500), nullable=True),
    sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
  )
  op.create_index("ix_boards_user_id", "boards", ["user_id"], unique=False)

  op.create_table(
    "tasks",
    sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
    sa.Column("board_id", sa.Integer(), sa.ForeignKey("boards.id"), nullable=False),
    sa.Column("title", sa.String(length=200), nullable=False),
    sa.Column("description", sa.String(length=1000), nullable=True),
    sa.Column("status", sa.String(length=20), nullable=False),
    sa.Column("position", sa.Integer(), nullable=False),
    sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
  )
  op.create_index("ix_tasks_board_status_position", "tasks", ["board_id", "status", "position"], unique=False)


def downgrade() -> None:
  op.drop_index("ix_tasks_board_status_position", table_name="tasks")
  op.drop_table("tasks")
  op.drop_index("ix_boards_user_id", table_name="boards")
  op.drop_table("boards")
  op.drop_index("ix_users_email", table_name="users")
  op.drop_index("ix_users_username", table_name="users")
  op.drop_table("users")
