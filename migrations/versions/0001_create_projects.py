"""Create projects table

Revision ID: 0001_create_projects
Revises:
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa

from app.db.types import GUID

# revision identifiers, used by Alembic.
revision = "0001_create_projects"
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        "projects",
        sa.Column("id", GUID(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("client_name", sa.String(length=200), nullable=False),
        sa.Column(
            "status",
            sa.Enum(
                "active",
                "on_hold",
                "completed",
                name="projectstatus",
                create_constraint=True,
            ),
            nullable=False,
            server_default="active",
        ),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(), nullable=True),
    )
    op.create_index("ix_projects_status", "projects", ["status"])
    op.create_index("ix_projects_created_at", "projects", ["created_at"])
    op.create_index("ix_projects_deleted_at", "projects", ["deleted_at"])


def downgrade():
    op.drop_index("ix_projects_deleted_at", table_name="projects")
    op.drop_index("ix_projects_created_at", table_name="projects")
    op.drop_index("ix_projects_status", table_name="projects")
    op.drop_table("projects")
    if op.get_bind().dialect.name == "postgresql":
        op.execute("DROP TYPE IF EXISTS projectstatus")
