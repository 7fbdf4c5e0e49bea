"""companies table

Revision ID: 001
Revises:
Create Date: 2025-03-02

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("industry", sa.String(64), nullable=False),
        sa.Column("size", sa.String(32), nullable=False),
        sa.Column("location_city", sa.String(255), nullable=False),
        sa.Column("location_state", sa.String(255), nullable=False),
        sa.Column("location_country", sa.String(255), server_default="India", nullable=False),
        sa.Column("founded_year", sa.Integer(), nullable=True),
        sa.Column("website", sa.String(2048), nullable=True),
        sa.Column("email", sa.String(320), nullable=True),
        sa.Column("phone", sa.String(16), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("employees", sa.Integer(), nullable=True),
        sa.Column("revenue_amount", sa.Float(), nullable=True),
        sa.Column("revenue_currency", sa.String(3), server_default="USD", nullable=False),
        sa.Column("tags", sa.JSON(), server_default=sa.text("'[]'"), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_companies_industry", "companies", ["industry"], unique=False)
    op.create_index("ix_companies_size", "companies", ["size"], unique=False)
    op.create_index(
        "ix_companies_location_city_state", "companies", ["location_city", "location_state"], unique=False
    )
    op.create_index("ix_companies_founded_year", "companies", ["founded_year"], unique=False)
    op.create_index("ix_companies_is_active", "companies", ["is_active"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_companies_is_active", table_name="companies")
    op.drop_index("ix_companies_founded_year", table_name="companies")
    op.drop_index("ix_companies_location_city_state", table_name="companies")
    op.drop_index("ix_companies_size", table_name="companies")
    op.drop_index("ix_companies_industry", table_name="companies")
    op.drop_table("companies")
