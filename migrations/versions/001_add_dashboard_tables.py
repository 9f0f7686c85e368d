"""Add products, product_trends and visitor_logs tables.

Revision ID: 001
Revises:
Create Date: 2025-09-07

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy import inspect
from sqlalchemy.dialects import mysql

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def table_exists(table_name: str) -> bool:
    """Check if a table exists in the database."""
    bind = op.get_bind()
    inspector = inspect(bind)
    return table_name in inspector.get_table_names()


def index_exists(table_name: str, index_name: str) -> bool:
    """Check if an index exists on a table."""
    bind = op.get_bind()
    inspector = inspect(bind)
    indexes = inspector.get_indexes(table_name)
    return any(idx["name"] == index_name for idx in indexes)


def upgrade() -> None:
    if not table_exists("products"):
        op.create_table(
            "products",
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column("name", sa.String(255), nullable=False),
            sa.Column(
                "created_at",
                sa.DateTime(),
                server_default=sa.text("CURRENT_TIMESTAMP"),
                nullable=False,
            ),
            sa.PrimaryKeyConstraint("id"),
        )

    if not table_exists("product_trends"):
        op.create_table(
            "product_trends",
            sa.Column("id", sa.String(191), nullable=False),
            sa.Column("date", mysql.DATETIME(fsp=3), nullable=False),
            sa.Column("total_products", sa.Integer(), server_default="0", nullable=False),
            sa.Column("products_added", sa.Integer(), server_default="0", nullable=False),
            sa.Column("products_removed", sa.Integer(), server_default="0", nullable=False),
            sa.PrimaryKeyConstraint("id"),
            mysql_charset="utf8mb4",
            mysql_collate="utf8mb4_unicode_ci",
        )
    if not index_exists("product_trends", "ix_product_trends_date"):
        op.create_index("ix_product_trends_date", "product_trends", ["date"])

    if not table_exists("visitor_logs"):
        op.create_table(
            "visitor_logs",
            sa.Column("id", sa.String(191), nullable=False),
            sa.Column(
                "visited_at",
                mysql.DATETIME(fsp=3),
                server_default=sa.text("CURRENT_TIMESTAMP(3)"),
                nullable=False,
            ),
            sa.Column("ip", sa.String(191), nullable=True),
            sa.Column("user_agent", sa.String(191), nullable=True),
            sa.Column("path", sa.String(191), nullable=True),
            sa.PrimaryKeyConstraint("id"),
            mysql_charset="utf8mb4",
            mysql_collate="utf8mb4_unicode_ci",
        )
    if not index_exists("visitor_logs", "ix_visitor_logs_visited_at"):
        op.create_index("ix_visitor_logs_visited_at", "visitor_logs", ["visited_at"])


def downgrade() -> None:
    op.drop_index("ix_visitor_logs_visited_at", table_name="visitor_logs")
    op.drop_table("visitor_logs")
    op.drop_index("ix_product_trends_date", table_name="product_trends")
    op.drop_table("product_trends")
    op.drop_table("products")
