"""Create recipes table

Revision ID: 001_create_recipes
Revises: 
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "001_create_recipes"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

JSON_TYPE = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")


def upgrade() -> None:
    op.create_table(
        "recipes",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("slug", sa.String(200), nullable=False),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("lead", sa.Text, nullable=False),
        sa.Column("prep_time_minutes", sa.Integer, nullable=False),
        sa.Column("servings", sa.Integer, nullable=False),
        sa.Column(
            "difficulty",
            sa.Enum("EASY", "MEDIUM", "HARD", name="difficulty"),
            nullable=False,
        ),
        sa.Column(
            "dish_group",
            sa.Enum("MAIN", "DESSERT", "BREAD", "APPETIZER", "SALAD", "SOUP", name="dish_group"),
            nullable=False,
        ),
        sa.Column(
            "cooking_method",
            sa.Enum("BAKE", "FRY", "BOIL", "GRILL", "NO_COOK", name="cooking_method"),
            nullable=False,
        ),
        sa.Column("tags", JSON_TYPE, nullable=False),
        sa.Column("ingredients", JSON_TYPE, nullable=False),
        sa.Column("steps", JSON_TYPE, nullable=False),
        sa.Column("image_cdn_path", sa.String(500), nullable=False),
        sa.Column("images", JSON_TYPE, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("slug", name="uq_recipes_slug"),
    )
    op.create_index("ix_recipes_created_at", "recipes", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_recipes_created_at", table_name="recipes")
    op.drop_table("recipes")
    sa.Enum(name="cooking_method").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="dish_group").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="difficulty").drop(op.get_bind(), checkfirst=True)
