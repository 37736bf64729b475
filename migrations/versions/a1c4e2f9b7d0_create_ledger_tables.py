"""characters, weapons, armors and skills

Revision ID: a1c4e2f9b7d0
Revises:
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = 'a1c4e2f9b7d0'
down_revision = None
branch_labels = None
depends_on = None


def _gear_table(name, *extra):
    op.create_table(
        name,
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("character_id", sa.Integer(), sa.ForeignKey("characters.id", ondelete="CASCADE"), nullable=False),
        sa.Column("name", sa.String(length=64)),
        *extra,
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    # not unique: one-per-slot is enforced by the ledger
    op.create_index(f"ix_{name}_character_id", name, ["character_id"])


def upgrade():
    op.create_table(
        "characters",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("level", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("current_exp", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("next_level_exp", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("max_health", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("current_health", sa.Integer(), nullable=False, server_default="100"),
        sa.Column("max_mana", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("current_mana", sa.Integer(), nullable=False, server_default="50"),
        sa.Column("attack", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("defence", sa.Integer(), nullable=False, server_default="5"),
        sa.Column("version_id", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now()),
    )

    _gear_table(
        "weapons",
        sa.Column("attack", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("defence", sa.Integer(), nullable=False, server_default="0"),
    )
    _gear_table(
        "armors",
        sa.Column("attack", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("defence", sa.Integer(), nullable=False, server_default="0"),
    )
    _gear_table(
        "skills",
        sa.Column("description", sa.String(length=255)),
    )


def downgrade():
    for name in ("skills", "armors", "weapons"):
        op.drop_index(f"ix_{name}_character_id", table_name=name)
        op.drop_table(name)
    op.drop_table("characters")
