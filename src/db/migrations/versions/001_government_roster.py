"""Create government roster tables: persons, ministries, grades and careers."""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = "001_government_roster"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.execute("CREATE EXTENSION IF NOT EXISTS pgcrypto")

    op.create_table(
        "collab_grades",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("label", sa.Text(), nullable=False),
        sa.Column("precedence", sa.Integer(), nullable=True),
        sa.UniqueConstraint("label", name="uq_collab_grades_label"),
    )

    op.create_table(
        "ministries",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("short_name", sa.Text(), nullable=True),
        sa.Column("category", sa.Text(), nullable=True),
    )

    op.create_table(
        "persons",
        sa.Column(
            "id",
            postgresql.UUID(as_uuid=True),
            primary_key=True,
            nullable=False,
            server_default=sa.text("gen_random_uuid()"),
        ),
        sa.Column("full_name", sa.Text(), nullable=False),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("role", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "superior_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("persons.id", ondelete="SET NULL", name="fk_persons_superior"),
            nullable=True,
        ),
        sa.Column("cabinet_role", sa.Text(), nullable=True),
        sa.Column("cabinet_order", sa.Integer(), nullable=True),
        sa.Column(
            "collab_grade",
            sa.BigInteger(),
            sa.ForeignKey("collab_grades.id", ondelete="SET NULL", name="fk_persons_grade"),
            nullable=True,
        ),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("timezone('utc', now())"),
        ),
    )
    op.create_index("ix_persons_superior_id", "persons", ["superior_id"], unique=False)

    op.create_table(
        "person_ministries",
        sa.Column(
            "person_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("persons.id", ondelete="CASCADE", name="fk_person_ministries_person"),
            nullable=False,
        ),
        sa.Column(
            "ministry_id",
            sa.BigInteger(),
            sa.ForeignKey("ministries.id", ondelete="CASCADE", name="fk_person_ministries_ministry"),
            nullable=False,
        ),
        sa.Column("is_primary", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("role_label", sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint("person_id", "ministry_id", name="pk_person_ministries"),
    )
    # At most one primary ministry per person.
    op.create_index(
        "uq_person_ministries_primary",
        "person_ministries",
        ["person_id"],
        unique=True,
        postgresql_where=sa.text("is_primary"),
    )

    op.create_table(
        "person_careers",
        sa.Column("id", sa.BigInteger(), sa.Identity(), primary_key=True),
        sa.Column(
            "person_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("persons.id", ondelete="CASCADE", name="fk_person_careers_person"),
            nullable=False,
        ),
        sa.Column("event_date", sa.Date(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=True),
        sa.Column("end_date", sa.Date(), nullable=True),
        sa.Column("event_text", sa.Text(), nullable=True),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("organisation", sa.Text(), nullable=True),
        sa.Column("sort_index", sa.Integer(), nullable=True),
    )
    op.create_index("ix_person_careers_person_id", "person_careers", ["person_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_person_careers_person_id", table_name="person_careers")
    op.drop_table("person_careers")
    op.drop_index("uq_person_ministries_primary", table_name="person_ministries")
    op.drop_table("person_ministries")
    op.drop_index("ix_persons_superior_id", table_name="persons")
    op.drop_table("persons")
    op.drop_table("ministries")
    op.drop_table("collab_grades")
