"""Create AddedEmail table with row level security

Revision ID: 5e1d0c7a9b3f
Revises:
Create Date: 2025-11-13 09:01:28.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "5e1d0c7a9b3f"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLE = "addedemail"

POLICIES = (
    (
        "Authenticated users can read all emails",
        "FOR SELECT TO authenticated USING (true)",
    ),
    (
        "Authenticated users can insert emails",
        "FOR INSERT TO authenticated WITH CHECK (true)",
    ),
    (
        "Users can update their own entries",
        "FOR UPDATE TO authenticated "
        "USING (auth.uid() = created_by) "
        "WITH CHECK (auth.uid() = created_by)",
    ),
    (
        "Users can delete their own entries",
        "FOR DELETE TO authenticated USING (auth.uid() = created_by)",
    ),
)


def upgrade() -> None:
    bind = op.get_bind()
    inspector = inspect(bind)

    if TABLE not in inspector.get_table_names(schema="public"):
        op.create_table(
            TABLE,
            sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
            sa.Column(
                "email", sa.String(), nullable=False, comment="Unique email address"
            ),
            sa.Column(
                "first_name",
                sa.String(),
                nullable=True,
                comment="Optional first name of contact",
            ),
            sa.Column(
                "last_name",
                sa.String(),
                nullable=True,
                comment="Optional last name of contact",
            ),
            sa.Column(
                "created_by",
                postgresql.UUID(as_uuid=True),
                nullable=True,
                comment="UUID of user who added this email",
            ),
            sa.Column(
                "created_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("now()"),
                nullable=True,
                comment="Timestamp when email was added",
            ),
            sa.Column(
                "updated_at",
                sa.DateTime(timezone=True),
                server_default=sa.text("now()"),
                nullable=True,
                comment="Timestamp of last modification",
            ),
            sa.PrimaryKeyConstraint("id"),
            sa.UniqueConstraint("email"),
            schema="public",
            comment="Tracks email addresses added to the system for user management and analytics",
        )
        op.create_index("idx_added_email_email", TABLE, ["email"], schema="public")
        op.create_index(
            "idx_added_email_created_at",
            TABLE,
            [sa.text("created_at DESC")],
            schema="public",
        )
        op.create_index(
            "idx_added_email_created_by", TABLE, ["created_by"], schema="public"
        )

    # updated_at is owned by the database: overwrite whatever the caller sent
    op.execute("""
        CREATE OR REPLACE FUNCTION update_added_email_updated_at()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql
        """)
    op.execute(
        f"DROP TRIGGER IF EXISTS trigger_added_email_updated_at ON public.{TABLE}"
    )
    op.execute(f"""
        CREATE TRIGGER trigger_added_email_updated_at
        BEFORE UPDATE ON public.{TABLE}
        FOR EACH ROW
        EXECUTE FUNCTION update_added_email_updated_at()
        """)

    op.execute(f"ALTER TABLE public.{TABLE} ENABLE ROW LEVEL SECURITY")
    for name, clause in POLICIES:
        op.execute(f'CREATE POLICY "{name}" ON public.{TABLE} {clause}')


def downgrade() -> None:
    for name, _ in reversed(POLICIES):
        op.execute(f'DROP POLICY IF EXISTS "{name}" ON public.{TABLE}')
    op.execute(f"ALTER TABLE public.{TABLE} DISABLE ROW LEVEL SECURITY")

    op.execute(
        f"DROP TRIGGER IF EXISTS trigger_added_email_updated_at ON public.{TABLE}"
    )
    op.execute("DROP FUNCTION IF EXISTS update_added_email_updated_at()")

    op.drop_index("idx_added_email_created_by", table_name=TABLE, schema="public")
    op.drop_index("idx_added_email_created_at", table_name=TABLE, schema="public")
    op.drop_index("idx_added_email_email", table_name=TABLE, schema="public")
    op.drop_table(TABLE, schema="public")
