import importlib.util
from pathlib import Path
from unittest import mock

import pytest
import sqlalchemy as sa

from app.constants import ADDED_EMAIL_TABLE
from app.policies import POLICIES

MIGRATION = (
    Path(__file__).parent.parent
    / "alembic"
    / "versions"
    / "5e1d0c7a9b3f_create_added_email_table_with_rls.py"
)


@pytest.fixture
def migration():
    spec = importlib.util.spec_from_file_location("create_added_email", MIGRATION)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run(migration, step, existing_tables=()):
    """Run ``step`` against a mocked alembic ``op``; return it and the SQL executed"""
    op = mock.MagicMock()
    inspector = mock.MagicMock()
    inspector.get_table_names.return_value = list(existing_tables)
    with mock.patch.object(migration, "op", op), mock.patch.object(
        migration, "inspect", return_value=inspector
    ):
        getattr(migration, step)()
    statements = [" ".join(str(c.args[0]).split()) for c in op.execute.call_args_list]
    return op, statements


def test_is_the_first_revision(migration):
    assert migration.revision == "5e1d0c7a9b3f"
    assert migration.down_revision is None
    assert migration.TABLE == ADDED_EMAIL_TABLE


def test_upgrade_creates_table_and_indexes(migration):
    op, _ = run(migration, "upgrade")

    op.create_table.assert_called_once()
    args, kwargs = op.create_table.call_args
    assert args[0] == "addedemail"
    columns = {
        column.name: column for column in args[1:] if isinstance(column, sa.Column)
    }
    assert list(columns) == [
        "id",
        "email",
        "first_name",
        "last_name",
        "created_by",
        "created_at",
        "updated_at",
    ]
    assert columns["email"].nullable is False
    assert columns["created_by"].nullable is True

    index_names = [c.args[0] for c in op.create_index.call_args_list]
    assert index_names == [
        "idx_added_email_email",
        "idx_added_email_created_at",
        "idx_added_email_created_by",
    ]
    created_at_index = op.create_index.call_args_list[1]
    assert str(created_at_index.args[2][0]) == "created_at DESC"


def test_upgrade_skips_existing_table(migration):
    op, statements = run(migration, "upgrade", existing_tables=["addedemail"])
    op.create_table.assert_not_called()
    op.create_index.assert_not_called()
    # Trigger and policies are still installed
    assert any("ENABLE ROW LEVEL SECURITY" in sql for sql in statements)


def test_upgrade_installs_updated_at_trigger(migration):
    _, statements = run(migration, "upgrade")
    function = next(sql for sql in statements if "CREATE OR REPLACE FUNCTION" in sql)
    assert "NEW.updated_at = NOW();" in function
    assert (
        "CREATE TRIGGER trigger_added_email_updated_at BEFORE UPDATE ON public.addedemail "
        "FOR EACH ROW EXECUTE FUNCTION update_added_email_updated_at()"
    ) in statements


def test_upgrade_enables_rls_before_policies(migration):
    _, statements = run(migration, "upgrade")
    enable = statements.index("ALTER TABLE public.addedemail ENABLE ROW LEVEL SECURITY")
    policies = [
        i for i, sql in enumerate(statements) if sql.startswith("CREATE POLICY")
    ]
    assert len(policies) == 4
    assert all(i > enable for i in policies)


def test_upgrade_policies_match_application_policies(migration):
    _, statements = run(migration, "upgrade")
    created = [sql for sql in statements if sql.startswith("CREATE POLICY")]
    for policy in POLICIES:
        matching = [sql for sql in created if f'"{policy.name}"' in sql]
        assert len(matching) == 1
        assert f"FOR {policy.operation.value} TO authenticated" in matching[0]


def test_update_policy_checks_owner_on_both_rows(migration):
    _, statements = run(migration, "upgrade")
    update = next(sql for sql in statements if "FOR UPDATE" in sql)
    assert "USING (auth.uid() = created_by)" in update
    assert "WITH CHECK (auth.uid() = created_by)" in update


def test_downgrade_removes_everything(migration):
    op, statements = run(migration, "downgrade")
    dropped = [sql for sql in statements if sql.startswith("DROP POLICY")]
    assert len(dropped) == 4
    assert "ALTER TABLE public.addedemail DISABLE ROW LEVEL SECURITY" in statements
    assert "DROP FUNCTION IF EXISTS update_added_email_updated_at()" in statements
    assert op.drop_index.call_count == 3
    op.drop_table.assert_called_once_with("addedemail", schema="public")
