"""Initial schema - store_document table and change notification trigger.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "store_document",
        sa.Column("path", sa.Text(), primary_key=True),
        sa.Column("collection", sa.Text(), nullable=False),
        sa.Column("doc_id", sa.Text(), nullable=False),
        sa.Column("fields", JSONB(), nullable=False, server_default=sa.text("'{}'::jsonb")),
    )
    op.create_index("ix_store_document_collection_doc_id", "store_document", ["collection", "doc_id"])
    op.create_index(
        "ix_store_document_fields",
        "store_document",
        ["fields"],
        postgresql_using="gin",
    )

    # Every change is announced on the folio_store channel with the document path
    op.execute(
        """
        CREATE OR REPLACE FUNCTION store_document_notify() RETURNS trigger AS $$
        BEGIN
            IF TG_OP = 'DELETE' THEN
                PERFORM pg_notify('folio_store', OLD.path);
            ELSE
                PERFORM pg_notify('folio_store', NEW.path);
            END IF;
            RETURN NULL;
        END;
        $$ LANGUAGE plpgsql
        """
    )
    op.execute(
        """
        CREATE TRIGGER store_document_changed
        AFTER INSERT OR UPDATE OR DELETE ON store_document
        FOR EACH ROW EXECUTE FUNCTION store_document_notify()
        """
    )


def downgrade() -> None:
    op.execute("DROP TRIGGER IF EXISTS store_document_changed ON store_document")
    op.execute("DROP FUNCTION IF EXISTS store_document_notify()")
    op.drop_index("ix_store_document_fields", table_name="store_document")
    op.drop_index("ix_store_document_collection_doc_id", table_name="store_document")
    op.drop_table("store_document")
