"""005: create invoices and invoice_items tables

Amounts and lines are copies of the source order at invoicing time. order_id
carries no foreign key: an invoice outlives edits to, or deletion of, its order.

Revision ID: 005
Revises: 004
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE invoices (
            id               VARCHAR(32)     PRIMARY KEY,
            invoice_number   VARCHAR(50)     NOT NULL,
            org_id           VARCHAR(64)     NOT NULL,
            order_id         VARCHAR(32)     NOT NULL,
            order_number     VARCHAR(50)     NOT NULL,
            customer_id      VARCHAR(64)     NOT NULL,
            status           VARCHAR(20)     NOT NULL DEFAULT 'DRAFT',
            notes            VARCHAR(1000)   NOT NULL DEFAULT '',
            due_date         TIMESTAMPTZ,
            issued_at        TIMESTAMPTZ,
            subtotal         NUMERIC(14, 2)  NOT NULL,
            discount_total   NUMERIC(14, 2)  NOT NULL,
            tax_total        NUMERIC(14, 2)  NOT NULL,
            total            NUMERIC(14, 2)  NOT NULL,
            created_at       TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at       TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_invoices_invoice_number  UNIQUE (invoice_number),
            CONSTRAINT ck_invoices_status          CHECK (status IN ('DRAFT', 'ISSUED')),
            CONSTRAINT ck_invoices_issued_at       CHECK (
                (status = 'DRAFT' AND issued_at IS NULL)
                OR (status = 'ISSUED' AND issued_at IS NOT NULL)
            ),
            CONSTRAINT ck_invoices_amounts_gte_0   CHECK (
                subtotal >= 0 AND discount_total >= 0 AND tax_total >= 0 AND total >= 0
            )
        );
    """)
    op.execute("CREATE INDEX idx_invoices_org_status ON invoices (org_id, status, id DESC);")
    op.execute("CREATE INDEX idx_invoices_order ON invoices (order_id);")
    op.execute("""
        CREATE TRIGGER trg_invoices_updated_at
            BEFORE UPDATE ON invoices
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)

    op.execute("""
        CREATE TABLE invoice_items (
            id           VARCHAR(32)     PRIMARY KEY,
            invoice_id   VARCHAR(32)     NOT NULL
                         REFERENCES invoices (id) ON DELETE CASCADE,
            position     INT             NOT NULL,
            variant_id   VARCHAR(32)     NOT NULL,
            sku          VARCHAR(64)     NOT NULL DEFAULT '',
            quantity     INT             NOT NULL,
            unit_price   NUMERIC(12, 2)  NOT NULL,
            subtotal     NUMERIC(14, 2)  NOT NULL,
            discount     NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            tax_amount   NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            line_total   NUMERIC(14, 2)  NOT NULL,
            notes        VARCHAR(1000)   NOT NULL DEFAULT '',
            CONSTRAINT uq_invoice_items_position  UNIQUE (invoice_id, position),
            CONSTRAINT ck_invoice_items_quantity  CHECK (quantity >= 1)
        );
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS invoice_items CASCADE;")
    op.execute("DROP TABLE IF EXISTS invoices CASCADE;")
