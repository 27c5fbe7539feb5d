"""002: create variants table

Read-only to the order service: the catalog owns writes. Orders snapshot
price and tax_rate from here at resolution time.

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE variants (
            id          VARCHAR(32)     PRIMARY KEY,
            product_id  VARCHAR(32)     NOT NULL,
            org_id      VARCHAR(64)     NOT NULL,
            sku         VARCHAR(64)     NOT NULL,
            color       VARCHAR(50),
            size        VARCHAR(50),
            price       NUMERIC(12, 2)  NOT NULL,
            tax_rate    NUMERIC(6, 4)   NOT NULL DEFAULT 0,
            stock       INT             NOT NULL DEFAULT 0,
            created_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at  TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_variants_org_sku       UNIQUE (org_id, sku),
            CONSTRAINT ck_variants_price_gte_0   CHECK (price >= 0),
            CONSTRAINT ck_variants_tax_rate      CHECK (tax_rate >= 0 AND tax_rate <= 1)
        );
    """)
    op.execute("CREATE INDEX idx_variants_org_product ON variants (org_id, product_id);")
    op.execute("""
        CREATE TRIGGER trg_variants_updated_at
            BEFORE UPDATE ON variants
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS variants CASCADE;")
