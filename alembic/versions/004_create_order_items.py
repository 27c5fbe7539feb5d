"""004: create order_items table

Lines are ordered by `position`; the allocation remainder lands on the last
position, so the order must round-trip unchanged.

Revision ID: 004
Revises: 003
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE order_items (
            id                       VARCHAR(32)     PRIMARY KEY,
            order_id                 VARCHAR(32)     NOT NULL
                                     REFERENCES orders (id) ON DELETE CASCADE,
            position                 INT             NOT NULL,
            variant_id               VARCHAR(32)     NOT NULL,
            product_id               VARCHAR(32)     NOT NULL,
            sku                      VARCHAR(64)     NOT NULL DEFAULT '',
            quantity                 INT             NOT NULL,
            unit_price               NUMERIC(12, 2)  NOT NULL,
            tax_rate                 NUMERIC(6, 4)   NOT NULL,
            discount_type            VARCHAR(20),
            discount_amount          NUMERIC(12, 2)  NOT NULL DEFAULT 0,
            notes                    VARCHAR(1000)   NOT NULL DEFAULT '',
            applied_discount         NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            applied_order_discount   NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            tax_amount               NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            line_total               NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            CONSTRAINT uq_order_items_position     UNIQUE (order_id, position),
            CONSTRAINT ck_order_items_quantity     CHECK (quantity >= 1),
            CONSTRAINT ck_order_items_discount_type CHECK (
                discount_type IS NULL OR discount_type IN ('PERCENTAGE', 'FIXED')
            ),
            CONSTRAINT ck_order_items_amounts_gte_0 CHECK (
                unit_price >= 0 AND tax_rate >= 0 AND discount_amount >= 0
                AND applied_discount >= 0 AND applied_order_discount >= 0
                AND tax_amount >= 0 AND line_total >= 0
            )
        );
    """)
    op.execute("CREATE INDEX idx_order_items_variant ON order_items (variant_id);")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_items CASCADE;")
