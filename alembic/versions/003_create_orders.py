"""003: create orders table

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id                       VARCHAR(32)     PRIMARY KEY,
            order_number             VARCHAR(50)     NOT NULL,
            org_id                   VARCHAR(64)     NOT NULL,
            customer_id              VARCHAR(64)     NOT NULL,
            status                   VARCHAR(20)     NOT NULL DEFAULT 'PENDING',
            notes                    VARCHAR(1000)   NOT NULL DEFAULT '',
            discount_type            VARCHAR(20),
            discount_amount          NUMERIC(12, 2)  NOT NULL DEFAULT 0,
            delivery_street          VARCHAR(255)    NOT NULL DEFAULT '',
            delivery_city            VARCHAR(100)    NOT NULL DEFAULT '',
            delivery_state           VARCHAR(100)    NOT NULL DEFAULT '',
            delivery_country         VARCHAR(100)    NOT NULL DEFAULT '',
            delivery_zip             VARCHAR(20)     NOT NULL DEFAULT '',
            delivery_transport_fare  NUMERIC(12, 2)  NOT NULL DEFAULT 0,
            delivery_status          VARCHAR(20)     NOT NULL DEFAULT 'PENDING',
            delivery_date            TIMESTAMPTZ,
            delivered_at             TIMESTAMPTZ,
            subtotal                 NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            item_discount_total      NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            applied_discount         NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            discount_total           NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            tax_total                NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            total                    NUMERIC(14, 2)  NOT NULL DEFAULT 0,
            version                  INT             NOT NULL DEFAULT 1,
            created_at               TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at               TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_orders_order_number     UNIQUE (order_number),
            CONSTRAINT ck_orders_status           CHECK (
                status IN ('PENDING', 'APPROVED', 'DELIVERED', 'CANCELLED')
            ),
            CONSTRAINT ck_orders_delivery_status  CHECK (
                delivery_status IN ('PENDING', 'SHIPPED', 'DELIVERED', 'CANCELLED')
            ),
            CONSTRAINT ck_orders_discount_type    CHECK (
                discount_type IS NULL OR discount_type IN ('PERCENTAGE', 'FIXED')
            ),
            CONSTRAINT ck_orders_amounts_gte_0    CHECK (
                discount_amount >= 0 AND delivery_transport_fare >= 0
                AND subtotal >= 0 AND item_discount_total >= 0 AND applied_discount >= 0
                AND discount_total >= 0 AND tax_total >= 0 AND total >= 0
            ),
            CONSTRAINT ck_orders_discount_cap     CHECK (discount_total <= subtotal),
            CONSTRAINT ck_orders_version          CHECK (version >= 1)
        );
    """)
    op.execute("CREATE INDEX idx_orders_org_status ON orders (org_id, status, id DESC);")
    op.execute("CREATE INDEX idx_orders_org_customer ON orders (org_id, customer_id, id DESC);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
