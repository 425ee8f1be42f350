"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_foundation (Alembic Migration)

Responsibilities:
  - Crear el esquema base: users (credential store) y bookings.
  - Definir constraints que replican las invariantes del dominio:
      * status ∈ {pending, confirmed, cancelled}
      * end_date > start_date
      * duration_months > 0
      * total_price >= 0
  - Índices según las queries reales de los repositorios.

Collaborators:
  - PostgreSQL 16+
  - infrastructure/repositories/postgres/{user,booking}.py (contrato de columnas)

Policy:
  - Esta es una migración BASELINE. Downgrade NO soportado.
  - Toda evolución futura del esquema debe hacerse con migraciones aditivas (002+).
  - Convención de nombres:
      pk_<tabla>, uq_<tabla>_<col>, ix_<tabla>_<col>, ck_<tabla>_<regla>
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_foundation"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """
    Crea el esquema fundacional.

    Orden:
      1) Identity (users)
      2) Bookings
    """

    # =========================================================
    # 1) IDENTITY (users)
    # =========================================================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        # Email case-sensitive tal como se registró (sin lower()).
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("password_hash", sa.Text, nullable=False),
        sa.Column("full_name", sa.String(200), nullable=False),
        sa.Column(
            "role",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'user'"),
        ),
        sa.Column("avatar_url", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("role IN ('user','admin')", name="ck_users_role"),
    )

    # =========================================================
    # 2) BOOKINGS
    # =========================================================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        # user_id / garden_id: referencias opacas (sin FK; garden vive fuera).
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("garden_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("duration_months", sa.Integer, nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column(
            "status",
            sa.String(20),
            nullable=False,
            server_default=sa.text("'pending'"),
        ),
        sa.Column("payment_method", sa.String(100), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_bookings"),
        sa.CheckConstraint(
            "status IN ('pending','confirmed','cancelled')",
            name="ck_bookings_status",
        ),
        sa.CheckConstraint("end_date > start_date", name="ck_bookings_date_range"),
        sa.CheckConstraint("duration_months > 0", name="ck_bookings_duration"),
        sa.CheckConstraint("total_price >= 0", name="ck_bookings_total_price"),
    )

    # Listados por usuario / parcela (con y sin status) ordenados por created_at.
    op.create_index(
        "ix_bookings_user_id_created_at", "bookings", ["user_id", "created_at"]
    )
    op.create_index(
        "ix_bookings_garden_id_created_at", "bookings", ["garden_id", "created_at"]
    )
    op.create_index("ix_bookings_status", "bookings", ["status"])
    op.create_index("ix_bookings_created_at", "bookings", ["created_at"])


def downgrade() -> None:
    """Downgrade NO soportado para la migración fundacional."""
    raise NotImplementedError(
        "Baseline: downgrade no soportado por política. "
        "Para resetear la base de datos, recrearla y correr `alembic upgrade head`."
    )
