"""
============================================================
TARJETA CRC (Class / Responsibilities / Collaborators)
============================================================
Class: 001_users (Alembic Migration)

Responsibilities:
  - Crear la tabla users (registros de identidad).
  - Garantizar unicidad de email y username a nivel DB.
  - Indexar created_at para el orden "más nuevos primero".

Collaborators:
  - infrastructure.repositories.postgres.user (usa este esquema como contrato)

Policy:
  - Migración BASELINE. Downgrade NO soportado.
  - Los nombres uq_users_email / uq_users_username son contrato: el
    repositorio los usa para traducir UniqueViolation al campo en conflicto.
============================================================
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_users"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("password_hash", sa.Text, nullable=False),
        # role es string (evita acople a enums DB); el catálogo lo fija el CHECK.
        sa.Column(
            "role",
            sa.String(50),
            nullable=False,
            server_default=sa.text("'USER'"),
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.UniqueConstraint("username", name="uq_users_username"),
        sa.CheckConstraint("role IN ('ADMIN', 'USER')", name="ck_users_role"),
    )

    op.create_index("ix_users_created_at", "users", ["created_at"])


def downgrade() -> None:
    """Downgrade NO soportado para la migración fundacional."""
    raise NotImplementedError(
        "Baseline: downgrade no soportado por política. "
        "Para resetear la base de datos, recrear el schema."
    )
