"""allow microsoft identity links

Revision ID: 9d4e7b1c2f60
Revises: 3c1f0e2a9b47
Create Date: 2026-10-19 15:41:08.902317

"""

from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = "9d4e7b1c2f60"
down_revision: Union[str, Sequence[str], None] = "3c1f0e2a9b47"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.drop_constraint("ck_identity_links_provider", "identity_links", type_="check")
    op.create_check_constraint(
        "ck_identity_links_provider",
        "identity_links",
        "provider IN ('github', 'google', 'microsoft')",
    )


def downgrade() -> None:
    """Downgrade schema."""
    # Fails while microsoft links exist; delete them first
    op.drop_constraint("ck_identity_links_provider", "identity_links", type_="check")
    op.create_check_constraint(
        "ck_identity_links_provider",
        "identity_links",
        "provider IN ('github', 'google')",
    )
