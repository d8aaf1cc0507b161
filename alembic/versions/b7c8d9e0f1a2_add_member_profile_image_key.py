"""add member profile image key

Revision ID: b7c8d9e0f1a2
Revises: a1b2c3d4e5f6
Create Date: 2026-10-20 09:00:00.000000

업로드한 프로필 이미지의 스토리지 키를 별도 컬럼으로 보관.
Track the storage key of a member-uploaded profile image so that only
that object is deleted on replacement or account removal.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "b7c8d9e0f1a2"
down_revision: Union[str, None] = "a1b2c3d4e5f6"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.add_column("members", sa.Column("profile_image_key", sa.String(1024), nullable=True))


def downgrade() -> None:
    op.drop_column("members", "profile_image_key")
