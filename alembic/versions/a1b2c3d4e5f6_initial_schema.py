"""initial_schema

Revision ID: a1b2c3d4e5f6
Revises:
Create Date: 2026-10-19 09:00:00.000000

회원, 게시글, 첨부 이미지, 해시태그, 좋아요 테이블 생성.
Create members, posts, media_files, hashtags, post_hashtags, post_likes.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1b2c3d4e5f6'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # members — 회원 (email unique)
    op.create_table(
        'members',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('address', sa.String(255), nullable=True),
        sa.Column('image_url', sa.String(1024), nullable=False),
        sa.Column('nickname', sa.String(50), nullable=False),
        sa.Column('gender', sa.String(10), nullable=True),
        sa.Column('phone_number', sa.String(20), nullable=True),
        sa.Column('message', sa.String(255), nullable=True),
        sa.Column('role', sa.String(20), nullable=False, server_default='USER'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_members_email', 'members', ['email'], unique=True)

    # posts — 게시글 (count_liked >= 0)
    op.create_table(
        'posts',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('temperature', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('count_liked', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('member_id', sa.Uuid(), sa.ForeignKey('members.id', ondelete='CASCADE'), nullable=False),
        sa.CheckConstraint('count_liked >= 0', name='ck_posts_count_liked_non_negative'),
    )
    op.create_index('ix_posts_member_id', 'posts', ['member_id'])

    # media_files — 첨부 이미지
    op.create_table(
        'media_files',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('post_id', sa.Uuid(), sa.ForeignKey('posts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('file_url', sa.String(1024), nullable=False),
        sa.Column('file_key', sa.String(1024), nullable=False),
        sa.Column('content_type', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_media_files_post_id', 'media_files', ['post_id'])

    # hashtags — 해시태그 (name unique)
    op.create_table(
        'hashtags',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
    )
    op.create_index('ix_hashtags_name', 'hashtags', ['name'], unique=True)

    # post_hashtags — 게시글-해시태그 연결
    op.create_table(
        'post_hashtags',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('post_id', sa.Uuid(), sa.ForeignKey('posts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('hashtag_id', sa.Uuid(), sa.ForeignKey('hashtags.id', ondelete='CASCADE'), nullable=False),
        sa.UniqueConstraint('post_id', 'hashtag_id', name='uq_post_hashtag'),
    )
    op.create_index('ix_post_hashtags_post_id', 'post_hashtags', ['post_id'])
    op.create_index('ix_post_hashtags_hashtag_id', 'post_hashtags', ['hashtag_id'])

    # post_likes — 좋아요 (one per member per post)
    op.create_table(
        'post_likes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('post_id', sa.Uuid(), sa.ForeignKey('posts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('member_id', sa.Uuid(), sa.ForeignKey('members.id', ondelete='CASCADE'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('post_id', 'member_id', name='uq_post_like_member'),
    )
    op.create_index('ix_post_likes_post_id', 'post_likes', ['post_id'])
    op.create_index('ix_post_likes_member_id', 'post_likes', ['member_id'])


def downgrade() -> None:
    op.drop_table('post_likes')
    op.drop_table('post_hashtags')
    op.drop_index('ix_hashtags_name', table_name='hashtags')
    op.drop_table('hashtags')
    op.drop_table('media_files')
    op.drop_table('posts')
    op.drop_index('ix_members_email', table_name='members')
    op.drop_table('members')
