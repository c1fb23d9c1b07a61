############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# models.py: SQLAlchemy ORM models for all database entities
#
############################################################

"""SQLAlchemy database models for Xarwiz CMS.

Blog posts carry denormalized snapshots of their author (id, display name,
profile image) and tags (name, slug), copied at write time. They are not kept
in sync: renaming an author or tag leaves already-written posts untouched.
``Category.post_count``, ``Tag.post_count`` and ``BlogPost.comment_count`` are
display caches maintained by ``services.counters`` only.
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.mysql import MEDIUMTEXT
from sqlalchemy.orm import Mapped, mapped_column, relationship

from backend.app.db.base import Base, TimestampMixin

# Use enum values (lowercase) for database storage, not enum names (uppercase)
_enum_values = lambda obj: [e.value for e in obj]

# Long-form post bodies exceed MySQL's 64KB TEXT limit
LongText = Text().with_variant(MEDIUMTEXT(), "mysql")


class PostStatus(str, PyEnum):
    """Blog post publication state."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


# Authors
class Author(Base, TimestampMixin):
    """Blog author account (the only persisted login identity)."""

    __tablename__ = "authors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    profile_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    # {"facebook": ..., "twitter": ..., "instagram": ..., "youtube": ...}
    social_links: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    def __repr__(self) -> str:
        return f"<Author id={self.id} email={self.email!r}>"


# Taxonomy
class Category(Base, TimestampMixin):
    """Post category with embedded subcategories."""

    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, index=True)
    # Ordered [{"name": ..., "slug": ...}]
    subcategories: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    posts: Mapped[List["BlogPost"]] = relationship("BlogPost", back_populates="category")


class Tag(Base, TimestampMixin):
    """Popular-tags entry. Posts reference tags by slug snapshot only."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(120), unique=True, nullable=False, index=True)
    post_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    __table_args__ = (
        Index("ix_tags_post_count", "post_count"),
    )


# Blog
class BlogPost(Base, TimestampMixin):
    """Blog post model."""

    __tablename__ = "blog_posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    slug: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(LongText, nullable=False)
    image_url: Mapped[str] = mapped_column(String(500), nullable=False)
    read_time: Mapped[int] = mapped_column(Integer, nullable=False)
    publish_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    category_id: Mapped[int] = mapped_column(Integer, ForeignKey("categories.id"), nullable=False)

    # Author snapshot; author_id decides ownership and is deliberately not a FK
    author_id: Mapped[int] = mapped_column(Integer, nullable=False)
    author_display_name: Mapped[str] = mapped_column(String(255), nullable=False)
    author_profile_image: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Tag snapshots: [{"name": ..., "slug": ...}]
    tags: Mapped[list] = mapped_column(JSON, nullable=False, default=list)

    comment_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
    is_featured: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    status: Mapped[PostStatus] = mapped_column(
        Enum(PostStatus, values_callable=_enum_values), nullable=False, default=PostStatus.PUBLISHED
    )

    # Relationships
    category: Mapped["Category"] = relationship("Category", back_populates="posts", lazy="joined")
    comments: Mapped[List["Comment"]] = relationship(
        "Comment", back_populates="post", order_by="Comment.created_at"
    )

    __table_args__ = (
        Index("ix_blog_posts_status_publish_date", "status", "publish_date"),
        Index("ix_blog_posts_author", "author_id"),
        Index("ix_blog_posts_category", "category_id"),
    )

    @property
    def tag_slugs(self) -> List[str]:
        return [t["slug"] for t in (self.tags or []) if t.get("slug")]


class Comment(Base, TimestampMixin):
    """Public comment on a blog post."""

    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    post_id: Mapped[int] = mapped_column(Integer, ForeignKey("blog_posts.id"), nullable=False, index=True)
    author_name: Mapped[str] = mapped_column(String(80), nullable=False)
    author_email: Mapped[str] = mapped_column(String(255), nullable=False)
    author_number: Mapped[str] = mapped_column(String(40), nullable=False)
    author_website: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    post: Mapped["BlogPost"] = relationship("BlogPost", back_populates="comments")
