############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# schemas.py: Request/response models for the HTTP API
#
############################################################

"""Request/response models.

The admin and public frontends speak camelCase JSON; fields are declared in
snake_case and aliased with ``to_camel``. Both spellings are accepted on input.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from backend.app.db.models import Author, BlogPost, Category, Comment, PostStatus, Tag


def _aware(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure a datetime is timezone-aware (MariaDB and SQLite return naive datetimes)."""
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


# Authors
class SocialLinks(CamelModel):
    facebook: Optional[str] = None
    twitter: Optional[str] = None
    instagram: Optional[str] = None
    youtube: Optional[str] = None


class AuthorCreateRequest(CamelModel):
    """Public author signup."""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    display_name: str = Field(..., min_length=1, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = None
    profile_image: Optional[str] = Field(None, max_length=500)
    social_links: Optional[SocialLinks] = None


class AuthorUpdateRequest(CamelModel):
    """Partial author update. Only provided fields are changed."""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=128)
    display_name: Optional[str] = Field(None, max_length=255)
    title: Optional[str] = Field(None, max_length=255)
    bio: Optional[str] = None
    profile_image: Optional[str] = Field(None, max_length=500)
    social_links: Optional[SocialLinks] = None


class AuthorProfileResponse(CamelModel):
    """Public author profile."""
    id: int
    display_name: str
    title: Optional[str] = None
    bio: Optional[str] = None
    profile_image: Optional[str] = None
    social_links: SocialLinks = Field(default_factory=SocialLinks)

    @classmethod
    def from_author(cls, author: Author) -> "AuthorProfileResponse":
        return cls(
            id=author.id,
            display_name=author.display_name,
            title=author.title,
            bio=author.bio,
            profile_image=author.profile_image,
            social_links=SocialLinks(**(author.social_links or {})),
        )


class AuthorResponse(AuthorProfileResponse):
    """Author as seen by admins and the author themself. Never carries the hash."""
    email: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_author(cls, author: Author) -> "AuthorResponse":
        profile = AuthorProfileResponse.from_author(author)
        return cls(
            **profile.model_dump(),
            email=author.email,
            created_at=_aware(author.created_at),
            updated_at=_aware(author.updated_at),
        )


# Login
class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginUser(CamelModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str


class LoginResponse(CamelModel):
    message: str = "Login successful!"
    token: str
    user: LoginUser


class MeResponse(CamelModel):
    id: str
    email: str
    role: str
    display_name: Optional[str] = None
    author: Optional[AuthorResponse] = None


# Taxonomy
class Subcategory(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)


class CategoryCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)
    subcategories: List[Subcategory] = Field(default_factory=list)


class CategoryUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)
    subcategories: Optional[List[Subcategory]] = None


class SubcategoryResponse(CamelModel):
    name: str
    slug: str


class CategoryResponse(CamelModel):
    id: int
    name: str
    slug: str
    subcategories: List[SubcategoryResponse] = Field(default_factory=list)
    post_count: int = 0


class TagCreateRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)


class TagUpdateRequest(CamelModel):
    name: Optional[str] = Field(None, max_length=100)
    slug: Optional[str] = Field(None, max_length=120)


class TagResponse(CamelModel):
    id: int
    name: str
    slug: str
    post_count: int = 0


class PopularTagResponse(CamelModel):
    name: str
    slug: str


# Posts
class TagSnapshot(CamelModel):
    name: str = ""
    slug: str = ""


class CategoryRef(CamelModel):
    id: int
    name: str
    slug: str


class AuthorSnapshot(CamelModel):
    """Author fields copied onto the post when it was written."""
    id: int
    display_name: str
    profile_image: Optional[str] = None


class PostCreateRequest(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    summary: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1, max_length=500)
    read_time: int = Field(..., ge=0)
    category_id: int = Field(..., alias="category")
    tags: List[TagSnapshot] = Field(default_factory=list)
    is_featured: bool = False
    status: PostStatus = PostStatus.PUBLISHED
    publish_date: Optional[datetime] = None
    author_id: Optional[int] = None  # required when an admin creates the post


class PostUpdateRequest(CamelModel):
    title: Optional[str] = Field(None, max_length=255)
    slug: Optional[str] = Field(None, max_length=255)
    summary: Optional[str] = None
    content: Optional[str] = None
    image_url: Optional[str] = Field(None, max_length=500)
    read_time: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = Field(None, alias="category")
    tags: Optional[List[TagSnapshot]] = None
    is_featured: Optional[bool] = None
    status: Optional[PostStatus] = None
    publish_date: Optional[datetime] = None


class PostResponse(CamelModel):
    id: int
    title: str
    slug: str
    summary: str
    content: str
    image_url: str
    read_time: int
    publish_date: Optional[datetime] = None
    category: Optional[CategoryRef] = None
    author: AuthorSnapshot
    tags: List[TagSnapshot] = Field(default_factory=list)
    comment_count: int = 0
    is_featured: bool = False
    status: PostStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def fields_from_post(cls, post: BlogPost) -> dict:
        return dict(
            id=post.id,
            title=post.title,
            slug=post.slug,
            summary=post.summary,
            content=post.content,
            image_url=post.image_url,
            read_time=post.read_time,
            publish_date=_aware(post.publish_date),
            category=CategoryRef.model_validate(post.category) if post.category else None,
            author=AuthorSnapshot(
                id=post.author_id,
                display_name=post.author_display_name,
                profile_image=post.author_profile_image,
            ),
            tags=[TagSnapshot(**t) for t in (post.tags or [])],
            comment_count=post.comment_count,
            is_featured=post.is_featured,
            status=post.status,
            created_at=_aware(post.created_at),
            updated_at=_aware(post.updated_at),
        )

    @classmethod
    def from_post(cls, post: BlogPost) -> "PostResponse":
        return cls(**cls.fields_from_post(post))


# Comments
class CommentCreateRequest(BaseModel):
    """Public comment form (field names match the site's contact-style form)."""
    name: str = Field(..., min_length=2, max_length=80)
    mail: EmailStr
    number: str = Field(..., min_length=1, max_length=40)
    website: Optional[str] = Field(None, max_length=500)
    message: str = Field(..., min_length=1, max_length=1000)


class CommentResponse(CamelModel):
    id: int
    post_id: int
    author_name: str
    author_email: str
    author_number: str
    author_website: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_comment(cls, comment: Comment) -> "CommentResponse":
        data = cls.model_validate(comment)
        data.created_at = _aware(comment.created_at)
        return data


class PublicCommentResponse(CamelModel):
    """Comment as shown under a post; contact details are not published."""
    id: int
    author_name: str
    author_website: Optional[str] = None
    content: str
    created_at: Optional[datetime] = None

    @classmethod
    def from_comment(cls, comment: Comment) -> "PublicCommentResponse":
        data = cls.model_validate(comment)
        data.created_at = _aware(comment.created_at)
        return data


class CommentSubmitResponse(CamelModel):
    success: bool = True
    message: str = "Comment submitted successfully."
    comment: CommentResponse


class PostDetailResponse(PostResponse):
    comments: List[PublicCommentResponse] = Field(default_factory=list)

    @classmethod
    def from_post_and_comments(cls, post: BlogPost, comments: List[Comment]) -> "PostDetailResponse":
        return cls(
            **cls.fields_from_post(post),
            comments=[PublicCommentResponse.from_comment(c) for c in comments],
        )
