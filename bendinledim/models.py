from . import db
from datetime import datetime
import uuid


def _uuid() -> str:
    return uuid.uuid4().hex


def _iso(v):
    return v.isoformat() if v else None


class Category(db.Model):
    __tablename__ = "categories"
    id = db.Column(db.String(64), primary_key=True, default=_uuid)
    name = db.Column(db.String(120), unique=True, nullable=False)
    name_en = db.Column(db.String(120))
    slug = db.Column(db.String(160), unique=True, index=True, nullable=False)
    color = db.Column(db.String(16), default="#d97706", nullable=False)

    articles = db.relationship("Article", back_populates="category")

    def to_dict(self, article_count=None):
        out = {
            "id": self.id,
            "name": self.name,
            "nameEn": self.name_en,
            "slug": self.slug,
            "color": self.color,
        }
        if article_count is not None:
            out["_count"] = {"articles": article_count}
        return out


class Tag(db.Model):
    __tablename__ = "tags"
    id = db.Column(db.String(64), primary_key=True, default=_uuid)
    name = db.Column(db.String(120), unique=True, nullable=False)
    slug = db.Column(db.String(160), unique=True, index=True, nullable=False)

    articles = db.relationship("ArticleTag", back_populates="tag", cascade="all, delete-orphan")

    def to_dict(self, article_count=None):
        out = {"id": self.id, "name": self.name, "slug": self.slug}
        if article_count is not None:
            out["_count"] = {"articles": article_count}
        return out


class ArticleTag(db.Model):
    __tablename__ = "article_tags"
    article_id = db.Column(db.String(64), db.ForeignKey("articles.id", ondelete="CASCADE"), primary_key=True)
    tag_id = db.Column(db.String(64), db.ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True)

    article = db.relationship("Article", back_populates="tags")
    tag = db.relationship("Tag", back_populates="articles")


class Article(db.Model):
    __tablename__ = "articles"
    id = db.Column(db.String(64), primary_key=True, default=_uuid)
    slug = db.Column(db.String(255), unique=True, index=True, nullable=False)
    title = db.Column(db.String(500), nullable=False)
    title_en = db.Column(db.String(500))
    content = db.Column(db.Text, default="", nullable=False)
    content_en = db.Column(db.Text)
    excerpt = db.Column(db.Text, default="", nullable=False)
    excerpt_en = db.Column(db.Text)
    image_url = db.Column(db.String(1000))
    author = db.Column(db.String(120), default="Editör Ekibi", nullable=False)
    read_time = db.Column(db.Integer, default=5, nullable=False)
    published = db.Column(db.Boolean, default=False, index=True, nullable=False)
    featured = db.Column(db.Boolean, default=False, index=True, nullable=False)
    editors_pick = db.Column(db.Boolean, default=False, index=True, nullable=False)
    category_id = db.Column(db.String(64), db.ForeignKey("categories.id"), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    category = db.relationship("Category", back_populates="articles")
    tags = db.relationship("ArticleTag", back_populates="article", cascade="all, delete-orphan")
    comments = db.relationship(
        "Comment",
        back_populates="article",
        cascade="all, delete-orphan",
        order_by="Comment.created_at.desc()",
    )

    @property
    def tag_list(self):
        return [at.tag for at in self.tags if at.tag is not None]

    def approved_comments(self):
        return [c for c in self.comments if c.approved]

    def to_dict(self, with_comments=False):
        out = {
            "id": self.id,
            "slug": self.slug,
            "title": self.title,
            "titleEn": self.title_en,
            "content": self.content,
            "contentEn": self.content_en,
            "excerpt": self.excerpt,
            "excerptEn": self.excerpt_en,
            "imageUrl": self.image_url,
            "author": self.author,
            "readTime": self.read_time,
            "published": self.published,
            "featured": self.featured,
            "editorsPick": self.editors_pick,
            "categoryId": self.category_id,
            "category": self.category.to_dict() if self.category else None,
            "tags": [t.to_dict() for t in self.tag_list],
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if with_comments:
            out["comments"] = [c.to_dict() for c in self.approved_comments()]
        return out


class Comment(db.Model):
    __tablename__ = "comments"
    id = db.Column(db.String(64), primary_key=True, default=_uuid)
    article_id = db.Column(db.String(64), db.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False, index=True)
    author = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(255))
    content = db.Column(db.Text, nullable=False)
    # moderation gate: nothing is public until an editor approves it
    approved = db.Column(db.Boolean, default=False, index=True, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    article = db.relationship("Article", back_populates="comments")

    def to_dict(self):
        return {
            "id": self.id,
            "articleId": self.article_id,
            "author": self.author,
            "content": self.content,
            "approved": self.approved,
            "createdAt": _iso(self.created_at),
        }
