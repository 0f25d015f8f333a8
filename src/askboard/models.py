"""SQLAlchemy database models."""

from datetime import datetime, timezone

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    SmallInteger,
    String,
    Table,
    Text,
    UniqueConstraint,
    false,
    func,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(timezone.utc)


def question_search_text(context) -> str:
    """Casefolded title and content, matched by question search."""
    params = context.get_current_parameters()
    return f"{params['title']}\n{params['content']}".casefold()


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class User(Base):
    """User model - local shadow of a profile owned by the identity provider."""

    __tablename__ = "users"

    id = Column(String(255), primary_key=True)  # Identity provider user ID
    email = Column(String(255), nullable=True, unique=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    profile_image_url = Column(String(2048), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    questions = relationship("Question", back_populates="author")
    answers = relationship("Answer", back_populates="author")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"


# Junction table; the composite primary key keeps a tag from being linked twice
question_tags = Table(
    "question_tags",
    Base.metadata,
    Column(
        "question_id",
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Tag(Base):
    """Tag model - shared, lazily created labels for questions."""

    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(50), nullable=False, unique=True)  # trimmed, lower-case
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    questions = relationship("Question", secondary=question_tags, back_populates="tags")

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name})>"


class Question(Base):
    """Question model."""

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(300), nullable=False)
    content = Column(Text, nullable=False)  # Rich text (HTML)
    search_text = Column(Text, nullable=False, default=question_search_text)
    author_id = Column(
        String(255),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    # Relationships
    author = relationship("User", back_populates="questions")
    answers = relationship("Answer", back_populates="question", cascade="all, delete-orphan")
    tags = relationship(
        "Tag",
        secondary=question_tags,
        back_populates="questions",
        order_by="Tag.name",
    )

    def __repr__(self) -> str:
        return f"<Question(id={self.id}, title={self.title[:50]})>"


class Answer(Base):
    """Answer model - at most one answer per question is accepted."""

    __tablename__ = "answers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    content = Column(Text, nullable=False)
    question_id = Column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    author_id = Column(
        String(255),
        ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    is_accepted = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    # Relationships
    question = relationship("Question", back_populates="answers")
    author = relationship("User", back_populates="answers")

    def __repr__(self) -> str:
        return f"<Answer(id={self.id}, question_id={self.question_id}, is_accepted={self.is_accepted})>"


class QuestionVote(Base):
    """One row per (question, user); re-voting overwrites vote_type."""

    __tablename__ = "question_votes"
    __table_args__ = (
        UniqueConstraint("question_id", "user_id", name="uq_question_votes_question_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    question_id = Column(
        Integer,
        ForeignKey("questions.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, index=True)
    vote_type = Column(SmallInteger, nullable=False)  # +1 (upvote) or -1 (downvote)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<QuestionVote(question_id={self.question_id}, user_id={self.user_id}, vote_type={self.vote_type})>"


class AnswerVote(Base):
    """One row per (answer, user); re-voting overwrites vote_type."""

    __tablename__ = "answer_votes"
    __table_args__ = (
        UniqueConstraint("answer_id", "user_id", name="uq_answer_votes_answer_user"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    answer_id = Column(
        Integer,
        ForeignKey("answers.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id = Column(String(255), ForeignKey("users.id"), nullable=False, index=True)
    vote_type = Column(SmallInteger, nullable=False)  # +1 (upvote) or -1 (downvote)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<AnswerVote(answer_id={self.answer_id}, user_id={self.user_id}, vote_type={self.vote_type})>"
