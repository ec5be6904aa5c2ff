from typing import Optional, Protocol, Sequence, Union, runtime_checkable
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index, func
from sqlalchemy.orm import relationship
from . import Base
from ..security import verify_password


@runtime_checkable
class Authenticatable(Protocol):
    """What the rest of the app relies on from a user record."""
    name: Optional[str]
    email: Optional[str]
    password_digest: Optional[str]
    remember_token: Optional[str]
    admin: bool
    microposts: Sequence

    def authenticate(self, password: str) -> Union['Authenticatable', bool]:
        ...


class User(Base):
    __tablename__ = 'users'
    __mapper_args__ = {'eager_defaults': True}
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)
    password_digest = Column(String(255), nullable=False)
    remember_token = Column(String(128), index=True, nullable=True)
    admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    microposts = relationship(
        'Micropost',
        back_populates='user',
        order_by='Micropost.created_at.desc()',
        cascade='all, delete-orphan',
        passive_deletes=True,
        lazy='selectin',
    )

    # plaintext is only ever held in memory until the next save
    password = None
    password_confirmation = None

    def __init__(self, **kwargs):
        kwargs.setdefault('admin', False)
        super().__init__(**kwargs)

    def authenticate(self, password: str):
        if self.password_digest and verify_password(password, self.password_digest):
            return self
        return False

    # two loads of the same row compare equal
    def __eq__(self, other):
        if not isinstance(other, User):
            return NotImplemented
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self):
        if self.id is None:
            return object.__hash__(self)
        return hash((User, self.id))

    def __repr__(self):
        return f'<User id={self.id} email={self.email!r}>'


# case-insensitive uniqueness lives in the database, not only in validation
Index('uq_users_email_lower', func.lower(User.email), unique=True)
