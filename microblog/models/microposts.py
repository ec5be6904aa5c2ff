from datetime import datetime, timezone
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship, validates
from . import Base

MAX_CONTENT_LENGTH = 140


class Micropost(Base):
    __tablename__ = 'microposts'
    __mapper_args__ = {'eager_defaults': True}
    id = Column(Integer, primary_key=True, index=True)
    content = Column(String(MAX_CONTENT_LENGTH), nullable=False)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    # set in Python so every stored value is UTC with microseconds; SQLite
    # compares them as text
    created_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        nullable=False,
    )

    user = relationship('User', back_populates='microposts')

    __table_args__ = (
        Index('ix_microposts_user_id_created_at', 'user_id', 'created_at'),
    )

    @validates('created_at')
    def _check_created_at(self, key, value):
        if self.id is not None:
            raise ValueError('created_at cannot change once a micropost is saved')
        if value is None:
            return value
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def __repr__(self):
        return f'<Micropost id={self.id} user_id={self.user_id}>'
