import enum

from sqlalchemy import Column, Integer, String, Boolean, Enum
from sqlalchemy.orm import relationship

from .base import AuditMixin, Base


class Role(str, enum.Enum):
    USER  = "USER"
    ADMIN = "ADMIN"


class User(AuditMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)   # bcrypt hash

    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    phone = Column(String(64), nullable=True)

    role = Column(Enum(Role), nullable=False, default=Role.USER)
    is_active = Column(Boolean, nullable=False, default=True)

    # no cascade: a user cannot be removed while owning ads
    ads = relationship("Ad", back_populates="user", passive_deletes="all")
