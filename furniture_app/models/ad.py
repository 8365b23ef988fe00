import enum

from sqlalchemy import Column, Integer, String, Boolean, Numeric, ForeignKey, Enum
from sqlalchemy.orm import relationship

from .base import AuditMixin, Base


class Condition(str, enum.Enum):
    EXCELLENT = "EXCELLENT"
    GOOD      = "GOOD"
    AGE_WORN  = "AGE_WORN"
    DAMAGED   = "DAMAGED"


class Ad(AuditMixin, Base):
    __tablename__ = "ads"

    id = Column(Integer, primary_key=True)
    title = Column(String(200), nullable=False)
    description = Column(String(2000), nullable=True)
    price = Column(Numeric(10, 2), nullable=True)
    condition = Column(Enum(Condition), nullable=True)
    is_available = Column(Boolean, nullable=True)

    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    city_id = Column(Integer, ForeignKey("cities.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    attachment_id = Column(Integer, ForeignKey("attachments.id"), nullable=True, unique=True)

    category = relationship("Category")
    city = relationship("City")
    user = relationship("User", back_populates="ads")
    # the attachment lives and dies with its ad
    image = relationship(
        "Attachment",
        cascade="all, delete-orphan",
        single_parent=True,
    )
