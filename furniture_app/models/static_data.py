from sqlalchemy import Column, Integer, String

from .base import AuditMixin, Base


class Category(AuditMixin, Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)


class City(AuditMixin, Base):
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
