from sqlalchemy import Column, Integer, String

from .base import AuditMixin, Base


class Attachment(AuditMixin, Base):
    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True)
    filename = Column(String(255), nullable=True)     # original upload name
    saved_name = Column(String(255), nullable=True)   # image.<ext>
    file_path = Column(String(500), nullable=True)    # public URL path
    content_type = Column(String(100), nullable=True)
    extension = Column(String(16), nullable=True)

