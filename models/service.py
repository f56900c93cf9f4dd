from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base


class Service(Base):
    __tablename__ = "services"

    id = Column(String(36), primary_key=True, index=True)
    profile_id = Column(
        String(36), ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False
    )
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(String(50), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    profile = relationship("Profile", back_populates="services")

    def __repr__(self):
        return f"<Service id={self.id} title={self.title}>"
