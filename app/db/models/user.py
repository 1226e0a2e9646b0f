from sqlalchemy import Column, Integer, String, DateTime
from app.database import Base, utcnow
from sqlalchemy.orm import relationship

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)
    role = Column(String(50), nullable=False, default="guard")  # guard, supervisor, admin
    badge_id = Column(String(100), nullable=True, unique=True)
    phone = Column(String(50), nullable=True)
    created_at = Column(DateTime, default=utcnow)

    shifts = relationship("Shift", back_populates="guard", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<User(id={self.id}, name='{self.name}', role='{self.role}')>"
