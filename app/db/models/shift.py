from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from app.database import Base, utcnow
from sqlalchemy.orm import relationship

class Shift(Base):
    __tablename__ = "shifts"
    __table_args__ = (
        Index("shifts_guard_status_idx", "guard_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    guard_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    site_id = Column(Integer, ForeignKey("sites.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(50), nullable=False, default="active")  # active, completed
    start_time = Column(DateTime, default=utcnow, nullable=False)
    end_time = Column(DateTime, nullable=True)

    guard = relationship("User", back_populates="shifts")
    site = relationship("Site", back_populates="shifts")
    locations = relationship(
        "GuardLocation",
        back_populates="shift",
        cascade="all, delete-orphan",
        order_by="GuardLocation.recorded_at",
    )
    alerts = relationship("Alert", back_populates="shift", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Shift(id={self.id}, guard_id={self.guard_id}, status='{self.status}')>"
