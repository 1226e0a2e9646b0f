from sqlalchemy import Column, Integer, Float, DateTime, ForeignKey, Index
from app.database import Base, utcnow
from sqlalchemy.orm import relationship

class GuardLocation(Base):
    __tablename__ = "guard_locations"
    __table_args__ = (
        Index("guard_locations_shift_recorded_idx", "shift_id", "recorded_at"),
    )

    id = Column(Integer, primary_key=True, index=True)
    guard_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    shift_id = Column(Integer, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    accuracy = Column(Float, nullable=True)
    speed = Column(Float, nullable=True)
    heading = Column(Float, nullable=True)
    recorded_at = Column(DateTime, default=utcnow, nullable=False)

    shift = relationship("Shift", back_populates="locations")
