from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, text
from app.database import Base, utcnow
from sqlalchemy.orm import relationship

class Alert(Base):
    __tablename__ = "alerts"
    __table_args__ = (
        # At most one open alert per (shift, type)
        Index(
            "alerts_open_shift_type_uq",
            "shift_id",
            "type",
            unique=True,
            sqlite_where=text("resolved_at IS NULL"),
            postgresql_where=text("resolved_at IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    shift_id = Column(Integer, ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False)  # out_of_bounds, idle, signal_lost, sos
    message = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    resolved_at = Column(DateTime, nullable=True)

    shift = relationship("Shift", back_populates="alerts")

    def __repr__(self):
        return f"<Alert(id={self.id}, shift_id={self.shift_id}, type='{self.type}')>"
