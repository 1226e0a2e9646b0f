from sqlalchemy import Column, Integer, String, Float, Text, DateTime
from app.database import Base, utcnow
from sqlalchemy.orm import relationship

class Site(Base):
    __tablename__ = "sites"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address_from = Column(Text, nullable=True)
    address_to = Column(Text, nullable=True)
    # Patrol corridor anchors, decimal degrees
    lat_from = Column(Float, nullable=True)
    lng_from = Column(Float, nullable=True)
    lat_to = Column(Float, nullable=True)
    lng_to = Column(Float, nullable=True)
    buffer_meters = Column(Integer, nullable=False, default=100)
    boundary_geojson = Column(Text, nullable=True)  # {"type": "Polygon", "coordinates": [[[lng, lat], ...]]}
    created_at = Column(DateTime, default=utcnow)

    shifts = relationship("Shift", back_populates="site")

    def __repr__(self):
        return f"<Site(id={self.id}, name='{self.name}')>"
