from sqlalchemy.orm import relationship
from sqlalchemy import CheckConstraint, Column, Integer, String
from room_admin.db import Base


class Room(Base):
    __tablename__ = "rooms"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    capacity = Column(Integer, nullable=False)
    type = Column(String, nullable=False)
    location = Column(String, nullable=True)
    # bumped by every booking write for this room, see utils.scheduler.lock_room
    revision = Column(Integer, nullable=False, default=0, server_default="0")

    bookings = relationship("Booking", back_populates="room")

    __table_args__ = (
        CheckConstraint("capacity > 0", name="check_room_capacity_positive"),
    )
