"""
Booking scheduling rules.

A room may never hold two bookings whose half-open ``[start, end)`` intervals
overlap. Every write that could break this takes the room lock (see
``lock_room``), runs the conflict check and commits in the same transaction.
"""
import logging
from datetime import date, datetime, timedelta
from typing import List, Optional
from sqlalchemy import update
from sqlalchemy.orm import Session
from room_admin import config
from room_admin.models.booking import Booking
from room_admin.models.room import Room
from room_admin.utils.auth import can_modify_booking
from room_admin.utils.errors import AuthError, ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def overlaps(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open interval overlap: touching endpoints do not overlap."""
    return a_start < b_end and b_start < a_end


def validate_interval(start_time: datetime, end_time: datetime):
    if start_time >= end_time:
        raise ValidationError(
            "Start time must be before end time",
            errors=[{"field": "end_time", "message": "must be after start_time"}],
        )


def check_conflict(
    db: Session,
    room_id: int,
    start_time: datetime,
    end_time: datetime,
    exclude_booking_id: Optional[int] = None,
) -> bool:
    """Return True if any booking of the room overlaps [start_time, end_time)."""
    query = db.query(Booking.id).filter(
        Booking.room_id == room_id,
        Booking.start_time < end_time,
        Booking.end_time > start_time,
    )
    if exclude_booking_id is not None:
        query = query.filter(Booking.id != exclude_booking_id)
    return query.first() is not None


def lock_room(db: Session, room_id: int):
    """
    Take the write lock of a room for the current transaction.

    Bumping ``rooms.revision`` locks the row on PostgreSQL/MySQL and the whole
    database on SQLite, so a concurrent writer for the same room blocks until
    this transaction ends and then sees its booking.
    """
    result = db.execute(
        update(Room)
        .where(Room.id == room_id)
        .values(revision=Room.revision + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        raise NotFoundError("Room not found")


def get_booking_or_404(db: Session, booking_id: int) -> Booking:
    booking = db.query(Booking).filter(Booking.id == booking_id).first()
    if not booking:
        logger.warning(f"Booking not found: {booking_id}")
        raise NotFoundError("Booking not found")
    return booking


def create_booking(
    db: Session,
    title: str,
    room_id: int,
    start_time: datetime,
    end_time: datetime,
    user_id: int,
) -> Booking:
    validate_interval(start_time, end_time)
    try:
        lock_room(db, room_id)
        if check_conflict(db, room_id, start_time, end_time):
            logger.warning(f"Overlapping booking for room_id: {room_id}, time: {start_time} to {end_time}")
            raise ConflictError("Room is already booked for this time slot")

        booking = Booking(
            title=title,
            room_id=room_id,
            user_id=user_id,
            start_time=start_time,
            end_time=end_time,
        )
        db.add(booking)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(booking)
    logger.debug(f"Created booking: {booking.id} for room_id: {room_id}")
    return booking


def update_booking(db: Session, booking_id: int, changes: dict, principal: dict) -> Booking:
    """
    Apply ``changes`` (any of title, room_id, start_time, end_time) to a booking.

    The conflict check runs against the booking's effective room and interval
    after the patch, and only when the room or the interval actually changes.
    """
    booking = get_booking_or_404(db, booking_id)
    if not can_modify_booking(principal, booking):
        logger.warning(f"User {principal['email']} not authorized to update booking {booking_id}")
        raise AuthError.forbidden("Not authorized to update this booking")

    room_id = changes.get("room_id") or booking.room_id
    start_time = changes.get("start_time") or booking.start_time
    end_time = changes.get("end_time") or booking.end_time
    validate_interval(start_time, end_time)

    moved = (room_id, start_time, end_time) != (booking.room_id, booking.start_time, booking.end_time)
    try:
        if moved:
            lock_room(db, room_id)
            if check_conflict(db, room_id, start_time, end_time, exclude_booking_id=booking_id):
                logger.warning(f"Overlapping booking for room_id: {room_id}, time: {start_time} to {end_time}")
                raise ConflictError("Room is already booked for this time slot")

        if changes.get("title") is not None:
            booking.title = changes["title"]
        booking.room_id = room_id
        booking.start_time = start_time
        booking.end_time = end_time
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(booking)
    logger.debug(f"Updated booking: {booking_id}")
    return booking


def delete_booking(db: Session, booking_id: int, principal: dict):
    booking = get_booking_or_404(db, booking_id)
    if not can_modify_booking(principal, booking):
        logger.warning(f"User {principal['email']} not authorized to delete booking {booking_id}")
        raise AuthError.forbidden("Not authorized to delete this booking")

    db.delete(booking)
    db.commit()
    logger.debug(f"Deleted booking: {booking_id}")


def find_available_slots(db: Session, room_id: int, day: date, duration: int) -> List[dict]:
    """
    Free slots of ``duration`` minutes for a room between opening and closing hours.
    """
    if duration <= 0:
        raise ValidationError(
            "Duration must be positive",
            errors=[{"field": "duration", "message": "must be greater than 0"}],
        )
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        raise NotFoundError("Room not found")

    day_start = datetime.combine(day, datetime.min.time()) + timedelta(hours=config.DAY_START_HOUR)
    day_end = datetime.combine(day, datetime.min.time()) + timedelta(hours=config.DAY_END_HOUR)

    bookings = db.query(Booking).filter(
        Booking.room_id == room_id,
        Booking.start_time < day_end,
        Booking.end_time > day_start,
    ).order_by(Booking.start_time).all()

    slots = []
    current_time = day_start
    duration_delta = timedelta(minutes=duration)

    for booking in bookings:
        while current_time + duration_delta <= booking.start_time:
            slot_end = current_time + duration_delta
            slots.append({"start_time": current_time, "end_time": slot_end})
            current_time = slot_end
        current_time = max(current_time, booking.end_time)

    while current_time + duration_delta <= day_end:
        slot_end = current_time + duration_delta
        slots.append({"start_time": current_time, "end_time": slot_end})
        current_time = slot_end

    logger.debug(f"Found {len(slots)} available slots for room_id: {room_id}")
    return slots
