from typing import List
from fastapi import APIRouter, Depends, Response, status
from datetime import date
from sqlalchemy.orm import Session, joinedload
from room_admin.db import get_db
from room_admin.models.booking import Booking
from room_admin.schemas.booking import BookingCreate, BookingUpdate, BookingResponse, TimeSlot
from room_admin.utils.auth import get_current_user
from room_admin.utils import scheduler
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/bookings",
    tags=["bookings"],
)

@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new booking",
    description="Reserve a room for a time interval. Requires authentication."
)
def create_booking(
    booking: BookingCreate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Create a new booking owned by the caller.

    - **title**: What the room is booked for (at least 3 characters).
    - **room_id**: ID of the room to book.
    - **start_time**: Start of the booking (ISO-8601).
    - **end_time**: End of the booking (ISO-8601), strictly after start_time.

    Fails with 409 when the room is already booked for an overlapping interval.
    """
    logger.debug(f"Creating booking for user: {current_user['email']}, room_id: {booking.room_id}")
    return scheduler.create_booking(
        db,
        title=booking.title,
        room_id=booking.room_id,
        start_time=booking.start_time,
        end_time=booking.end_time,
        user_id=current_user["id"],
    )

@router.get(
    "/",
    response_model=List[BookingResponse],
    summary="List all bookings",
    description="Retrieve every booking with its room and owner names, ordered by start time."
)
def get_bookings(
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Retrieve all bookings, as shown on the shared calendar.
    """
    bookings = (
        db.query(Booking)
        .options(joinedload(Booking.room), joinedload(Booking.user))
        .order_by(Booking.start_time)
        .all()
    )
    logger.debug(f"Retrieved {len(bookings)} bookings")
    return bookings

@router.get(
    "/available_slots/",
    response_model=List[TimeSlot],
    summary="List available time slots",
    description="Retrieve free time slots for a room on a specific date. Requires authentication."
)
def get_available_slots(
    room_id: int,
    date: date,
    duration: int = 60,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    List available time slots for a room.

    - **room_id**: ID of the room to check availability for.
    - **date**: Date to check availability (e.g., 2025-05-04).
    - **duration**: Duration of each slot in minutes (default: 60).
    """
    logger.debug(f"Fetching available slots for room_id: {room_id}, date: {date}, user: {current_user['email']}")
    return scheduler.find_available_slots(db, room_id, date, duration)

@router.get(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Get a booking by ID",
    description="Retrieve a specific booking by its ID."
)
def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Retrieve a booking by ID.
    """
    return scheduler.get_booking_or_404(db, booking_id)

@router.patch(
    "/{booking_id}",
    response_model=BookingResponse,
    summary="Update a booking",
    description="Change a booking's title, interval or room. Requires ownership or the ADMIN role."
)
def update_booking(
    booking_id: int,
    booking_update: BookingUpdate,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    """
    Update a booking.

    - **title**: (Optional) New title.
    - **start_time** / **end_time**: (Optional) New interval bounds.
    - **room_id**: (Optional) New room.

    Moving the booking to another room or interval re-checks for overlaps (409).
    """
    changes = booking_update.model_dump(exclude_unset=True)
    return scheduler.update_booking(db, booking_id, changes, current_user)

@router.delete(
    "/{booking_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a booking",
    description="Cancel a booking. Requires ownership or the ADMIN role."
)
def delete_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    current_user: dict = Depends(get_current_user),
):
    scheduler.delete_booking(db, booking_id, current_user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
