import logging
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from typing import List
from room_admin.db import get_db
from room_admin.models.booking import Booking
from room_admin.models.room import Room
from room_admin.schemas.room import RoomCreate, RoomUpdate, RoomResponse
from room_admin.utils.auth import get_current_user, require_admin
from room_admin.utils.errors import ConflictError, NotFoundError
from room_admin.utils.scheduler import lock_room

logger = logging.getLogger(__name__)

ROOM_HAS_BOOKINGS = "This room has associated bookings and cannot be deleted. Remove the bookings first."

router = APIRouter(
    prefix="/rooms",
    tags=["rooms"],
)


def get_room_or_404(db: Session, room_id: int) -> Room:
    room = db.query(Room).filter(Room.id == room_id).first()
    if not room:
        raise NotFoundError("Room not found")
    return room


@router.post("/", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(room: RoomCreate, db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    """
    Create a new room.
    Requires the ADMIN role.
    """
    db_room = Room(**room.model_dump())
    db.add(db_room)
    db.commit()
    db.refresh(db_room)
    logger.debug(f"Created room: {db_room.id} ({db_room.name})")
    return db_room


@router.get("/", response_model=List[RoomResponse])
def get_rooms(db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    """
    Retrieve all rooms ordered by name.
    """
    return db.query(Room).order_by(Room.name).all()


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(room_id: int, db: Session = Depends(get_db), current_user: dict = Depends(get_current_user)):
    """
    Retrieve a specific room by ID.
    """
    return get_room_or_404(db, room_id)


@router.patch("/{room_id}", response_model=RoomResponse)
def update_room(room_id: int, room_update: RoomUpdate, db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    """
    Update a room's details.
    Requires the ADMIN role.
    """
    db_room = get_room_or_404(db, room_id)

    update_data = room_update.model_dump(exclude_unset=True)
    for key, value in update_data.items():
        # location is the only column that may be cleared
        if value is None and key != "location":
            continue
        setattr(db_room, key, value)

    db.commit()
    db.refresh(db_room)
    return db_room


@router.delete("/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(room_id: int, db: Session = Depends(get_db), current_user: dict = Depends(require_admin)):
    """
    Delete a room.
    Requires the ADMIN role; rooms that still have bookings cannot be deleted.
    """
    db_room = get_room_or_404(db, room_id)

    try:
        # holds off booking writers for this room until the delete commits
        lock_room(db, room_id)
        bookings_count = db.query(Booking).filter(Booking.room_id == room_id).count()
        if bookings_count > 0:
            logger.warning(f"Refusing to delete room {room_id} with {bookings_count} bookings")
            raise ConflictError(ROOM_HAS_BOOKINGS)

        db.delete(db_room)
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Room {room_id} gained bookings while being deleted")
        raise ConflictError(ROOM_HAS_BOOKINGS) from e
    except Exception:
        db.rollback()
        raise
    return Response(status_code=status.HTTP_204_NO_CONTENT)
