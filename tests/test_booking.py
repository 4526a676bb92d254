import pytest
from fastapi import status

from room_admin.models.booking import Booking

from tests.conf_tests import (
    at,
    client,
    clear_db,
    make_booking,
    make_room,
    test_db,
    test_user,
    other_user,
    admin_user,
    auth_headers,
    other_headers,
    admin_headers,
    test_room,
)


def booking_payload(room, start_time, end_time, title="Physics class"):
    return {
        "title": title,
        "room_id": room.id,
        "start_time": start_time.isoformat(),
        "end_time": end_time.isoformat(),
    }


@pytest.fixture
def test_booking(test_db, test_room, test_user): # pylint: disable=redefined-outer-name
    return make_booking(test_db, test_room, test_user, at(10), at(11))


# Tests
# pylint: disable-next=redefined-outer-name
def test_create_booking_success(auth_headers, test_room, test_user):
    response = client.post("/bookings/", json=booking_payload(test_room, at(10), at(11)), headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["room_id"] == test_room.id
    assert data["user_id"] == test_user.id
    assert data["title"] == "Physics class"
    assert data["start_time"] == at(10).isoformat()
    assert data["end_time"] == at(11).isoformat()
    assert data["room_name"] == test_room.name


def test_create_booking_unauthenticated(test_room): # pylint: disable=redefined-outer-name
    response = client.post("/bookings/", json=booking_payload(test_room, at(10), at(11)))
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_create_booking_invalid_token(test_room): # pylint: disable=redefined-outer-name
    response = client.post(
        "/bookings/",
        json=booking_payload(test_room, at(10), at(11)),
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# pylint: disable-next=redefined-outer-name
def test_create_booking_overlapping(auth_headers, test_room, test_booking):
    response = client.post("/bookings/", json=booking_payload(test_room, at(10, 30), at(11, 30)), headers=auth_headers)
    assert response.status_code == status.HTTP_409_CONFLICT
    assert "already booked" in response.json()["detail"]


# pylint: disable-next=redefined-outer-name
def test_create_booking_adjacent(auth_headers, test_room, test_booking):
    response = client.post("/bookings/", json=booking_payload(test_room, at(11), at(12)), headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED


# pylint: disable-next=redefined-outer-name
def test_create_booking_end_before_start(auth_headers, test_room):
    response = client.post("/bookings/", json=booking_payload(test_room, at(11), at(10)), headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["errors"][0]["field"] == "end_time"


# pylint: disable-next=redefined-outer-name
def test_create_booking_short_title(auth_headers, test_room):
    response = client.post("/bookings/", json=booking_payload(test_room, at(10), at(11), title="ab"), headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    fields = [error["field"] for error in response.json()["errors"]]
    assert "title" in fields


# pylint: disable-next=redefined-outer-name
def test_create_booking_timezone_normalized(auth_headers, test_room):
    payload = booking_payload(test_room, at(10), at(11))
    payload["start_time"] = "2030-01-07T12:00:00+02:00"
    payload["end_time"] = "2030-01-07T13:00:00+02:00"
    response = client.post("/bookings/", json=payload, headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["start_time"] == at(10).isoformat()


# pylint: disable-next=redefined-outer-name
def test_create_booking_room_not_found(auth_headers):
    response = client.post(
        "/bookings/",
        json={"title": "Physics", "room_id": 999, "start_time": at(10).isoformat(), "end_time": at(11).isoformat()},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_get_bookings(auth_headers, test_booking, test_user, test_room):
    response = client.get("/bookings/", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == test_booking.id
    assert data[0]["user_name"] == test_user.name
    assert data[0]["room_name"] == test_room.name


def test_get_bookings_unauthenticated():
    response = client.get("/bookings/")
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# pylint: disable-next=redefined-outer-name
def test_get_booking(auth_headers, test_booking):
    response = client.get(f"/bookings/{test_booking.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["id"] == test_booking.id


# pylint: disable-next=redefined-outer-name
def test_get_booking_not_found(auth_headers):
    response = client.get("/bookings/999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_update_booking_by_owner(auth_headers, test_booking):
    response = client.patch(f"/bookings/{test_booking.id}", json={"title": "Chemistry"}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["title"] == "Chemistry"


# pylint: disable-next=redefined-outer-name
def test_update_booking_by_admin(admin_headers, test_booking):
    response = client.patch(
        f"/bookings/{test_booking.id}",
        json={"start_time": at(15).isoformat(), "end_time": at(16).isoformat()},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["start_time"] == at(15).isoformat()


# pylint: disable-next=redefined-outer-name
def test_update_booking_by_other_user(other_headers, test_booking):
    response = client.patch(f"/bookings/{test_booking.id}", json={"title": "Should Fail"}, headers=other_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_update_booking_unauthenticated(test_booking):
    response = client.patch(f"/bookings/{test_booking.id}", json={"title": "Should Fail"})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED


# pylint: disable-next=redefined-outer-name
def test_update_booking_not_found(auth_headers):
    response = client.patch("/bookings/999", json={"title": "Nothing here"}, headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_update_booking_room_change_conflict(test_db, auth_headers, test_room, test_user, test_booking):
    other_room = make_room(test_db, name="Lab 102")
    moving = make_booking(test_db, other_room, test_user, at(10, 30), at(11, 30))
    response = client.patch(f"/bookings/{moving.id}", json={"room_id": test_room.id}, headers=auth_headers)
    assert response.status_code == status.HTTP_409_CONFLICT

    # title-only patches never conflict
    response = client.patch(f"/bookings/{moving.id}", json={"title": "Biology"}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["room_id"] == other_room.id


# pylint: disable-next=redefined-outer-name
def test_update_booking_room_change_free(test_db, auth_headers, test_room, test_user, test_booking):
    other_room = make_room(test_db, name="Lab 102")
    moving = make_booking(test_db, other_room, test_user, at(13), at(14))
    response = client.patch(f"/bookings/{moving.id}", json={"room_id": test_room.id}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["room_id"] == test_room.id


# pylint: disable-next=redefined-outer-name
def test_delete_booking_by_owner(auth_headers, test_booking, test_db):
    response = client.delete(f"/bookings/{test_booking.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT
    assert test_db.query(Booking).filter(Booking.id == test_booking.id).first() is None


# pylint: disable-next=redefined-outer-name
def test_delete_booking_by_admin(admin_headers, test_booking):
    response = client.delete(f"/bookings/{test_booking.id}", headers=admin_headers)
    assert response.status_code == status.HTTP_204_NO_CONTENT


# pylint: disable-next=redefined-outer-name
def test_delete_booking_by_other_user(other_headers, test_booking):
    response = client.delete(f"/bookings/{test_booking.id}", headers=other_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_delete_booking_not_found(auth_headers):
    response = client.delete("/bookings/999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_get_available_slots(auth_headers, test_room, test_booking):
    response = client.get(
        f"/bookings/available_slots/?room_id={test_room.id}&date={at(0).date()}",
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    slots = response.json()
    starts = [slot["start_time"] for slot in slots]
    assert at(8).isoformat() in starts
    assert at(10).isoformat() not in starts
    assert at(11).isoformat() in starts


# pylint: disable-next=redefined-outer-name
def test_get_available_slots_room_not_found(auth_headers):
    response = client.get(f"/bookings/available_slots/?room_id=999&date={at(0).date()}", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_update_booking_room_not_found(auth_headers, test_booking, test_db, test_room):
    response = client.patch(f"/bookings/{test_booking.id}", json={"room_id": 999}, headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["detail"] == "Room not found"
    test_db.refresh(test_booking)
    assert test_booking.room_id == test_room.id
