from .facility import Room, RoomImage, Schedule, Tag
from .reservation import Reservation
