from roomres.models.user import User
from roomres.models.room import Room
from roomres.models.booking import Booking
from roomres.models.slot import Slot

__all__ = ['User', 'Room', 'Booking', 'Slot']
