"""Screen objects for the app under test."""
from .base import Screen, read_text, tap, type_text
from .booking import BookingScreen
from .flight_details import FlightDetailsScreen
from .flight_results import FlightResultsScreen
from .payment import PaymentScreen
from .permissions import PermissionHandler
from .search import FlightSearchScreen

__all__ = [
    "Screen",
    "read_text",
    "tap",
    "type_text",
    "BookingScreen",
    "FlightDetailsScreen",
    "FlightResultsScreen",
    "FlightSearchScreen",
    "PaymentScreen",
    "PermissionHandler",
]
