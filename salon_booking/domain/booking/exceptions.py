"""Booking domain errors, rendered as {"error": message} by the API"""

# Messages are shown as-is by the salon's booking page
SHOP_CLOSED_MESSAGE = "Le salon est actuellement fermé. Les réservations ne sont pas acceptées."
MISSING_DATA_MESSAGE = "Données manquantes"
SLOT_TAKEN_MESSAGE = "Créneau déjà réservé"
INVALID_DATETIME_MESSAGE = "Format de date ou d'heure invalide."
SERVER_ERROR_MESSAGE = "Erreur serveur"
BOOKED_MESSAGE = "Rendez-vous enregistré !"


class BookingError(Exception):
    status_code = 400
    default_message = SERVER_ERROR_MESSAGE

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingDataError(BookingError):
    default_message = MISSING_DATA_MESSAGE


class InvalidDateTimeError(BookingError):
    default_message = INVALID_DATETIME_MESSAGE


class SlotTakenError(BookingError):
    default_message = SLOT_TAKEN_MESSAGE


class ShopClosedError(BookingError):
    status_code = 403
    default_message = SHOP_CLOSED_MESSAGE


class BookingFailedError(BookingError):
    """A store or calendar call failed; details are only logged"""

    status_code = 500


class SlotAlreadyExists(Exception):
    """Raised by the appointment store when the slot document already exists"""


class BatchDeleteError(Exception):
    """A delete batch failed after `deleted` appointments were already committed"""

    def __init__(self, deleted: int, cause: Exception):
        self.deleted = deleted
        super().__init__(f"batch delete failed after {deleted} deletion(s): {cause}")
