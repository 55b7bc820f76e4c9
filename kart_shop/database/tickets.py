"""Canned ticket booking and payment desk"""

import itertools
import threading
import time


class TicketDesk:
    """Issues sequential ticket and payment ids"""

    MOCK_FARE = 3.20
    TRIP_MINUTES = 30

    def __init__(self, first_ticket: int = 1000, first_payment: int = 5000):
        self._first_ticket = first_ticket
        self._first_payment = first_payment
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        self._tickets = itertools.count(self._first_ticket)
        self._payments = itertools.count(self._first_payment)

    def book_ticket(self, trip_id=None, origin=None, destination=None) -> dict:
        with self._lock:
            ticket_id = f"TICKET{next(self._tickets)}"
        departure = int(time.time() * 1000)
        return {
            "id": ticket_id,
            "routeId": trip_id or "unknown-route",
            "origin": origin,
            "destination": destination,
            "departureTime": departure,
            "arrivalTime": departure + self.TRIP_MINUTES * 60 * 1000,
            "price": self.MOCK_FARE,
            "status": "confirmed",
        }

    def process_payment(self, ticket_id=None, amount=None, method=None) -> dict:
        with self._lock:
            payment_id = f"PAY{next(self._payments)}"
        return {
            "id": payment_id,
            "ticketId": ticket_id,
            "amount": amount,
            "method": method,
            "status": "completed",
        }


# Singleton instance
ticket_desk = TicketDesk()
