"""Canned ticket and payment models"""

from typing import Any, Optional

from pydantic import BaseModel


class BookTicketRequest(BaseModel):
    tripId: Optional[str] = None
    origin: Optional[str] = None
    destination: Optional[str] = None


class Ticket(BaseModel):
    id: str
    routeId: str
    origin: Optional[str] = None
    destination: Optional[str] = None
    departureTime: int
    arrivalTime: int
    price: float
    status: str


class ProcessPaymentRequest(BaseModel):
    ticketId: Optional[str] = None
    amount: Optional[Any] = None
    paymentMethod: Optional[str] = None


class PaymentRecord(BaseModel):
    id: str
    ticketId: Optional[str] = None
    amount: Optional[Any] = None
    method: Optional[str] = None
    status: str
