"""Canned ticket booking and payment routes"""

from fastapi import APIRouter

from ..database.tickets import ticket_desk
from ..models.demo import BookTicketRequest, PaymentRecord, ProcessPaymentRequest, Ticket

router = APIRouter(prefix="/api", tags=["Demo"])


@router.post("/book-ticket", response_model=Ticket)
async def book_ticket(request: BookTicketRequest):
    """Issue a confirmed ticket at the mock fare"""
    return ticket_desk.book_ticket(
        trip_id=request.tripId,
        origin=request.origin,
        destination=request.destination,
    )


@router.post("/process-payment", response_model=PaymentRecord)
async def process_payment(request: ProcessPaymentRequest):
    """Record a payment that always completes"""
    return ticket_desk.process_payment(
        ticket_id=request.ticketId,
        amount=request.amount,
        method=request.paymentMethod,
    )
