# Database modules

from .merchandise import merchandise_db, MerchandiseDatabase
from .carts import cart_db, CartDatabase
from .orders import order_db, OrderDatabase
from .users import user_db, UserDatabase
from .tickets import ticket_desk, TicketDesk

__all__ = [
    "merchandise_db",
    "MerchandiseDatabase",
    "cart_db",
    "CartDatabase",
    "order_db",
    "OrderDatabase",
    "user_db",
    "UserDatabase",
    "ticket_desk",
    "TicketDesk",
]
