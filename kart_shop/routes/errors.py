"""Map shop errors onto HTTP responses"""

from fastapi import HTTPException

from ..core.errors import (
    CatalogLookupFailed,
    EmptyCart,
    InvalidOrderTransition,
    InvalidQuantity,
    ItemUnavailable,
    KartShopError,
    NotAuthenticated,
    OrderNotFound,
    StockConflict,
    StockExhausted,
)

STATUS_CODES = {
    ItemUnavailable: 404,
    InvalidQuantity: 400,
    StockExhausted: 400,
    EmptyCart: 400,
    NotAuthenticated: 401,
    StockConflict: 409,
    CatalogLookupFailed: 502,
    OrderNotFound: 404,
    InvalidOrderTransition: 409,
}


def http_error(exc: KartShopError) -> HTTPException:
    status_code = next(
        (code for kind, code in STATUS_CODES.items() if isinstance(exc, kind)),
        500,
    )
    if isinstance(exc, StockConflict):
        detail = {"message": str(exc), "conflicts": exc.conflicts}
    else:
        detail = str(exc)
    return HTTPException(status_code=status_code, detail=detail)
