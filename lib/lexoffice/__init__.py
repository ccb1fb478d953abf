"""lexoffice API client library.

Usage:
    from lexoffice import LexofficeConnectionBuilder, VoucherStatus

    client = (
        LexofficeConnectionBuilder()
        .with_api_key("...")
        .with_timeout(5000)
        .build()
    )
    entries = await client.get_invoice_list(VoucherStatus.OPEN)
    invoices = await client.get_invoices(entries)
    await client.aclose()
"""

from .config import Settings, get_settings
from .connection import ConnectionConfig, ProxySettings, is_well_formed_token
from .errors import (
    ApiError,
    ClientNotInitializedError,
    DeserializationError,
    LexofficeError,
    RateLimitExceededError,
    RequestTimeoutError,
    SerializationError,
    TokenValidationError,
    TransportError,
)
from .executor import HttpxRequestExecutor, RequestExecutor
from .lexoffice_client import (
    LexofficeClient,
    LexofficeConnectionBuilder,
    get_client,
    load_credentials,
    reset_client,
    set_client,
)
from .models import (
    Contact,
    ContactAddress,
    ContactType,
    Country,
    CreateResponse,
    CreditNote,
    DocumentFile,
    EventSubscription,
    EventType,
    Invoice,
    LineItem,
    Page,
    Payment,
    PaymentCondition,
    PaymentConditions,
    Quotation,
    ShippingConditions,
    TaxConditions,
    TaxType,
    TotalPrice,
    UnitPrice,
    VoucherListEntry,
    VoucherStatus,
    VoucherType,
)
from .rate_limiter import RateLimitPolicy, RateLimiter

__all__ = [
    "ApiError",
    "ClientNotInitializedError",
    "ConnectionConfig",
    "Contact",
    "ContactAddress",
    "ContactType",
    "Country",
    "CreateResponse",
    "CreditNote",
    "DeserializationError",
    "DocumentFile",
    "EventSubscription",
    "EventType",
    "HttpxRequestExecutor",
    "Invoice",
    "LexofficeClient",
    "LexofficeConnectionBuilder",
    "LexofficeError",
    "LineItem",
    "Page",
    "Payment",
    "PaymentCondition",
    "PaymentConditions",
    "ProxySettings",
    "Quotation",
    "RateLimitExceededError",
    "RateLimitPolicy",
    "RateLimiter",
    "RequestExecutor",
    "RequestTimeoutError",
    "SerializationError",
    "Settings",
    "ShippingConditions",
    "TaxConditions",
    "TaxType",
    "TokenValidationError",
    "TotalPrice",
    "TransportError",
    "UnitPrice",
    "VoucherListEntry",
    "VoucherStatus",
    "VoucherType",
    "get_client",
    "get_settings",
    "is_well_formed_token",
    "load_credentials",
    "reset_client",
    "set_client",
]
