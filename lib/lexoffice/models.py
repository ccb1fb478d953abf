"""Typed models for lexoffice API resources.

Every model maps 1:1 to a JSON object of the public API. Attributes use
snake_case, the wire format uses camelCase:

    invoice = Invoice.from_api_dict(payload)
    invoice.total_price.total_gross_amount
    invoice.to_api_dict()  # {"totalPrice": {"totalGrossAmount": ...}, ...}

API Reference: https://developers.lexoffice.io/docs/
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, Generic, List, Optional, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel
from pydantic_core import to_jsonable_python


def format_timestamp(value: datetime) -> str:
    """Format a datetime as yyyy-MM-ddTHH:mm:ss.fff plus its offset.

    UTC is written as ``Z``, other offsets as ``+hh:mm``; naive values
    carry no suffix.
    """
    text = value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}"
    offset = value.utcoffset()
    if offset is None:
        return text
    if offset == timezone.utc.utcoffset(None):
        return text + "Z"
    total_minutes = int(offset.total_seconds() // 60)
    sign = "+" if total_minutes >= 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"


Timestamp = Annotated[
    datetime, PlainSerializer(format_timestamp, return_type=str, when_used="json")
]


# ==================== ENUMS ====================

class ContactType(str, Enum):
    """Role filter for the contacts endpoint."""
    CUSTOMER = "customer"
    VENDOR = "vendor"


class VoucherType(str, Enum):
    """Voucher kinds accepted by the voucherlist endpoint."""
    INVOICE = "invoice"
    QUOTATION = "quotation"
    CREDIT_NOTE = "creditnote"
    ORDER_CONFIRMATION = "orderconfirmation"
    DELIVERY_NOTE = "deliverynote"
    DOWN_PAYMENT_INVOICE = "downpaymentinvoice"
    SALES_INVOICE = "salesinvoice"
    SALES_CREDIT_NOTE = "salescreditnote"
    PURCHASE_INVOICE = "purchaseinvoice"
    PURCHASE_CREDIT_NOTE = "purchasecreditnote"


class VoucherStatus(str, Enum):
    """Voucher states used as voucherlist filter."""
    DRAFT = "draft"
    OPEN = "open"
    OVERDUE = "overdue"
    PAID = "paid"
    PAID_OFF = "paidoff"
    VOIDED = "voided"
    TRANSFERRED = "transferred"
    SEPA_DEBIT = "sepadebit"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    UNCHECKED = "unchecked"
    ANY = "any"


class TaxType(str, Enum):
    """Tax handling of a voucher."""
    NET = "net"
    GROSS = "gross"
    VAT_FREE = "vatfree"
    INTRA_COMMUNITY_SUPPLY = "intraCommunitySupply"
    CONSTRUCTION_SERVICE_13B = "constructionService13b"
    EXTERNAL_SERVICE_13B = "externalService13b"
    THIRD_PARTY_COUNTRY_SERVICE = "thirdPartyCountryService"
    THIRD_PARTY_COUNTRY_DELIVERY = "thirdPartyCountryDelivery"
    PHOTOVOLTAIC_EQUIPMENT = "photovoltaicEquipment"


class EventType:
    """Event names for event subscriptions."""
    CONTACT_CREATED = "contact.created"
    CONTACT_CHANGED = "contact.changed"
    CONTACT_DELETED = "contact.deleted"
    INVOICE_CREATED = "invoice.created"
    INVOICE_CHANGED = "invoice.changed"
    INVOICE_DELETED = "invoice.deleted"
    INVOICE_STATUS_CHANGED = "invoice.status.changed"
    CREDIT_NOTE_CREATED = "credit-note.created"
    CREDIT_NOTE_CHANGED = "credit-note.changed"
    CREDIT_NOTE_DELETED = "credit-note.deleted"
    CREDIT_NOTE_STATUS_CHANGED = "credit-note.status.changed"
    QUOTATION_CREATED = "quotation.created"
    QUOTATION_CHANGED = "quotation.changed"
    QUOTATION_DELETED = "quotation.deleted"
    QUOTATION_STATUS_CHANGED = "quotation.status.changed"
    PAYMENT_CHANGED = "payment.changed"
    TOKEN_REVOKED = "token.revoked"


# ==================== BASE ====================

class LexModel(BaseModel):
    """Base for all API models: camelCase aliases, unknown fields ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @classmethod
    def from_api_dict(cls, data: Dict[str, Any]):
        """Create from a lexoffice API response object."""
        return cls.model_validate(data)

    def to_api_dict(self) -> Dict[str, Any]:
        """Convert to lexoffice API format, omitting unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def to_api_json(value: Any) -> Any:
    """Convert a request body to JSON data in the API wire format.

    Models are dumped with their aliases, datetimes anywhere in plain
    dicts or lists get the millisecond timestamp format. Dict keys are
    sent as given.

    Raises:
        PydanticSerializationError: For values without a JSON form
    """
    if isinstance(value, LexModel):
        return value.to_api_dict()
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, dict):
        return {key: to_api_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_api_json(item) for item in value]
    return to_jsonable_python(value)


T = TypeVar("T")


class Page(LexModel, Generic[T]):
    """One page of a paginated list response.

    ``number`` is zero-based.
    """
    content: List[T] = Field(default_factory=list)
    number: int = 0
    total_pages: int = 0
    total_elements: Optional[int] = None
    size: Optional[int] = None
    first: Optional[bool] = None
    last: Optional[bool] = None
    number_of_elements: Optional[int] = None

    @property
    def current_page(self) -> int:
        return self.number

    @property
    def is_last(self) -> bool:
        """True when no further page follows this one."""
        return self.number >= self.total_pages - 1


# ==================== CONTACTS ====================

class ContactRole(LexModel):
    number: Optional[int] = None


class ContactRoles(LexModel):
    customer: Optional[ContactRole] = None
    vendor: Optional[ContactRole] = None


class ContactPerson(LexModel):
    salutation: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    primary: Optional[bool] = None
    email_address: Optional[str] = None
    phone_number: Optional[str] = None


class ContactCompany(LexModel):
    name: Optional[str] = None
    tax_number: Optional[str] = None
    vat_registration_id: Optional[str] = None
    allow_tax_free_invoices: Optional[bool] = None
    contact_persons: List[ContactPerson] = Field(default_factory=list)


class ContactPersonDetails(LexModel):
    salutation: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ContactAddress(LexModel):
    """Postal address, used by contacts and as voucher recipient."""
    contact_id: Optional[UUID] = None
    name: Optional[str] = None
    supplement: Optional[str] = None
    street: Optional[str] = None
    city: Optional[str] = None
    zip: Optional[str] = None
    country_code: Optional[str] = None


class ContactAddresses(LexModel):
    billing: List[ContactAddress] = Field(default_factory=list)
    shipping: List[ContactAddress] = Field(default_factory=list)


class ContactEmailAddresses(LexModel):
    business: List[str] = Field(default_factory=list)
    office: List[str] = Field(default_factory=list)
    private: List[str] = Field(default_factory=list)
    other: List[str] = Field(default_factory=list)


class ContactPhoneNumbers(LexModel):
    business: List[str] = Field(default_factory=list)
    office: List[str] = Field(default_factory=list)
    mobile: List[str] = Field(default_factory=list)
    private: List[str] = Field(default_factory=list)
    fax: List[str] = Field(default_factory=list)
    other: List[str] = Field(default_factory=list)


class Contact(LexModel):
    id: Optional[UUID] = None
    organization_id: Optional[UUID] = None
    version: Optional[int] = None
    roles: Optional[ContactRoles] = None
    company: Optional[ContactCompany] = None
    person: Optional[ContactPersonDetails] = None
    addresses: Optional[ContactAddresses] = None
    email_addresses: Optional[ContactEmailAddresses] = None
    phone_numbers: Optional[ContactPhoneNumbers] = None
    note: Optional[str] = None
    archived: Optional[bool] = None

    @property
    def display_name(self) -> str:
        if self.company and self.company.name:
            return self.company.name
        if self.person:
            return " ".join(p for p in (self.person.first_name, self.person.last_name) if p)
        return ""


# ==================== VOUCHERS ====================

class VoucherListEntry(LexModel):
    """Entry of the voucherlist endpoint: id plus metadata."""
    id: UUID
    voucher_type: Optional[str] = None
    voucher_status: Optional[str] = None
    voucher_number: Optional[str] = None
    voucher_date: Optional[Timestamp] = None
    created_date: Optional[Timestamp] = None
    updated_date: Optional[Timestamp] = None
    due_date: Optional[Timestamp] = None
    contact_id: Optional[UUID] = None
    contact_name: Optional[str] = None
    total_amount: Optional[float] = None
    open_amount: Optional[float] = None
    currency: Optional[str] = None
    archived: Optional[bool] = None


class UnitPrice(LexModel):
    currency: str = "EUR"
    net_amount: Optional[float] = None
    gross_amount: Optional[float] = None
    tax_rate_percentage: Optional[float] = None


class LineItem(LexModel):
    """Line item of a voucher (custom, material, service or text)."""
    id: Optional[UUID] = None
    type: str = "custom"
    name: str = ""
    description: Optional[str] = None
    quantity: Optional[float] = None
    unit_name: Optional[str] = None
    unit_price: Optional[UnitPrice] = None
    discount_percentage: Optional[float] = None
    line_item_amount: Optional[float] = None


class TotalPrice(LexModel):
    currency: str = "EUR"
    total_net_amount: Optional[float] = None
    total_gross_amount: Optional[float] = None
    total_tax_amount: Optional[float] = None
    total_discount_absolute: Optional[float] = None
    total_discount_percentage: Optional[float] = None


class TaxAmount(LexModel):
    tax_rate_percentage: Optional[float] = None
    tax_amount: Optional[float] = None
    net_amount: Optional[float] = None


class TaxConditions(LexModel):
    tax_type: TaxType = TaxType.NET
    tax_type_note: Optional[str] = None


class DiscountCondition(LexModel):
    discount_percentage: Optional[float] = None
    discount_range: Optional[int] = None


class PaymentConditions(LexModel):
    payment_term_label: Optional[str] = None
    payment_term_label_template: Optional[str] = None
    payment_term_duration: Optional[int] = None
    payment_discount_conditions: Optional[DiscountCondition] = None


class PaymentCondition(PaymentConditions):
    """Entry of the payment-conditions endpoint."""
    id: Optional[UUID] = None
    organization_default: Optional[bool] = None


class ShippingConditions(LexModel):
    shipping_date: Optional[Timestamp] = None
    shipping_end_date: Optional[Timestamp] = None
    shipping_type: Optional[str] = None


class DocumentFile(LexModel):
    """Reference to a rendered voucher PDF."""
    document_file_id: UUID


class Voucher(LexModel):
    """Fields shared by invoices, quotations and credit notes."""
    id: Optional[UUID] = None
    organization_id: Optional[UUID] = None
    created_date: Optional[Timestamp] = None
    updated_date: Optional[Timestamp] = None
    version: Optional[int] = None
    language: Optional[str] = None
    archived: Optional[bool] = None
    voucher_status: Optional[str] = None
    voucher_number: Optional[str] = None
    voucher_date: Optional[Timestamp] = None
    address: Optional[ContactAddress] = None
    line_items: List[LineItem] = Field(default_factory=list)
    total_price: Optional[TotalPrice] = None
    tax_amounts: List[TaxAmount] = Field(default_factory=list)
    tax_conditions: Optional[TaxConditions] = None
    payment_conditions: Optional[PaymentConditions] = None
    shipping_conditions: Optional[ShippingConditions] = None
    title: Optional[str] = None
    introduction: Optional[str] = None
    remark: Optional[str] = None
    files: Optional[DocumentFile] = None


class Invoice(Voucher):
    due_date: Optional[Timestamp] = None


class Quotation(Voucher):
    expiration_date: Optional[Timestamp] = None


class CreditNote(Voucher):
    pass


class CreateResponse(LexModel):
    """Answer of POST endpoints."""
    id: UUID
    resource_uri: Optional[str] = None
    created_date: Optional[Timestamp] = None
    updated_date: Optional[Timestamp] = None
    version: Optional[int] = None


# ==================== PAYMENTS ====================

class PaymentItem(LexModel):
    payment_item_type: Optional[str] = None
    posting_date: Optional[Timestamp] = None
    amount: Optional[float] = None
    currency: Optional[str] = None


class Payment(LexModel):
    open_amount: Optional[float] = None
    currency: Optional[str] = None
    payment_status: Optional[str] = None
    voucher_type: Optional[str] = None
    voucher_status: Optional[str] = None
    paid_date: Optional[Timestamp] = None
    payment_items: List[PaymentItem] = Field(default_factory=list)


# ==================== EVENT SUBSCRIPTIONS ====================

class EventSubscription(LexModel):
    subscription_id: Optional[UUID] = None
    organization_id: Optional[UUID] = None
    event_type: str
    callback_url: str
    created_date: Optional[Timestamp] = None


class EventSubscriptionList(LexModel):
    content: List[EventSubscription] = Field(default_factory=list)


# ==================== MISC ====================

class Country(LexModel):
    country_code: str
    country_name_de: Optional[str] = Field(default=None, alias="countryNameDE")
    country_name_en: Optional[str] = Field(default=None, alias="countryNameEN")
    tax_classification: Optional[str] = None


class FileUploadResponse(LexModel):
    id: UUID
