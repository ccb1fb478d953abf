"""Tests for the API models and their wire format."""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import pytest

from lexoffice import (
    ContactAddress,
    Country,
    Invoice,
    LineItem,
    Page,
    PaymentConditions,
    ShippingConditions,
    TaxConditions,
    TaxType,
    TotalPrice,
    UnitPrice,
    VoucherListEntry,
)
from lexoffice.models import Contact, DiscountCondition, DocumentFile, TaxAmount, format_timestamp

CET = timezone(timedelta(hours=1))


@pytest.fixture
def full_invoice() -> Invoice:
    """Invoice with every field populated."""
    voucher_date = datetime(2024, 3, 1, 9, 30, 15, 123000, tzinfo=CET)
    return Invoice(
        id=UUID("e9066f04-8cc7-4616-93f8-ac9ecc8479c8"),
        organization_id=UUID("aa93e8a8-2aa3-470b-b914-caad8a255dd8"),
        created_date=voucher_date,
        updated_date=datetime(2024, 3, 2, 8, 0, 0, tzinfo=timezone.utc),
        version=2,
        language="de",
        archived=False,
        voucher_status="open",
        voucher_number="RE1019",
        voucher_date=voucher_date,
        due_date=voucher_date + timedelta(days=30),
        address=ContactAddress(
            contact_id=UUID("97c5794f-8ab2-43ad-b459-c5980b055e4d"),
            name="Bike & Ride GmbH & Co. KG",
            supplement="Gebäude 10",
            street="Musterstraße 42",
            city="Freiburg",
            zip="79112",
            country_code="DE",
        ),
        line_items=[
            LineItem(
                id=UUID("97b98491-e953-4dc9-97a9-ae437a8052b4"),
                type="material",
                name="Abus Kabelschloss Primo 590",
                description="· 9,5 mm starkes, smoke-mattes Spiralkabel",
                quantity=2,
                unit_name="Stück",
                unit_price=UnitPrice(
                    currency="EUR",
                    net_amount=13.4,
                    gross_amount=15.95,
                    tax_rate_percentage=19,
                ),
                discount_percentage=50,
                line_item_amount=13.4,
            )
        ],
        total_price=TotalPrice(
            currency="EUR",
            total_net_amount=13.4,
            total_gross_amount=15.95,
            total_tax_amount=2.55,
            total_discount_absolute=0,
            total_discount_percentage=0,
        ),
        tax_amounts=[TaxAmount(tax_rate_percentage=19, tax_amount=2.55, net_amount=13.4)],
        tax_conditions=TaxConditions(tax_type=TaxType.NET, tax_type_note="net"),
        payment_conditions=PaymentConditions(
            payment_term_label="10 Tage - 3 %, 30 Tage netto",
            payment_term_label_template="10 Tage - 3 %, 30 Tage netto",
            payment_term_duration=30,
            payment_discount_conditions=DiscountCondition(discount_percentage=3, discount_range=10),
        ),
        shipping_conditions=ShippingConditions(
            shipping_date=voucher_date,
            shipping_end_date=voucher_date + timedelta(days=1),
            shipping_type="delivery",
        ),
        title="Rechnung",
        introduction="Wir stellen Ihnen hiermit folgende Leistungen in Rechnung.",
        remark="Vielen Dank für Ihren Einkauf",
        files=DocumentFile(document_file_id=UUID("75c6ea3e-9b4c-4b70-8a48-3a0dd8e0b7d5")),
    )


class TestInvoiceRoundTrip:
    def test_serialize_then_parse_is_equal(self, full_invoice: Invoice):
        assert Invoice.from_api_dict(full_invoice.to_api_dict()) == full_invoice

    def test_json_round_trip_is_equal(self, full_invoice: Invoice):
        text = full_invoice.model_dump_json(by_alias=True, exclude_none=True)

        assert Invoice.model_validate_json(text) == full_invoice

    def test_wire_names_are_camel_case(self, full_invoice: Invoice):
        data = full_invoice.to_api_dict()

        assert data["voucherNumber"] == "RE1019"
        assert data["address"]["countryCode"] == "DE"
        assert data["lineItems"][0]["unitPrice"]["taxRatePercentage"] == 19
        assert data["paymentConditions"]["paymentDiscountConditions"]["discountRange"] == 10
        assert data["taxConditions"]["taxType"] == "net"
        assert data["files"]["documentFileId"] == "75c6ea3e-9b4c-4b70-8a48-3a0dd8e0b7d5"

    def test_timestamps_use_millisecond_format(self, full_invoice: Invoice):
        data = full_invoice.to_api_dict()

        assert data["voucherDate"] == "2024-03-01T09:30:15.123+01:00"
        assert data["updatedDate"] == "2024-03-02T08:00:00.000Z"

    def test_unset_fields_are_omitted(self):
        data = Invoice(title="Entwurf").to_api_dict()

        assert "voucherNumber" not in data
        assert "address" not in data
        assert data["title"] == "Entwurf"


class TestFormatTimestamp:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (datetime(2024, 1, 2, 3, 4, 5), "2024-01-02T03:04:05.000"),
            (datetime(2024, 1, 2, 3, 4, 5, 987654, tzinfo=timezone.utc), "2024-01-02T03:04:05.987Z"),
            (
                datetime(2024, 7, 1, 12, 0, tzinfo=timezone(timedelta(hours=2))),
                "2024-07-01T12:00:00.000+02:00",
            ),
            (
                datetime(2024, 7, 1, 12, 0, tzinfo=timezone(timedelta(hours=-3, minutes=-30))),
                "2024-07-01T12:00:00.000-03:30",
            ),
        ],
    )
    def test_format(self, value, expected):
        assert format_timestamp(value) == expected


class TestParsing:
    def test_unknown_fields_are_ignored(self):
        entry = VoucherListEntry.from_api_dict(
            {"id": "e9066f04-8cc7-4616-93f8-ac9ecc8479c8", "somethingNew": 1}
        )

        assert entry.id == UUID("e9066f04-8cc7-4616-93f8-ac9ecc8479c8")
        assert entry.voucher_number is None

    def test_page_of_entries(self):
        page = Page[VoucherListEntry].model_validate(
            {
                "content": [{"id": "e9066f04-8cc7-4616-93f8-ac9ecc8479c8"}],
                "number": 2,
                "totalPages": 3,
            }
        )

        assert page.current_page == 2
        assert page.is_last
        assert isinstance(page.content[0], VoucherListEntry)

    def test_country_keeps_upper_case_suffix(self):
        country = Country.from_api_dict(
            {"countryCode": "AT", "countryNameDE": "Österreich", "countryNameEN": "Austria"}
        )

        assert country.country_name_en == "Austria"
        assert country.to_api_dict()["countryNameDE"] == "Österreich"

    def test_contact_display_name(self):
        company = Contact.from_api_dict({"company": {"name": "Bike & Ride GmbH & Co. KG"}})
        person = Contact.from_api_dict({"person": {"firstName": "Inge", "lastName": "Musterfrau"}})

        assert company.display_name == "Bike & Ride GmbH & Co. KG"
        assert person.display_name == "Inge Musterfrau"
