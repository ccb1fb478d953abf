"""lexoffice API client with typed models and transparent pagination.

lexoffice is a German cloud accounting service. This client covers:
- Contacts: customer and vendor listing, single contact lookup
- Vouchers: invoices, quotations and credit notes (list, get, create)
- Payments: payment state of a voucher
- Files: render voucher PDFs, download and upload files
- Event subscriptions: webhooks for resource changes
- Lookups: countries and payment conditions

API Reference: https://developers.lexoffice.io/docs/
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Type,
    TypeVar,
    Union,
)
from uuid import UUID

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from .config import (
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT_MS,
    MIN_COOL_DOWN_MS,
    Settings,
    get_settings,
)
from .connection import ConnectionConfig, ProxySettings, is_well_formed_token
from .errors import (
    ApiError,
    ClientNotInitializedError,
    DeserializationError,
    LexofficeError,
    RequestTimeoutError,
    SerializationError,
    TokenValidationError,
)
from .executor import HttpxRequestExecutor, RequestExecutor
from .models import (
    Contact,
    ContactType,
    Country,
    CreateResponse,
    CreditNote,
    DocumentFile,
    EventSubscription,
    EventSubscriptionList,
    FileUploadResponse,
    Invoice,
    Page,
    Payment,
    PaymentCondition,
    Quotation,
    VoucherListEntry,
    VoucherStatus,
    VoucherType,
    to_api_json,
)
from .rate_limiter import RateLimitPolicy

logger = logging.getLogger(__name__)

CREDENTIALS_FILE = Path.home() / ".lexoffice_credentials.json"

M = TypeVar("M", bound=BaseModel)
ErrorHandler = Callable[[Exception], None]
VoucherRef = Union[UUID, str, VoucherListEntry]


def load_credentials(credentials_file: Optional[Path] = None) -> dict:
    """Load API key from credentials file."""
    path = credentials_file or CREDENTIALS_FILE
    if not path.exists():
        raise FileNotFoundError(f"Credentials file not found: {path}")
    return json.loads(path.read_text())


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _voucher_id(ref: VoucherRef) -> Union[UUID, str]:
    return ref.id if isinstance(ref, VoucherListEntry) else ref


class LexofficeClient:
    """Async lexoffice API client.

    Usage:
        async with LexofficeClient(access_token="...") as client:
            entries = await client.get_invoice_list(VoucherStatus.OPEN)
            invoices = await client.get_invoices(entries)

    Errors from API calls are raised. Token validation problems and
    connectivity probe failures are reported to the error handlers instead.
    """

    SUCCESS_STATUS_CODES = frozenset({200, 201})
    DEFAULT_PAGE_SIZE = 25

    def __init__(
        self,
        access_token: Optional[str] = None,
        config: Optional[ConnectionConfig] = None,
        executor: Optional[RequestExecutor] = None,
        error_handlers: Optional[Iterable[ErrorHandler]] = None,
    ) -> None:
        """Initialize client.

        Args:
            access_token: lexoffice public API key. Overrides config.access_token
            config: Connection configuration. Defaults to the public endpoint
            executor: Transport to use instead of the built-in httpx one
            error_handlers: Callables receiving non-raised errors
        """
        config = config or ConnectionConfig()
        if access_token is not None:
            config = config.with_changes(access_token=access_token)
        self._config = config

        self._executor = executor
        self._owns_executor = executor is None
        self._retired_executors: List[RequestExecutor] = []
        self._error_handlers: List[ErrorHandler] = list(error_handlers or [])

        self.is_online = False
        self.is_connecting = False
        self.is_access_token_valid = False
        self.is_initialized = config.access_token is not None
        if self.is_initialized:
            self._verify_access_token()

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "LexofficeClient":
        """Create client from LEXOFFICE_* environment settings."""
        return cls(config=ConnectionConfig.from_settings(settings or get_settings()))

    @classmethod
    def from_credentials(cls, credentials_file: Optional[Path] = None) -> "LexofficeClient":
        """Create client from credentials file.

        Args:
            credentials_file: Path to JSON file with api_key. Defaults to ~/.lexoffice_credentials.json
        """
        creds = load_credentials(credentials_file)
        api_key = creds.get("api_key")
        if not api_key:
            raise ValueError("No api_key found in credentials file")
        return cls(access_token=api_key)

    async def __aenter__(self) -> "LexofficeClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP transport(s)."""
        await self._close_retired()
        if self._executor is not None and self._owns_executor:
            await self._executor.aclose()
            self._executor = None

    # ==================== CONFIGURATION ====================

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def access_token(self) -> Optional[str]:
        return self._config.access_token

    @access_token.setter
    def access_token(self, token: Optional[str]) -> None:
        self.set_access_token(token)

    @property
    def default_timeout(self) -> int:
        """Per-call deadline in milliseconds."""
        return self._config.timeout_ms

    def set_access_token(self, token: Optional[str]) -> None:
        self._config = self._config.with_changes(access_token=token)
        self.is_initialized = token is not None
        self._verify_access_token()

    def set_timeout(self, timeout_ms: int) -> None:
        self._update_config(timeout_ms=timeout_ms)

    def set_proxy(self, proxy: Optional[ProxySettings]) -> None:
        """Route requests through ``proxy``; None disables the proxy."""
        self._update_config(proxy=proxy)

    def set_rate_limit(self, policy: Optional[RateLimitPolicy]) -> None:
        self._update_config(rate_limit=policy)

    def _update_config(self, **changes) -> None:
        new_config = self._config.with_changes(**changes)
        if self._config.transport_differs(new_config) and self._owns_executor:
            # The transport is rebuilt lazily from the new config
            if self._executor is not None:
                self._retired_executors.append(self._executor)
                self._executor = None
        self._config = new_config

    def _get_executor(self) -> RequestExecutor:
        if self._executor is None:
            self._executor = HttpxRequestExecutor(self._config)
        return self._executor

    async def _close_retired(self) -> None:
        while self._retired_executors:
            await self._retired_executors.pop().aclose()

    # ==================== ERROR HANDLERS ====================

    def add_error_handler(self, handler: ErrorHandler) -> None:
        self._error_handlers.append(handler)

    def remove_error_handler(self, handler: ErrorHandler) -> None:
        if handler in self._error_handlers:
            self._error_handlers.remove(handler)

    def _emit_error(self, error: Exception) -> None:
        """Report an error to the handlers without raising it."""
        logger.warning(f"lexoffice client error: {error}")
        for handler in list(self._error_handlers):
            try:
                handler(error)
            except Exception:
                logger.exception("lexoffice error handler failed")

    def _verify_access_token(self) -> None:
        try:
            valid = is_well_formed_token(
                self._config.access_token, self._config.access_token_pattern
            )
        except re.error as e:
            self.is_access_token_valid = False
            self._emit_error(TokenValidationError(f"Invalid access token pattern: {e}"))
            return

        self.is_access_token_valid = valid
        if not valid:
            self._emit_error(TokenValidationError("Access token is missing or malformed"))

    # ==================== REQUESTS ====================

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self._config.access_token or ''}"}

    @staticmethod
    def _serialize_body(body: Any) -> Any:
        if body is None:
            return None
        try:
            return to_api_json(body)
        except PydanticSerializationError as e:
            logger.error(f"lexoffice request body is not serializable: {e}")
            raise SerializationError(str(e)) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the error message of a lexoffice error body."""
        try:
            payload = response.json()
        except ValueError:
            return response.text[:200] or response.reason_phrase
        if isinstance(payload, dict):
            message = payload.get("message") or payload.get("error")
            issues = payload.get("IssueList") or payload.get("details")
            if message and issues:
                return f"{message} {issues}"
            if message:
                return str(message)
            if issues:
                return str(issues)
        return response.text[:200] or response.reason_phrase

    async def _send(
        self,
        path: str,
        method: str = "GET",
        *,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
        files: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        accept: Optional[str] = None,
        timeout: Optional[int] = None,
    ) -> httpx.Response:
        """Make an authenticated request and check the status.

        Args:
            path: API path relative to the versioned root (e.g. invoices/{id})
            method: HTTP method
            params: Query parameters
            body: Model or dict sent as JSON
            files: Multipart files
            data: Multipart form fields
            accept: Accept header override
            timeout: Deadline in milliseconds, defaults to the configured timeout

        Returns:
            The successful httpx response

        Raises:
            ApiError: Status other than 200/201 (204 for DELETE)
            TransportError: Network failure or expired deadline
            SerializationError: Body contains a value without a JSON form
        """
        await self._close_retired()

        headers = self._auth_headers()
        if accept:
            headers["Accept"] = accept
        timeout_ms = timeout if timeout is not None else self._config.timeout_ms

        logger.debug(f"lexoffice {method} {path} params={params}")
        response = await self._get_executor().send(
            method,
            path,
            headers=headers,
            params=params,
            json=self._serialize_body(body),
            files=files,
            data=data,
            timeout=timeout_ms / 1000,
        )

        accepted = self.SUCCESS_STATUS_CODES
        if method.upper() == "DELETE":
            accepted = accepted | {204}
        if response.status_code not in accepted:
            message = self._error_message(response)
            uri = str(response.request.url)
            logger.error(f"lexoffice API error: {response.status_code} {uri} - {message}")
            raise ApiError(response.status_code, message, uri)
        return response

    async def call(
        self,
        path: str,
        method: str = "GET",
        body: Any = None,
        params: Optional[Dict[str, Any]] = None,
        timeout: Optional[int] = None,
    ) -> str:
        """Generic request returning the raw JSON text of the response."""
        response = await self._send(path, method, params=params, body=body, timeout=timeout)
        return response.text

    @staticmethod
    def _parse(model: Any, response: httpx.Response) -> Any:
        """Deserialize a response body with a model class or TypeAdapter."""
        try:
            if isinstance(model, TypeAdapter):
                return model.validate_json(response.content)
            return model.model_validate_json(response.content)
        except ValidationError as e:
            name = getattr(model, "__name__", repr(model))
            logger.error(f"lexoffice response did not match {name}: {e}")
            raise DeserializationError(name, str(e), response.text) from e

    async def _get(self, path: str, model: Any, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._send(path, params=params)
        return self._parse(model, response)

    async def _get_optional(self, path: str, model: Type[M]) -> Optional[M]:
        """GET a single resource; None when it does not exist."""
        try:
            return await self._get(path, model)
        except ApiError as e:
            if e.is_not_found:
                logger.info(f"lexoffice resource not found: {path}")
                return None
            raise

    async def _get_many(
        self,
        fetch: Callable[[Union[UUID, str]], Awaitable[Optional[M]]],
        refs: Iterable[VoucherRef],
    ) -> List[M]:
        """Resolve ids one after another, skipping missing resources."""
        result: List[M] = []
        for ref in refs:
            item = await fetch(_voucher_id(ref))
            if item is not None:
                result.append(item)
        return result

    # ==================== PAGINATION ====================

    async def list_page(
        self,
        path: str,
        model: Type[M],
        params: Optional[Dict[str, Any]] = None,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
    ) -> Page[M]:
        """Fetch a single page of a list endpoint."""
        query = dict(params or {})
        query["page"] = page
        query["size"] = size
        return await self._get(path, Page[model], params=query)

    async def _collect_pages(
        self,
        path: str,
        model: Type[M],
        params: Optional[Dict[str, Any]] = None,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        pages: int = -1,
        cool_down: int = MIN_COOL_DOWN_MS,
    ) -> List[M]:
        """Fetch consecutive pages and concatenate their content.

        Args:
            path: List endpoint
            model: Model of the page items
            params: Filter query parameters
            page: First page to fetch (zero-based)
            size: Page size
            pages: Maximum number of pages to fetch, -1 for all
            cool_down: Pause between pages in ms (at least 20)

        Returns:
            Items of all fetched pages in API order
        """
        delay = max(cool_down, MIN_COOL_DOWN_MS) / 1000
        result: List[M] = []
        fetched = 0

        while True:
            current = await self.list_page(path, model, params, page=page, size=size)
            result.extend(current.content)
            fetched += 1

            if page >= current.total_pages - 1:
                break
            if pages > 0 and fetched >= pages:
                break

            page += 1
            await asyncio.sleep(delay)

        logger.debug(f"lexoffice {path}: {len(result)} items from {fetched} page(s)")
        return result

    # ==================== CONNECTIVITY ====================

    async def check_online(self, timeout: int = DEFAULT_TIMEOUT_MS) -> bool:
        """Probe the API root and update ``is_online``.

        A timeout leaves ``is_online`` unchanged. Any other failure sets it
        to False and is reported to the error handlers.

        Args:
            timeout: Deadline in milliseconds

        Returns:
            The resulting ``is_online`` value
        """
        if self.is_connecting:
            return self.is_online
        self.is_connecting = True

        url = self._config.root_url
        try:
            response = await self._get_executor().send("GET", url, timeout=timeout / 1000)
            if response.is_success:
                self.is_online = True
            else:
                self.is_online = False
                self._emit_error(ApiError(response.status_code, response.reason_phrase, url))
        except RequestTimeoutError:
            logger.debug(f"lexoffice online check timed out after {timeout}ms")
        except LexofficeError as e:
            self.is_online = False
            self._emit_error(e)
        finally:
            self.is_connecting = False

        return self.is_online

    # ==================== CONTACTS ====================

    async def get_contacts(
        self,
        contact_type: Union[ContactType, str] = ContactType.CUSTOMER,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        pages: int = -1,
        cool_down: int = MIN_COOL_DOWN_MS,
    ) -> List[Contact]:
        """List all customers or vendors."""
        params = {ContactType(contact_type).value: "true"}
        return await self._collect_pages(
            "contacts", Contact, params, page=page, size=size, pages=pages, cool_down=cool_down
        )

    async def get_contact(self, contact_id: Union[UUID, str]) -> Optional[Contact]:
        """Get a single contact by ID."""
        return await self._get_optional(f"contacts/{contact_id}", Contact)

    # ==================== VOUCHER LIST ====================

    async def get_voucher_list(
        self,
        voucher_type: Union[VoucherType, str],
        status: Union[VoucherStatus, str],
        archived: bool = False,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        pages: int = -1,
        cool_down: int = MIN_COOL_DOWN_MS,
    ) -> List[VoucherListEntry]:
        """List voucher ids and metadata filtered by type and status."""
        params = {
            "voucherType": VoucherType(voucher_type).value,
            "voucherStatus": VoucherStatus(status).value,
            "archived": _bool_param(archived),
        }
        return await self._collect_pages(
            "voucherlist", VoucherListEntry, params,
            page=page, size=size, pages=pages, cool_down=cool_down,
        )

    async def get_invoice_list(
        self,
        status: Union[VoucherStatus, str],
        archived: bool = False,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        pages: int = -1,
        cool_down: int = MIN_COOL_DOWN_MS,
    ) -> List[VoucherListEntry]:
        return await self.get_voucher_list(
            VoucherType.INVOICE, status, archived,
            page=page, size=size, pages=pages, cool_down=cool_down,
        )

    async def get_quotation_list(
        self,
        status: Union[VoucherStatus, str],
        archived: bool = False,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        pages: int = -1,
        cool_down: int = MIN_COOL_DOWN_MS,
    ) -> List[VoucherListEntry]:
        return await self.get_voucher_list(
            VoucherType.QUOTATION, status, archived,
            page=page, size=size, pages=pages, cool_down=cool_down,
        )

    async def get_credit_note_list(
        self,
        status: Union[VoucherStatus, str] = VoucherStatus.ANY,
        archived: bool = False,
        page: int = 0,
        size: int = DEFAULT_PAGE_SIZE,
        pages: int = -1,
        cool_down: int = MIN_COOL_DOWN_MS,
    ) -> List[VoucherListEntry]:
        return await self.get_voucher_list(
            VoucherType.CREDIT_NOTE, status, archived,
            page=page, size=size, pages=pages, cool_down=cool_down,
        )

    # ==================== INVOICES ====================

    async def get_invoice(self, invoice_id: Union[UUID, str]) -> Optional[Invoice]:
        """Get a single invoice by ID."""
        return await self._get_optional(f"invoices/{invoice_id}", Invoice)

    async def get_invoices(self, refs: Iterable[VoucherRef]) -> List[Invoice]:
        """Get several invoices by ID or voucherlist entry, in input order."""
        return await self._get_many(self.get_invoice, refs)

    async def create_invoice(
        self,
        invoice: Union[Invoice, Dict[str, Any]],
        finalize: bool = False,
    ) -> CreateResponse:
        """Create an invoice.

        Args:
            invoice: Invoice model or API dict
            finalize: Finalize immediately instead of creating a draft
        """
        response = await self._send(
            "invoices", "POST", params={"finalize": _bool_param(finalize)}, body=invoice
        )
        return self._parse(CreateResponse, response)

    async def render_document(self, invoice_id: Union[UUID, str]) -> DocumentFile:
        """Render the invoice PDF and return its file reference."""
        return await self._get(f"invoices/{invoice_id}/document", DocumentFile)

    # ==================== QUOTATIONS ====================

    async def get_quotation(self, quotation_id: Union[UUID, str]) -> Optional[Quotation]:
        """Get a single quotation by ID."""
        return await self._get_optional(f"quotations/{quotation_id}", Quotation)

    async def get_quotations(self, refs: Iterable[VoucherRef]) -> List[Quotation]:
        return await self._get_many(self.get_quotation, refs)

    # ==================== CREDIT NOTES ====================

    async def get_credit_note(self, credit_note_id: Union[UUID, str]) -> Optional[CreditNote]:
        """Get a single credit note by ID."""
        return await self._get_optional(f"creditnotes/{credit_note_id}", CreditNote)

    async def get_credit_notes(self, refs: Iterable[VoucherRef]) -> List[CreditNote]:
        return await self._get_many(self.get_credit_note, refs)

    async def create_credit_note(
        self,
        credit_note: Union[CreditNote, Invoice, Dict[str, Any]],
        finalize: bool = False,
    ) -> CreateResponse:
        """Create a credit note.

        An Invoice may be passed to correct it; its voucher fields are sent as is.
        """
        response = await self._send(
            "creditnotes", "POST", params={"finalize": _bool_param(finalize)}, body=credit_note
        )
        return self._parse(CreateResponse, response)

    # ==================== PAYMENTS ====================

    async def get_payments(self, voucher_id: Union[UUID, str]) -> Optional[Payment]:
        """Get the payment state of a voucher."""
        return await self._get_optional(f"payments/{voucher_id}", Payment)

    # ==================== FILES ====================

    async def get_file(self, file_id: Union[UUID, str]) -> bytes:
        """Download a file (e.g. a rendered voucher PDF)."""
        response = await self._send(f"files/{file_id}", accept="*/*")
        return response.content

    async def upload_file(
        self,
        content: bytes,
        filename: str,
        file_type: str = "voucher",
    ) -> FileUploadResponse:
        """Upload a bookkeeping document (PDF or image)."""
        response = await self._send(
            "files",
            "POST",
            files={"file": (filename, content)},
            data={"type": file_type},
        )
        return self._parse(FileUploadResponse, response)

    # ==================== EVENT SUBSCRIPTIONS ====================

    async def get_event_subscriptions(self) -> List[EventSubscription]:
        """List all event subscriptions of the organization."""
        result = await self._get("eventsubscriptions", EventSubscriptionList)
        return result.content

    async def get_event_subscription(
        self, subscription_id: Union[UUID, str]
    ) -> Optional[EventSubscription]:
        return await self._get_optional(f"eventsubscriptions/{subscription_id}", EventSubscription)

    async def create_event_subscription(
        self,
        subscription: Union[EventSubscription, Dict[str, Any]],
    ) -> CreateResponse:
        """Subscribe a callback URL to an event type."""
        response = await self._send("eventsubscriptions", "POST", body=subscription)
        return self._parse(CreateResponse, response)

    async def delete_event_subscription(self, subscription_id: Union[UUID, str]) -> bool:
        """Delete an event subscription."""
        await self._send(f"eventsubscriptions/{subscription_id}", "DELETE")
        return True

    # ==================== LOOKUPS ====================

    async def get_countries(self) -> List[Country]:
        return await self._get("countries", TypeAdapter(List[Country]))

    async def get_payment_conditions(self) -> List[PaymentCondition]:
        return await self._get("payment-conditions", TypeAdapter(List[PaymentCondition]))


# ==================== CONNECTION BUILDER ====================

@dataclass
class LexofficeConnectionBuilder:
    """Fluent builder for a configured LexofficeClient.

    Example:
        client = (
            LexofficeConnectionBuilder()
            .with_api_key("...")
            .with_timeout(5000)
            .with_rate_limiter(token_limit=2, tokens_per_period=2, replenishment_period=1)
            .build()
        )
    """
    web_address: Optional[str] = None
    api_key: Optional[str] = None
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    proxy: Optional[ProxySettings] = None
    rate_limit: Optional[RateLimitPolicy] = None
    error_handlers: List[ErrorHandler] = field(default_factory=list)

    def with_web_address(self, web_address: str = DEFAULT_BASE_URL) -> "LexofficeConnectionBuilder":
        self.web_address = web_address
        return self

    def with_api_key(self, api_key: str) -> "LexofficeConnectionBuilder":
        self.api_key = api_key
        return self

    def with_timeout(self, timeout: int = DEFAULT_TIMEOUT_MS) -> "LexofficeConnectionBuilder":
        """Set the per-call deadline in ms."""
        self.timeout_ms = timeout
        return self

    def with_rate_limiter(
        self,
        token_limit: int,
        tokens_per_period: int,
        replenishment_period: float,
        queue_limit: int = 1000,
    ) -> "LexofficeConnectionBuilder":
        """Limit requests with a token bucket.

        Args:
            token_limit: Maximum number of tokens in the bucket
            tokens_per_period: Tokens restored per replenishment
            replenishment_period: Seconds between replenishments
            queue_limit: Maximum number of waiting requests
        """
        self.rate_limit = RateLimitPolicy(
            token_limit=token_limit,
            tokens_per_period=tokens_per_period,
            replenishment_period=replenishment_period,
            queue_limit=queue_limit,
        )
        return self

    def with_proxy(
        self,
        address: str,
        port: int = 443,
        secure: bool = True,
        user: str = "",
        password: Optional[str] = None,
        use_default_credentials: bool = True,
    ) -> "LexofficeConnectionBuilder":
        self.proxy = ProxySettings(
            address=address,
            port=port,
            secure=secure,
            use_default_credentials=use_default_credentials,
            user=user,
            password=password,
        )
        return self

    def with_error_handler(self, handler: ErrorHandler) -> "LexofficeConnectionBuilder":
        self.error_handlers.append(handler)
        return self

    def build(self) -> LexofficeClient:
        config = ConnectionConfig(
            base_url=self.web_address or DEFAULT_BASE_URL,
            access_token=self.api_key,
            timeout_ms=self.timeout_ms,
            proxy=self.proxy,
            rate_limit=self.rate_limit,
        )
        return LexofficeClient(config=config, error_handlers=self.error_handlers)


# ==================== SHARED INSTANCE ====================

# Set once at application start, read from anywhere afterwards
_client: Optional[LexofficeClient] = None
_client_lock = threading.Lock()


def get_client() -> LexofficeClient:
    """Get the shared client instance.

    Raises:
        ClientNotInitializedError: If set_client() was not called yet
    """
    with _client_lock:
        if _client is None:
            raise ClientNotInitializedError("No shared lexoffice client, call set_client() first")
        return _client


def set_client(client: LexofficeClient) -> None:
    """Set the shared client instance."""
    global _client
    with _client_lock:
        _client = client


def reset_client() -> Optional[LexofficeClient]:
    """Clear the shared instance and return the previous one for closing."""
    global _client
    with _client_lock:
        previous, _client = _client, None
    return previous
