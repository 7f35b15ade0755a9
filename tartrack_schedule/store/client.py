"""HTTP client for the driver schedule REST endpoints."""

from typing import Any, Optional, Type, TypeVar, Union

import httpx
from pydantic import BaseModel, ValidationError

from tartrack_schedule.config import ApiConfig, settings
from tartrack_schedule.logging_context import get_driver_logger
from tartrack_schedule.schemas.availability_schema import AvailabilityRecord, AvailabilityUpdate
from tartrack_schedule.schemas.booking_schema import AvailabilityCheck, BookingRecord
from tartrack_schedule.utils import to_date_key

logger = get_driver_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

CALENDAR_PATH = "/driver-schedule/calendar/{driver_id}/"
SCHEDULE_PATH = "/driver-schedule/schedule/{driver_id}/"
SET_AVAILABILITY_PATH = "/driver-schedule/set-availability/"
CHECK_AVAILABILITY_PATH = "/driver-schedule/check-availability/"
ACCEPT_BOOKING_PATH = "/driver-schedule/accept-booking/"


class NetworkError(Exception):
    """Base error for failed or timed out schedule requests."""


class RequestTimeoutError(NetworkError):
    """Raised when a request times out on both attempts."""


class StoreResponseError(NetworkError):
    """Raised when the backend answers with an error status or ``success: false``."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


def _parse_records(items: Any, model: Type[ModelT], label: str) -> list[ModelT]:
    """Validate each record once, skipping the ones that do not parse."""
    if items is None:
        return []
    if not isinstance(items, list):
        raise StoreResponseError(f"{label}: expected a list, got {type(items).__name__}")
    records: list[ModelT] = []
    for raw in items:
        try:
            records.append(model.model_validate(raw))
        except ValidationError as exc:
            logger.warning("Skipping invalid %s record %r: %s", label, raw, exc.errors()[0]["msg"])
    return records


class ScheduleStore:
    """Async client for the schedule backend.

    Every request is sent with the configured timeout and, if that times
    out, retried once with the longer retry timeout.
    """

    def __init__(
        self,
        config: Optional[ApiConfig] = None,
        http: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or settings.api
        self.http = http or httpx.AsyncClient(base_url=self.config.base_url)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "ScheduleStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        return headers

    async def _attempt(
        self,
        method: str,
        path: str,
        timeout: float,
        params: Optional[dict[str, Any]],
        json: Optional[dict[str, Any]],
    ) -> httpx.Response:
        try:
            return await self.http.request(
                method,
                path,
                params=params,
                json=json,
                headers=self._headers(),
                timeout=timeout,
            )
        except httpx.TimeoutException:
            raise
        except httpx.HTTPError as exc:
            raise NetworkError(f"Request to {path} failed: {exc}") from exc

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        first, retry = self.config.request_timeout_sec, self.config.retry_timeout_sec
        try:
            return await self._attempt(method, path, first, params, json)
        except httpx.TimeoutException:
            logger.info("Request to %s timed out after %ss, retrying with %ss", path, first, retry)

        try:
            return await self._attempt(method, path, retry, params, json)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(f"Request to {path} timed out after {retry}s") from exc

    async def call(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
    ) -> Any:
        """Send a request and unwrap the ``{success, data, error}`` envelope."""
        response = await self._send(method, path, params=params, json=json)

        if response.status_code >= 400:
            raise StoreResponseError(
                f"{method} {path} failed with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise StoreResponseError(
                f"{method} {path} returned a non-JSON body", status_code=response.status_code
            ) from exc

        if isinstance(body, dict) and "success" in body:
            if not body["success"]:
                raise StoreResponseError(
                    body.get("error") or f"{method} {path} was not successful",
                    status_code=response.status_code,
                )
            return body.get("data", body)
        return body

    @staticmethod
    def _window(date_from, date_to) -> dict[str, str]:
        params = {}
        if date_from:
            params["date_from"] = to_date_key(date_from)
        if date_to:
            params["date_to"] = to_date_key(date_to)
        return params

    async def get_calendar(
        self, driver_id: Union[int, str], date_from=None, date_to=None
    ) -> list[BookingRecord]:
        """Bookings on a driver's calendar between two dates, inclusive."""
        data = await self.call(
            "GET",
            CALENDAR_PATH.format(driver_id=driver_id),
            params=self._window(date_from, date_to),
        )
        bookings = _parse_records(data, BookingRecord, "booking")
        logger.debug("Fetched %d booking(s) for driver %s", len(bookings), driver_id)
        return bookings

    async def get_schedule(
        self, driver_id: Union[int, str], date_from=None, date_to=None
    ) -> list[AvailabilityRecord]:
        """Declared availability for a driver between two dates, inclusive."""
        data = await self.call(
            "GET",
            SCHEDULE_PATH.format(driver_id=driver_id),
            params=self._window(date_from, date_to),
        )
        records = _parse_records(data, AvailabilityRecord, "availability")
        logger.debug("Fetched %d availability record(s) for driver %s", len(records), driver_id)
        return records

    async def set_availability(self, update: AvailabilityUpdate) -> Any:
        result = await self.call("POST", SET_AVAILABILITY_PATH, json=update.model_dump())
        logger.info(
            "Availability saved for %s (available=%s, %d unavailable)",
            update.date, update.is_available, len(update.unavailable_times),
        )
        return result

    async def check_availability(
        self, driver_id: Union[int, str], booking_date, booking_time: str
    ) -> AvailabilityCheck:
        """Ask the backend whether a driver can take a booking at a given time."""
        data = await self.call(
            "POST",
            CHECK_AVAILABILITY_PATH,
            json={
                "driver_id": driver_id,
                "booking_date": to_date_key(booking_date),
                "booking_time": booking_time,
            },
        )
        return AvailabilityCheck.model_validate(data or {})

    async def accept_booking(
        self,
        driver_id: Union[int, str],
        booking_id: Union[int, str],
        booking_date,
        booking_time: str,
        package_name: str = "",
        customer_name: str = "",
    ) -> Any:
        """Accept a booking and add it to the driver's calendar."""
        return await self.call(
            "POST",
            ACCEPT_BOOKING_PATH,
            json={
                "driver_id": driver_id,
                "booking_id": booking_id,
                "booking_date": to_date_key(booking_date),
                "booking_time": booking_time,
                "package_name": package_name,
                "customer_name": customer_name,
            },
        )
