"""Request and response records exchanged with JWNET.

Field names follow the upstream camelCase wire format through aliases.
Unknown fields are kept as extras so records round-trip unchanged.
"""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class JwnetModel(BaseModel):
    """Base model for JWNET wire records."""

    model_config = ConfigDict(
        frozen=True,
        extra="allow",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the request body.

        Returns:
            JSON-compatible dict using wire names, without unset optionals.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ManifestType(str, Enum):
    """Manifest category."""

    INDUSTRIAL = "INDUSTRIAL"
    SPECIAL = "SPECIAL"


class ManifestStatus(str, Enum):
    """Lifecycle status of a registered manifest."""

    DRAFT = "DRAFT"
    REGISTERED = "REGISTERED"
    IN_TRANSIT = "IN_TRANSIT"
    ARRIVED = "ARRIVED"
    DISPOSED = "DISPOSED"
    CANCELLED = "CANCELLED"
    ERROR = "ERROR"


class JwnetCompany(JwnetModel):
    """A business party on a manifest (emitter, transporter or disposer)."""

    subscriber_no: str
    public_confirm_no: str
    name: str
    postal_code: str
    address: str
    phone_number: str | None = None
    fax_number: str | None = None


class WasteInfo(JwnetModel):
    """One waste line on a manifest."""

    waste_code: str
    waste_name: str
    quantity: Annotated[float, Field(ge=0)]
    unit: str
    packaging_type: str | None = None


class ManifestRegisterRequest(JwnetModel):
    """Body of POST /manifest/register."""

    manifest_type: ManifestType
    issued_date: str
    emitter: JwnetCompany
    transporter: JwnetCompany
    disposer: JwnetCompany
    wastes: Annotated[list[WasteInfo], Field(min_length=1)]
    transport_end_date: str | None = None
    disposal_end_date: str | None = None
    remarks: str | None = None


# Well-formed nested records parse into models, anything else stays raw dicts
LenientCompany = Annotated[
    JwnetCompany | dict[str, Any] | None, Field(union_mode="left_to_right")
]
LenientWastes = Annotated[
    list[WasteInfo] | list[dict[str, Any]] | None,
    Field(union_mode="left_to_right"),
]


class JwnetResponse(JwnetModel):
    """Base model for 2xx bodies.

    The upstream owns these records, so parsing is lenient: numbers are
    accepted where strings are expected, unknown enum values stay plain
    strings and nested records that do not fit their model stay raw dicts.
    """

    model_config = ConfigDict(coerce_numbers_to_str=True)


class ManifestRegisterResponse(JwnetResponse):
    """Success body of POST /manifest/register."""

    success: bool | None = None
    manifest_no: str | None = None
    receipt_no: str | None = None
    error_message: str | None = None
    error_code: str | None = None


class ReservationRequest(JwnetModel):
    """Body of POST /reservation/create."""

    subscriber_no: str
    public_confirm_no: str
    count: Annotated[int, Field(ge=1)]


class ReservationResponse(JwnetResponse):
    """Success body of POST /reservation/create."""

    success: bool | None = None
    reservation_nos: list[str] | None = None
    error_message: str | None = None
    error_code: str | None = None


class ManifestInquiryRequest(JwnetModel):
    """Body of POST /manifest/inquiry."""

    manifest_no: str
    subscriber_no: str


class ManifestInquiryResponse(JwnetResponse):
    """Success body of POST /manifest/inquiry."""

    success: bool | None = None
    manifest_no: str | None = None
    status: Annotated[
        ManifestStatus | str | None, Field(union_mode="left_to_right")
    ] = None
    issued_date: str | None = None
    transport_end_date: str | None = None
    disposal_end_date: str | None = None
    emitter: LenientCompany = None
    transporter: LenientCompany = None
    disposer: LenientCompany = None
    wastes: LenientWastes = None
    error_message: str | None = None
    error_code: str | None = None
