"""JWNET wire records."""

from jwnet.models.manifest import (
    JwnetCompany,
    JwnetModel,
    ManifestInquiryRequest,
    ManifestInquiryResponse,
    ManifestRegisterRequest,
    ManifestRegisterResponse,
    ManifestStatus,
    ManifestType,
    ReservationRequest,
    ReservationResponse,
    WasteInfo,
)


__all__ = [
    "JwnetCompany",
    "JwnetModel",
    "ManifestInquiryRequest",
    "ManifestInquiryResponse",
    "ManifestRegisterRequest",
    "ManifestRegisterResponse",
    "ManifestStatus",
    "ManifestType",
    "ReservationRequest",
    "ReservationResponse",
    "WasteInfo",
]
