"""Registration certificate (RC) record model."""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import field_validator

from rclookup.models._base import RcBaseModel

# Envelope keys some RC services wrap the record in.
_ENVELOPE_KEYS: tuple[str, ...] = ("data", "result", "rcData")


class RcRecord(RcBaseModel):
    """Fields of a vehicle registration certificate.

    Every field is optional: the upstream service is untrusted and may
    omit anything.  Renderers substitute a placeholder for ``None``.
    """

    # Alternative upstream key names (vahan-style payloads).
    _KEY_ALIASES: ClassVar[dict[str, str]] = {
        "regNo": "vehicleNumber",
        "vrn": "vehicleNumber",
        "chassisNo": "chassisNumber",
        "engineNo": "engineNumber",
        "maker": "manufacturer",
        "makerModal": "model",
        "regDate": "registrationDate",
        "insUpto": "insuranceValidTill",
        "rto": "rtoOffice",
        "permanentAddress": "ownerAddress",
        "presentAddress": "ownerAddress",
    }

    vehicle_number: str | None = None
    """Registration number as printed by the issuing office."""
    owner_name: str | None = None
    vehicle_class: str | None = None
    """Vehicle class (e.g. ``"Motor Car(LMV)"``)."""
    fuel_type: str | None = None
    chassis_number: str | None = None
    engine_number: str | None = None
    manufacturer: str | None = None
    model: str | None = None
    registration_date: str | None = None
    """Registration date as sent by the service (ISO or ``dd-mm-yyyy``)."""
    insurance_valid_till: str | None = None
    rto_office: str | None = None
    """Issuing regional transport office."""
    owner_address: str | None = None

    @field_validator(
        "vehicle_number",
        "owner_name",
        "vehicle_class",
        "fuel_type",
        "chassis_number",
        "engine_number",
        "manufacturer",
        "model",
        "registration_date",
        "insurance_valid_till",
        "rto_office",
        "owner_address",
        mode="before",
    )
    @classmethod
    def _coerce_str(cls, value: Any) -> str | None:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            text = value.strip()
            return text or None
        # Nested objects/lists are not part of the record shape.
        return None

    @property
    def is_empty(self) -> bool:
        """Whether no RC field is populated."""
        return all(getattr(self, name) is None for name in self.field_names())

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(name for name in cls.model_fields if name != "raw")

    @classmethod
    def from_payload(cls, payload: Any) -> RcRecord:
        """Build a record from a service response, unwrapping a ``data`` envelope."""
        if not isinstance(payload, dict):
            raise ValueError(f"RC payload must be an object, got {type(payload).__name__}")
        for key in _ENVELOPE_KEYS:
            nested = payload.get(key)
            if isinstance(nested, dict):
                return cls.model_validate(nested)
        return cls.model_validate(payload)

    def to_storage(self) -> dict[str, Any]:
        """Payload persisted in the record cache: populated RC fields, camelCase.

        Upstream keys outside the record shape (extra personal data such as
        ``fatherName`` or ``mobileNo``) are not persisted.
        """
        return self.model_dump(by_alias=True, exclude={"raw"}, exclude_none=True)


# Fixed preview record: shown without a fetch, a charge or a cache write.
SAMPLE_RECORD = RcRecord.model_validate(
    {
        "vehicleNumber": "TN01AB1234",
        "ownerName": "RAJESH KUMAR",
        "vehicleClass": "MCWG (Motor Cycle With Gear)",
        "fuelType": "PETROL",
        "chassisNumber": "ME4JF48DXJK123456",
        "engineNumber": "JF48DFH123456",
        "manufacturer": "BAJAJ AUTO LTD",
        "model": "PULSAR 150",
        "registrationDate": "2023-01-15",
        "insuranceValidTill": "2024-12-31",
        "rtoOffice": "RTO CHENNAI CENTRAL",
        "ownerAddress": "No.45, Gandhi Street, T.Nagar, Chennai - 600017, Tamil Nadu",
    }
)
