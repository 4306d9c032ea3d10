"""DTOs for the open RSVP form used by guests without an invitation token."""

import json
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GeneralRSVPRequest(BaseModel):
    """Request body for the open RSVP form."""

    model_config = ConfigDict(populate_by_name=True)

    contact_name: str = Field(alias="contactName")
    contact_phone: str = Field(alias="contactPhone")
    adults: list[str]
    children: list[str] = []
    note: str = ""

    @field_validator("contact_name")
    @classmethod
    def contact_name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Por favor ingresa el nombre del contacto principal.")
        return v

    @field_validator("contact_phone")
    @classmethod
    def phone_digits_only(cls, v: str) -> str:
        digits = re.sub(r"\D+", "", v)
        if not digits:
            raise ValueError("Necesitamos un número de contacto para confirmar.")
        return digits

    @field_validator("adults")
    @classmethod
    def at_least_one_adult(cls, v: list[str]) -> list[str]:
        names = [name.strip() for name in v if name.strip()]
        if not names:
            raise ValueError("Agrega al menos un adulto en la lista de invitados.")
        return names

    @field_validator("children")
    @classmethod
    def drop_blank_children(cls, v: list[str]) -> list[str]:
        return [name.strip() for name in v if name.strip()]

    def to_row(self, received_at: str) -> dict:
        members = [{"name": name, "type": "adult"} for name in self.adults] + [
            {"name": name, "type": "child"} for name in self.children
        ]
        note = {
            "comment": self.note.strip(),
            "members": members,
            "adultsCount": len(self.adults),
            "childrenCount": len(self.children),
        }
        return {
            "contactName": self.contact_name,
            "contactPhone": self.contact_phone,
            "answer": "SI",
            "guests": len(members),
            "members": members,
            "note": json.dumps(note, ensure_ascii=False, separators=(",", ":")),
            "receivedAt": received_at,
        }


class GeneralRSVPResponse(BaseModel):
    """Response for an accepted open RSVP."""

    message: str
    guests: int
