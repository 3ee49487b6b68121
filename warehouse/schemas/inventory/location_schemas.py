from pydantic import BaseModel
from typing import Optional


class LocationFields(BaseModel):
    # Blank values are rejected by the location registry, not here.
    building_number: str = ""
    location: str = ""
    pincode: str = ""
    phone: str = ""


class LocationSnapshot(LocationFields):
    id: Optional[str] = None
    merchant_id: Optional[str] = None


class LocationOut(LocationFields):
    id: str
    merchant_id: str

    class Config:
        from_attributes = True
