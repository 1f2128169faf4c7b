from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class VehicleDetails(BaseModel):
    make: str
    model: str
    year: int
    color: str


class Repair(BaseModel):
    id: str
    service: str
    parts: List[str] = Field(default_factory=list)
    cost: float
    technician: str
    status: Literal["completed", "in-progress", "pending"]
    timestamp: str
    invoice_number: str
    vehicle_details: Optional[VehicleDetails] = None


class ServiceVisit(BaseModel):
    date: str
    visit_number: int
    total_cost: float
    repairs: List[Repair] = Field(default_factory=list)


class HistorySummary(BaseModel):
    total_visits: int
    total_spent: float
    total_services: int


class ExtractRequest(BaseModel):
    text: str


class ExtractResult(BaseModel):
    plate: Optional[str] = None
    rule: Optional[str] = None


class ScanResult(BaseModel):
    plate: Optional[str] = None
    rule: Optional[str] = None
    ocr_text: str
    crop_width: int
    crop_height: int
    history: List[ServiceVisit] = Field(default_factory=list)
    summary: HistorySummary


class HistoryResult(BaseModel):
    plate: str
    history: List[ServiceVisit]
    summary: HistorySummary
