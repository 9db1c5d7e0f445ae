"""Pydantic models for calcdesk API requests and responses."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


# --- Enums ---

class CountKind(str, Enum):
    PERMUTATION = "permutation"
    COMBINATION = "combination"


class UnitSystem(str, Enum):
    METRIC = "metric"
    IMPERIAL = "imperial"


class ExportFormat(str, Enum):
    JSON = "json"
    CSV = "csv"


# --- Formulas ---

class VariableInfo(BaseModel):
    name: str
    label: str
    unit: str
    description: str = ""


class FormulaInfo(BaseModel):
    name: str
    relation: str
    description: str
    category: str
    variables: list[VariableInfo]


class FormulaListResponse(BaseModel):
    formulas: list[FormulaInfo]
    total: int


class SolveRequest(BaseModel):
    """Solve one variable of a formula from the others."""
    solve_for: str = Field(..., description="Variable to solve for (e.g. 'current')")
    values: dict[str, Optional[float]] = Field(
        default_factory=dict,
        description="Known variable values; any value given for solve_for is ignored",
    )


class SolveResponse(BaseModel):
    formula: str
    solve_for: str
    value: float
    unit: str
    display: str


# --- Network ---

class SubnetRequest(BaseModel):
    ip_address: str = Field(..., min_length=7, max_length=64, description="Dotted-quad IPv4 address or a.b.c.d/p")
    cidr: Optional[int] = Field(None, ge=0, le=32, description="Prefix length; required unless ip_address carries /p")


class SubnetResponse(BaseModel):
    ip_address: str
    cidr: int
    subnet_mask: str
    wildcard_mask: str
    network_address: str
    broadcast_address: str
    host_range_start: str
    host_range_end: str
    total_hosts: int
    usable_hosts: int


# --- Finance ---

class PayoffRequest(BaseModel):
    balance: float = Field(..., gt=0, description="Outstanding balance")
    apr: float = Field(..., ge=0, le=100, description="Annual percentage rate (%)")
    monthly_payment: float = Field(..., gt=0, description="Fixed monthly payment")


class PayoffResponse(BaseModel):
    months_to_pay_off: int
    duration: str
    total_interest: float
    total_payment: float


class EMIRequest(BaseModel):
    principal: float = Field(..., gt=0, description="Loan amount")
    annual_rate: float = Field(..., ge=0, le=100, description="Annual interest rate (%)")
    term_months: int = Field(..., ge=1, le=1200, description="Loan term in months")


class EMIResponse(BaseModel):
    monthly_payment: float
    total_payment: float
    total_interest: float


class ScheduleRow(BaseModel):
    month: int
    payment: float
    interest: float
    principal: float
    balance: float


class ScheduleResponse(BaseModel):
    payoff: PayoffResponse
    schedule: list[ScheduleRow]


# --- Math ---

class CombinatoricsRequest(BaseModel):
    n: int = Field(..., ge=0, description="Total items")
    r: int = Field(..., ge=0, description="Items to choose")
    kind: CountKind = CountKind.COMBINATION


class CombinatoricsResponse(BaseModel):
    kind: CountKind
    n: int
    r: int
    result: float
    exact: str = Field(..., description="Exact integer count as a decimal string")


class QuadraticRequest(BaseModel):
    a: float
    b: float
    c: float


class ComplexValue(BaseModel):
    real: float
    imag: float


class QuadraticResponse(BaseModel):
    discriminant: float
    nature: str
    roots: list[ComplexValue]
    real_roots: list[float]


class DeterminantRequest(BaseModel):
    matrix: list[list[float]] = Field(..., min_length=2, max_length=3)


class DeterminantResponse(BaseModel):
    size: str
    determinant: float


# --- Agriculture ---

class FertilizerProduct(BaseModel):
    name: str = ""
    n: float = Field(0.0, ge=0, le=100, description="% nitrogen")
    p: float = Field(0.0, ge=0, le=100, description="% phosphorus")
    k: float = Field(0.0, ge=0, le=100, description="% potassium")


class FertilizerRequest(BaseModel):
    unit: UnitSystem = UnitSystem.METRIC
    area: float = Field(..., ge=0.01, description="Hectares (metric) or acres (imperial)")
    rec_n: float = Field(..., ge=0)
    rec_p: float = Field(..., ge=0)
    rec_k: float = Field(..., ge=0)
    fertilizers: list[FertilizerProduct] = Field(..., min_length=1)


class FertilizerAmountModel(BaseModel):
    name: str
    amount: float
    supplies: str


class FertilizerResponse(BaseModel):
    fertilizers: list[FertilizerAmountModel]
    unit: str
    residual: dict[str, float]
