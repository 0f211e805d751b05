from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import date, datetime

Category = Literal["Studio", "IT", "ATK", "Furniture"]
Condition = Literal["Good", "Damaged"]
AssetStatus = Literal["Active", "Inactive"]
BorrowerRole = Literal["Student", "Teacher"]
LoanStatus = Literal["Borrowed", "Late", "Returned"]
MaintenanceStatus = Literal["In Progress", "Completed"]

CATEGORIES: tuple[str, ...] = ("Studio", "IT", "ATK", "Furniture")
OPEN_LOAN_STATUSES: tuple[str, ...] = ("Borrowed", "Late")

# ---------- Asset ----------
class AssetIn(BaseModel):
    name: str = Field(min_length=1)
    category: Category
    brand: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: int = Field(default=0, ge=0)
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    total_quantity: int = Field(ge=0)
    condition: Condition = "Good"
    status: AssetStatus = "Active"

class AssetUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    category: Optional[Category] = None
    brand: Optional[str] = None
    purchase_date: Optional[date] = None
    purchase_price: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    photo_url: Optional[str] = None
    total_quantity: Optional[int] = Field(default=None, ge=0)
    condition: Optional[Condition] = None
    status: Optional[AssetStatus] = None

class Asset(AssetIn):
    id: str
    available_quantity: int
    created_at: datetime
    updated_at: datetime

# ---------- Borrower ----------
class BorrowerIn(BaseModel):
    name: str = Field(min_length=1)
    role: BorrowerRole
    class_name: Optional[str] = None
    phone: Optional[str] = None

class BorrowerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    role: Optional[BorrowerRole] = None
    class_name: Optional[str] = None
    phone: Optional[str] = None

class Borrower(BorrowerIn):
    id: str
    created_at: datetime

# ---------- Loan ----------
class LoanIn(BaseModel):
    borrower_id: str
    asset_id: str
    quantity: int
    loan_date: date
    planned_return_date: date
    condition_on_loan: Condition = "Good"

class LoanReturn(BaseModel):
    return_date: date
    condition: Condition = "Good"

class Loan(BaseModel):
    id: str
    borrower_id: str
    asset_id: str
    quantity: int
    loan_date: date
    planned_return_date: date
    actual_return_date: Optional[date] = None
    condition_on_loan: Condition = "Good"
    condition_on_return: Optional[Condition] = None
    status: LoanStatus = "Borrowed"
    created_at: datetime
    updated_at: datetime

class LoanDetail(Loan):
    borrower_name: Optional[str] = None
    borrower_class: Optional[str] = None
    borrower_role: Optional[BorrowerRole] = None
    asset_name: Optional[str] = None

# ---------- Maintenance ----------
class MaintenanceIn(BaseModel):
    asset_id: str
    maintenance_date: date
    technician: Optional[str] = None
    estimated_cost: int = Field(default=0, ge=0)
    status: MaintenanceStatus = "In Progress"
    notes: Optional[str] = None

class MaintenanceUpdate(BaseModel):
    maintenance_date: Optional[date] = None
    technician: Optional[str] = None
    estimated_cost: Optional[int] = Field(default=None, ge=0)
    status: Optional[MaintenanceStatus] = None
    notes: Optional[str] = None

class Maintenance(BaseModel):
    id: str
    asset_id: str
    loan_id: Optional[str] = None
    maintenance_date: date
    technician: Optional[str] = None
    estimated_cost: int = 0
    status: MaintenanceStatus = "In Progress"
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

class MaintenanceDetail(Maintenance):
    asset_name: Optional[str] = None
    asset_category: Optional[Category] = None

# ---------- Dashboard / reports ----------
class CategoryUnits(BaseModel):
    category: Category
    units: int

class MonthlyLoans(BaseModel):
    month: str  # YYYY-MM
    count: int

class DashboardStats(BaseModel):
    total_units: int
    available_units: int
    borrowed_units: int
    late_loans: int
    maintenance_in_progress: int
    units_by_category: list[CategoryUnits]
    loans_by_month: list[MonthlyLoans]
    active_loans: list[LoanDetail]
    recent_assets: list[Asset]

class InventoryDiscrepancy(BaseModel):
    asset_id: str
    asset_name: str
    total_quantity: int
    available_quantity: int
    on_loan: int
    expected_available: int

class AssetReportRow(BaseModel):
    name: str
    category: Category
    brand: Optional[str] = None
    total_quantity: int
    available_quantity: int
    condition: Condition
    status: AssetStatus
    purchase_price: int

class LoanReportRow(BaseModel):
    borrower: str
    asset: str
    quantity: int
    loan_date: date
    planned_return_date: date
    actual_return_date: Optional[date] = None
    condition_on_return: Optional[Condition] = None
    status: LoanStatus

class MaintenanceReportRow(BaseModel):
    asset: str
    maintenance_date: date
    technician: Optional[str] = None
    estimated_cost: int
    status: MaintenanceStatus
    notes: Optional[str] = None

# ---------- Auth ----------
class LoginIn(BaseModel):
    username: str
    password: str

class SessionOut(BaseModel):
    token: str
    username: str
    role: Literal["admin", "student"]
