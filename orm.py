from datetime import date, datetime
from sqlalchemy import CheckConstraint, String, Date, DateTime, Text, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from db import Base

class AssetORM(Base):
    __tablename__ = "assets"
    __table_args__ = (
        CheckConstraint("total_quantity >= 0", name="ck_assets_total_non_negative"),
        CheckConstraint(
            "available_quantity >= 0 AND available_quantity <= total_quantity",
            name="ck_assets_available_in_range",
        ),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    category: Mapped[str] = mapped_column(String, nullable=False, index=True)
    brand: Mapped[str | None] = mapped_column(String, nullable=True)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    purchase_price: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    total_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    available_quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    condition: Mapped[str] = mapped_column(String, nullable=False, default="Good")
    status: Mapped[str] = mapped_column(String, nullable=False, default="Active")

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class BorrowerORM(Base):
    __tablename__ = "borrowers"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    role: Mapped[str] = mapped_column(String, nullable=False)
    class_name: Mapped[str | None] = mapped_column(String, nullable=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class LoanORM(Base):
    __tablename__ = "loans"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_loans_quantity_positive"),
    )

    id: Mapped[str] = mapped_column(String, primary_key=True)
    borrower_id: Mapped[str] = mapped_column(String, ForeignKey("borrowers.id"), nullable=False, index=True)
    asset_id: Mapped[str] = mapped_column(String, ForeignKey("assets.id"), nullable=False, index=True)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    loan_date: Mapped[date] = mapped_column(Date, nullable=False)
    planned_return_date: Mapped[date] = mapped_column(Date, nullable=False)
    actual_return_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    condition_on_loan: Mapped[str] = mapped_column(String, nullable=False, default="Good")
    condition_on_return: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="Borrowed", index=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)


class MaintenanceORM(Base):
    __tablename__ = "maintenance"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    asset_id: Mapped[str] = mapped_column(String, ForeignKey("assets.id"), nullable=False, index=True)
    loan_id: Mapped[str | None] = mapped_column(String, ForeignKey("loans.id"), nullable=True)

    maintenance_date: Mapped[date] = mapped_column(Date, nullable=False)
    technician: Mapped[str | None] = mapped_column(String, nullable=True)
    estimated_cost: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(String, nullable=False, default="In Progress", index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
