from __future__ import annotations

from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .aggregation import DashboardSnapshot
from .stores import LedgerEntry, Profile, ProfileTotal
from .validation import round_cents


def money(value: Decimal) -> float:
    return float(round_cents(value))


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class UserOut(BaseModel):
    id: int
    username: str


class LoginResponse(BaseModel):
    success: bool = True
    token: str
    user: UserOut


class ChangePasswordRequest(_CamelModel):
    current_password: str = Field(default="", alias="currentPassword")
    new_password: str = Field(default="", alias="newPassword")


class ProfileRequest(BaseModel):
    name: str = ""
    color: Optional[str] = None


class ProfileOut(BaseModel):
    id: int
    name: str
    color: Optional[str] = None
    active: bool
    created_at: Optional[str] = None

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileOut":
        return cls(**profile.to_dict())


class SaleItem(_CamelModel):
    profile_id: int = Field(alias="profileId")
    amount: Optional[Union[Decimal, str]] = None


class SaveSalesRequest(BaseModel):
    date: str
    sales: List[SaleItem]
    notes: Optional[str] = None


class SaleOut(BaseModel):
    id: int
    date: str
    profile_id: int
    profile_name: Optional[str] = None
    profile_color: Optional[str] = None
    amount: float
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> "SaleOut":
        return cls(
            id=entry.id,
            date=entry.date,
            profile_id=entry.profile_id,
            profile_name=entry.profile_name,
            profile_color=entry.profile_color,
            amount=money(entry.amount),
            notes=entry.notes,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class ProfileTotalOut(BaseModel):
    id: int
    name: str
    color: Optional[str] = None
    total: float

    @classmethod
    def from_total(cls, item: ProfileTotal) -> "ProfileTotalOut":
        return cls(
            id=item.profile.id,
            name=item.profile.name,
            color=item.profile.color,
            total=money(item.total),
        )


class DashboardStats(_CamelModel):
    total_sales: float = Field(serialization_alias="totalSales")
    sales_by_profile: List[ProfileTotalOut] = Field(serialization_alias="salesByProfile")
    monthly_target: float = Field(serialization_alias="monthlyTarget")
    current_month_sales: float = Field(serialization_alias="currentMonthSales")
    last_month_sales: float = Field(serialization_alias="lastMonthSales")
    target_progress_percent: float = Field(serialization_alias="targetProgressPercent")

    @classmethod
    def from_snapshot(cls, snapshot: DashboardSnapshot) -> "DashboardStats":
        return cls(
            total_sales=money(snapshot.total_sales),
            sales_by_profile=[ProfileTotalOut.from_total(item) for item in snapshot.sales_by_profile],
            monthly_target=money(snapshot.monthly_target),
            current_month_sales=money(snapshot.current_month_sales),
            last_month_sales=money(snapshot.last_month_sales),
            target_progress_percent=money(snapshot.target_progress_percent),
        )


class TargetRequest(BaseModel):
    target: Optional[Union[Decimal, str]] = None
