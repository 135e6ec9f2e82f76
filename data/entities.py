"""Read-only business record snapshots consumed by the rule evaluator."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class ProductPackage:
    id: str
    name: str


@dataclass(frozen=True)
class Order:
    id: str
    code: str
    status: str
    payment_status: str
    created_at: datetime
    expiry_date: datetime
    package_id: str | None = None


@dataclass(frozen=True)
class InventoryProfileSlot:
    id: str
    label: str = ""
    needs_update: bool = False


@dataclass(frozen=True)
class InventoryItem:
    id: str
    code: str
    is_account_based: bool = False
    profiles: tuple[InventoryProfileSlot, ...] = ()

    @property
    def profiles_needing_update(self) -> list[InventoryProfileSlot]:
        return [p for p in self.profiles if p.needs_update]


@dataclass(frozen=True)
class Warranty:
    id: str
    code: str
    status: str
    created_at: datetime
    order_id: str | None = None


@dataclass
class EntitySnapshot:
    """Current collections of the records notifications are derived from."""
    orders: list[Order] = field(default_factory=list)
    packages: list[ProductPackage] = field(default_factory=list)
    inventory: list[InventoryItem] = field(default_factory=list)
    warranties: list[Warranty] = field(default_factory=list)

    def package_name(self, package_id: str | None) -> str | None:
        for package in self.packages:
            if package.id == package_id:
                return package.name
        return None
