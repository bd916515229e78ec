"""
Report data carriers.

Plain records filled in by the report service; every field stays None
until it is populated.
"""
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional


@dataclass
class CategoryPerformanceDTO:
    id: Optional[int] = None
    name: Optional[str] = None
    revenue: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    profit: Optional[Decimal] = None
    roi: Optional[Decimal] = None
    quantity: Optional[int] = None


@dataclass
class ProductPerformanceDTO:
    id: Optional[int] = None
    name: Optional[str] = None
    quantity: Optional[int] = None
    revenue: Optional[Decimal] = None
    cost: Optional[Decimal] = None
    profit: Optional[Decimal] = None
    profit_margin: Optional[Decimal] = None
    roi: Optional[Decimal] = None


@dataclass
class SupplierPerformanceDTO:
    id: Optional[int] = None
    name: Optional[str] = None
    revenue: Optional[Decimal] = None
    # Sold line items of this supplier's products
    product_count: Optional[int] = None


@dataclass
class StockStatusDTO:
    in_stock: Optional[int] = None
    low_stock: Optional[int] = None
    out_of_stock: Optional[int] = None


@dataclass
class InventoryStatsDTO:
    total_items_in_stock: Optional[int] = None
    total_inventory_value: Optional[Decimal] = None
    average_profit_margin: Optional[Decimal] = None
    total_items_sold: Optional[int] = None


@dataclass
class SummaryMetricsDTO:
    total_revenue: Optional[Decimal] = None
    total_profit: Optional[Decimal] = None
    profit_margin_percent: Optional[Decimal] = None
    roi_percent: Optional[Decimal] = None
    turnover_rate: Optional[Decimal] = None
    total_sales: Optional[int] = None
    total_products: Optional[int] = None


@dataclass
class RecommendationDTO:
    # success, warning, info or error
    type: Optional[str] = None
    icon: Optional[str] = None
    title: Optional[str] = None
    message: Optional[str] = None
    action: Optional[str] = None


@dataclass
class SalesTrendDTO:
    labels: List[date] = field(default_factory=list)
    revenue: List[Decimal] = field(default_factory=list)
    profit: List[Decimal] = field(default_factory=list)
