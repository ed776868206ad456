"""Suggested cost lines for each product category.

Amounts are in currency units; projects hold them in thousands, see
``services.cost_structure.merge_catalog_defaults``.
"""
from __future__ import annotations

from typing import Dict, List, Tuple

from pydantic import BaseModel, Field

from .models.common import ProductCategory, flat_series
from .models.costs import OneTimeCostItem, UserCostItem


class CostSuggestions(BaseModel):
    fixed_costs: List[UserCostItem] = Field(default_factory=list)
    variable_costs: List[UserCostItem] = Field(default_factory=list)
    one_time_costs: List[OneTimeCostItem] = Field(default_factory=list)


# (id, name, monthly amount, icon)
RecurringRow = Tuple[str, str, float, str]
# (id, name, amount, icon)
OneTimeRow = Tuple[str, str, float, str]

FIXED_UNIT = "monthly"
VARIABLE_UNIT = "total monthly cost"

COMMON_FIXED: List[RecurringRow] = [
    ("monthly-maintenance", "Monthly Maintenance", 50, "wrench"),
]

COMMON_VARIABLE: List[RecurringRow] = [
    ("cloud-hosting", "Cloud hosting", 1500, "cloud"),
]

COMMON_ONE_TIME: List[OneTimeRow] = [
    ("system-design", "Initial system design and architecture", 25000, "blueprint"),
    ("security-assessment", "Security assessments and penetration testing", 15000, "shield-check"),
    ("deployment-costs", "Go-live deployment costs", 8000, "rocket"),
    ("training-docs", "Initial training and documentation", 12000, "book"),
]

CATEGORY_FIXED: Dict[ProductCategory, List[RecurringRow]] = {
    ProductCategory.INFRASTRUCTURE: [
        ("plant-equipment-maintenance", "Plant & Equipment Maintenance", 15000, "cog"),
        ("utilities-power-cooling", "Utilities (power/cooling)", 5500, "zap"),
    ],
    ProductCategory.PLATFORM: [
        ("dev-portal-maintenance", "Developer portal maintenance", 2200, "code"),
    ],
    ProductCategory.APPLICATIONS: [
        ("ui-ux-teams", "UI/UX design teams", 8500, "palette"),
        ("app-store-registration", "App store registrations", 100, "smartphone"),
    ],
}

CATEGORY_VARIABLE: Dict[ProductCategory, List[RecurringRow]] = {
    ProductCategory.INFRASTRUCTURE: [
        ("bandwidth-charges", "Bandwidth charges", 3000, "wifi"),
        ("cross-region-replication", "Cross-region replication", 2400, "globe"),
        ("hardware-scaling", "Hardware scaling costs", 3600, "server"),
    ],
    ProductCategory.PLATFORM: [
        ("dev-onboarding", "Developer onboarding", 1500, "user-plus"),
        ("multitenant-resources", "Multi-tenant resources", 3600, "database"),
        ("api-gateway", "API gateway", 2400, "layers"),
        ("portal-maintenance", "Portal maintenance", 1800, "globe"),
        ("penetration-testing", "Penetration testing", 1200, "shield"),
    ],
    ProductCategory.APPLICATIONS: [
        ("push-notifications-postman", "Push notifications/Postman", 450, "mail"),
        ("app-store-fees", "App store transaction fees", 900, "credit-card"),
        ("user-analytics", "User analytics", 1200, "bar-chart"),
        ("app-security-testing", "App security testing", 1200, "shield"),
    ],
}

CATEGORY_ONE_TIME: Dict[ProductCategory, List[OneTimeRow]] = {
    ProductCategory.INFRASTRUCTURE: [
        ("datacenter-setup", "Data centre setup", 50000, "server"),
        ("disaster-recovery", "Disaster recovery establishment", 30000, "life-buoy"),
        ("onprem-servers", "On-prem servers and networking", 75000, "server"),
        ("vendor-setup", "Vendor set up costs", 20000, "building"),
    ],
    ProductCategory.PLATFORM: [
        ("sdk-development", "SDK development", 40000, "package"),
        ("partner-integration", "Partner integration frameworks", 25000, "git-branch"),
    ],
    ProductCategory.APPLICATIONS: [
        ("mobile-app-dev", "Mobile app development", 35000, "smartphone"),
        ("accessibility-audits", "Accessibility audits", 8000, "accessibility"),
    ],
}


def _recurring(rows: List[RecurringRow], unit: str, is_common: bool) -> List[UserCostItem]:
    return [
        UserCostItem(id=item_id, name=name, monthly_amounts=flat_series(amount), icon=icon, unit=unit, is_common=is_common)
        for item_id, name, amount, icon in rows
    ]


def _one_time(rows: List[OneTimeRow], is_common: bool) -> List[OneTimeCostItem]:
    return [OneTimeCostItem(id=item_id, name=name, amount=amount, icon=icon, is_common=is_common) for item_id, name, amount, icon in rows]


def _as_category(category) -> ProductCategory | None:
    if isinstance(category, ProductCategory):
        return category
    try:
        return ProductCategory(str(category))
    except ValueError:
        return None


def get_cost_suggestions(category) -> CostSuggestions:
    key = _as_category(category)
    return CostSuggestions(
        fixed_costs=_recurring(COMMON_FIXED, FIXED_UNIT, True) + _recurring(CATEGORY_FIXED.get(key, []), FIXED_UNIT, False),
        variable_costs=_recurring(COMMON_VARIABLE, VARIABLE_UNIT, True) + _recurring(CATEGORY_VARIABLE.get(key, []), VARIABLE_UNIT, False),
        one_time_costs=_one_time(COMMON_ONE_TIME, True) + _one_time(CATEGORY_ONE_TIME.get(key, []), False),
    )
