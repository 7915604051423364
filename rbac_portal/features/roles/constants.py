"""
Attribute catalog and reference lists for role definitions.
"""
import enum


class Attribute(str, enum.Enum):
    """The six dimensions a role's permissions are scoped by."""
    COMPANY = "Company"
    FUNCTION = "Function"
    OPERATION = "Operation"
    SHIP = "Ship"
    DEPARTMENT = "Department"
    JOB_TITLE = "Job Title"


# Evaluation and display order
ATTRIBUTES: tuple[Attribute, ...] = (
    Attribute.COMPANY,
    Attribute.FUNCTION,
    Attribute.OPERATION,
    Attribute.SHIP,
    Attribute.DEPARTMENT,
    Attribute.JOB_TITLE,
)

# Scope sentinels
ALL = "All"
DYNAMIC = "Dynamic"

# assigned_by value of rule-driven grants
AUTO_ASSIGNER = "Auto"

UNKNOWN_ROLE_NAME = "Unknown Role"

# Known values offered by the role editor per attribute.
# Evaluation never depends on this list; values outside it still match literally.
ATTRIBUTE_VALUES: dict[Attribute, list[str]] = {
    Attribute.COMPANY: ["CH01", "CH02", "DE01", "FR01"],
    Attribute.FUNCTION: ["Catering", "Nautical"],
    Attribute.OPERATION: ["CHO", "FRR", "RHELMO"],
    Attribute.SHIP: ["ALR", "ATL", "BLD", "BEY"],
    Attribute.DEPARTMENT: ["Front Office", "F&B", "Deck", "Engine"],
    Attribute.JOB_TITLE: [
        "Captain", "Supervisor", "Corporate Captain", "HR",
        "Hotel Manager", "Maitre D", "Nautic Scheduler",
    ],
}

APP_LIST: list[str] = [
    "VPP", "Crew Schedule", "Import Manager", "Work Order",
    "Authority Report", "FR Authority Report", "License View",
    "VPP Plan Download", "VPP Payroll Download", "Roster Create",
    "Roster Assignment",
]

DAY_TYPE_OPTIONS: list[str] = [
    ALL, "W", "W1", "W-am", "W-pm", "WX", "V", "DO", "T", "TH", "X", "F", "NA",
]
