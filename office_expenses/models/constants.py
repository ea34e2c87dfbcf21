"""Domain constants and enumerations for validation.

The office expense taxonomy is fixed configuration: category name mapped to
its ordered subcategory list. Dict insertion order is the display order.
"""

from typing import Dict, List, Tuple

EXPENSE_TYPES: Dict[str, List[str]] = {
    "Office Supplies": [
        "Stationery",
        "Printing",
        "Pens & Markers",
        "Notepads",
        "Staples & Clips",
    ],
    "Technology": [
        "Computers",
        "Software",
        "Printers",
        "Servers",
        "Networking",
        "Peripherals",
    ],
    "Furniture": [
        "Desks",
        "Chairs",
        "Storage",
        "Conference Tables",
        "Reception Furniture",
    ],
    "Utilities": ["Electricity", "Water", "Internet", "Phone", "Heating/Cooling"],
    "Maintenance": [
        "Cleaning",
        "Repairs",
        "Janitorial",
        "Pest Control",
        "Landscaping",
    ],
    "Rent": ["Office Space", "Parking", "Storage Units", "Equipment Rental"],
    "Travel": ["Flights", "Hotels", "Meals", "Transportation", "Conferences"],
    "Marketing": [
        "Advertising",
        "Print Materials",
        "Digital Ads",
        "Promotional Items",
    ],
    "Professional Services": ["Legal", "Accounting", "Consulting", "IT Support"],
    "Employee Expenses": [
        "Training",
        "Team Lunches",
        "Recognition",
        "Health & Wellness",
    ],
    "Insurance": ["Property", "Liability", "Health", "Workers Comp"],
    "Taxes": ["Property Tax", "Sales Tax", "Payroll Tax", "Business Tax"],
    "Communication": ["Postage", "Courier", "Broadband", "Mobile Plans"],
    "Security": [
        "Alarm Systems",
        "Surveillance",
        "Security Personnel",
        "Cybersecurity",
    ],
    "Miscellaneous": ["Bank Fees", "Office Plants", "Coffee/Water", "Donations"],
}

CATEGORIES: Tuple[str, ...] = tuple(EXPENSE_TYPES)

# Branch tag -> display label
BRANCHES: Dict[str, str] = {
    "BranchA": "Branch A",
    "BranchB": "Branch B",
}


def is_valid_subcategory(category: str, subcategory: str) -> bool:
    return subcategory in EXPENSE_TYPES.get(category, ())
