"""Peptide reference library used to pre-fill the calculators.

These are EDUCATIONAL reference ranges only, not medical advice.
"""

from typing import Any, Dict, List, Optional

PEPTIDES: List[Dict[str, Any]] = [
    {
        "id": "bpc157",
        "name": "BPC-157",
        "scientific_name": "Body Protection Compound-157",
        "category": "recovery",
        "dosing_range": {"min": 200, "max": 500, "unit": "mcg",
                         "frequency": "daily or twice daily", "cycle_length": "4-8 weeks"},
        "storage": "Store reconstituted solution in refrigerator (2-8°C)",
    },
    {
        "id": "tb500",
        "name": "TB-500",
        "scientific_name": "Thymosin Beta-4 Fragment",
        "category": "recovery",
        "dosing_range": {"min": 2, "max": 5, "unit": "mg",
                         "frequency": "twice weekly", "cycle_length": "6-12 weeks"},
        "storage": "Store reconstituted solution in refrigerator (2-8°C)",
    },
    {
        "id": "ipamorelin",
        "name": "Ipamorelin",
        "scientific_name": "Growth Hormone Releasing Peptide",
        "category": "growth_factors",
        "dosing_range": {"min": 200, "max": 500, "unit": "mcg",
                         "frequency": "daily (typically before bed)", "cycle_length": "8-16 weeks"},
    },
    {
        "id": "cjc1295",
        "name": "CJC-1295",
        "scientific_name": "Growth Hormone Releasing Hormone Analog",
        "category": "growth_factors",
        "dosing_range": {"min": 1, "max": 2, "unit": "mg",
                         "frequency": "daily or twice weekly", "cycle_length": "8-16 weeks"},
    },
    {
        "id": "epitalon",
        "name": "Epitalon",
        "scientific_name": "Epithalamin / Tetrapeptide",
        "category": "anti_aging",
        "dosing_range": {"min": 5, "max": 10, "unit": "mg",
                         "frequency": "daily (typically before bed)",
                         "cycle_length": "10-20 days, repeated 2-3 times per year"},
    },
    {
        "id": "ghrp2",
        "name": "GHRP-2",
        "scientific_name": "Growth Hormone Releasing Peptide-2",
        "category": "growth_factors",
        "dosing_range": {"min": 100, "max": 300, "unit": "mcg",
                         "frequency": "2-3 times daily", "cycle_length": "8-16 weeks"},
    },
    {
        "id": "pt141",
        "name": "PT-141 (Bremelanotide)",
        "scientific_name": "Melanotan II Fragment",
        "category": "metabolic",
        "dosing_range": {"min": 1, "max": 2, "unit": "mg",
                         "frequency": "as needed or weekly", "cycle_length": "Varies"},
    },
    {
        "id": "semax",
        "name": "Semax",
        "scientific_name": "ACTH(4-10) Analog",
        "category": "cognitive",
        "dosing_range": {"min": 200, "max": 600, "unit": "mcg",
                         "frequency": "daily (intranasal or injection)", "cycle_length": "4-12 weeks"},
    },
    {
        "id": "selank",
        "name": "Selank",
        "scientific_name": "Thymus-Derived Peptide",
        "category": "cognitive",
        "dosing_range": {"min": 200, "max": 400, "unit": "mcg",
                         "frequency": "daily (intranasal or injection)", "cycle_length": "4-8 weeks"},
    },
    {
        "id": "ghkcu",
        "name": "GHK-Cu",
        "scientific_name": "Copper Peptide",
        "category": "skin",
        "dosing_range": {"min": 1, "max": 2, "unit": "mg",
                         "frequency": "daily or EOD", "cycle_length": "8-16 weeks"},
    },
    {
        "id": "dsip",
        "name": "DSIP",
        "scientific_name": "Delta Sleep-Inducing Peptide",
        "category": "sleep",
        "dosing_range": {"min": 100, "max": 200, "unit": "mcg",
                         "frequency": "daily (before bed)", "cycle_length": "4-8 weeks"},
    },
    {
        "id": "hexarelin",
        "name": "Hexarelin",
        "scientific_name": "Growth Hormone Releasing Hexapeptide",
        "category": "growth_factors",
        "dosing_range": {"min": 100, "max": 200, "unit": "mcg",
                         "frequency": "2-3 times daily", "cycle_length": "8-16 weeks"},
    },
]

PEPTIDE_BY_ID = {p["id"]: p for p in PEPTIDES}


def get_peptide(peptide_id: str) -> Optional[Dict[str, Any]]:
    return PEPTIDE_BY_ID.get(peptide_id)


def get_peptide_by_name(name: str) -> Optional[Dict[str, Any]]:
    """Case-insensitive lookup by display name or id"""
    wanted = name.strip().lower()
    for p in PEPTIDES:
        if p["name"].lower() == wanted or p["id"] == wanted:
            return p
    return None


def list_peptides(category: Optional[str] = None) -> List[Dict[str, Any]]:
    if category is None:
        return list(PEPTIDES)
    return [p for p in PEPTIDES if p["category"] == category]


def list_categories() -> List[str]:
    seen: List[str] = []
    for p in PEPTIDES:
        if p["category"] not in seen:
            seen.append(p["category"])
    return seen


def search_peptides(query: str) -> List[Dict[str, Any]]:
    q = query.strip().lower()
    return [
        p for p in PEPTIDES
        if q in p["name"].lower() or q in p["scientific_name"].lower()
    ]
