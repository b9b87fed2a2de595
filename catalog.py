#!/usr/bin/env python3
"""
Lender catalog loading - reads lender profiles from a spreadsheet or JSON
export into memory and validates them before they reach the matching engine
"""

import json
import logging
import math
import os
import re
from typing import Optional, List, Dict, Any, Iterable

import pandas as pd
from pydantic import ValidationError

from matching import LenderProfile
from ontology import COLUMN_MAPPINGS, SCOPE_COLUMN_PREFIX, LIST_FIELDS, PREFERENCE_KEYS, FILTER_OPTIONS

logger = logging.getLogger(__name__)

CATALOG_PATH = os.environ.get("LENDER_CATALOG_PATH", "lenders.xlsx")

# Amounts inside debt ranges may carry thousands separators
LIST_SEPARATORS = r'[,;|\n]'
DEBT_RANGE_SEPARATORS = r'[;|\n]'

TEXT_FIELDS = ['name', 'description', 'contact_email', 'contact_phone']


class CatalogValidationError(ValueError):
    """A lender record the engine should not be given"""


def clean_column_name(col):
    """Convert spreadsheet column names to clean field names"""
    col = str(col).lower().strip()
    col = re.sub(r'[^a-z0-9_]', '_', col)
    col = re.sub(r'_+', '_', col)
    col = col.strip('_')
    return col


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


def split_list_cell(value, separators: str = LIST_SEPARATORS) -> List[str]:
    """"Office, Retail" -> ["Office", "Retail"]. Lists pass through."""
    if is_blank(value):
        return []
    if isinstance(value, (list, tuple, set)):
        return [str(v).strip() for v in value if not is_blank(v)]
    return [part.strip() for part in re.split(separators, str(value)) if part.strip()]


def row_to_record(row: Dict[str, Any]) -> Dict[str, Any]:
    """Map one spreadsheet row (cleaned headers) onto LenderProfile fields"""
    record = {}
    scope = {}

    for col, value in row.items():
        if is_blank(value):
            continue
        if hasattr(value, 'item'):  # numpy scalar
            value = value.item()
        if col.startswith(SCOPE_COLUMN_PREFIX):
            scope[col[len(SCOPE_COLUMN_PREFIX):]] = value
            continue
        field = COLUMN_MAPPINGS.get(col, col)
        if field in LIST_FIELDS:
            separators = DEBT_RANGE_SEPARATORS if field == 'debt_ranges' else LIST_SEPARATORS
            record[field] = split_list_cell(value, separators)
        elif field in TEXT_FIELDS:
            record[field] = str(value).strip()
        else:
            record[field] = value

    if scope:
        record['preference_scope'] = scope
    return record


def validate_lender_record(record: Dict[str, Any]) -> LenderProfile:
    """
    Validate one lender record.

    The scorer itself accepts any weights; out-of-range preference scopes
    and inverted deal size bounds are rejected here instead.
    """
    try:
        lender = LenderProfile.model_validate(record)
    except ValidationError as e:
        raise CatalogValidationError(str(e)) from e

    label = lender.name or lender.lender_id
    for key in PREFERENCE_KEYS:
        weight = getattr(lender.preference_scope, key)
        if not 0 <= weight <= 1:
            raise CatalogValidationError(f"{label}: preference_scope.{key}={weight} outside [0, 1]")

    if lender.min_deal_size > lender.max_deal_size:
        raise CatalogValidationError(
            f"{label}: min_deal_size {lender.min_deal_size:,.0f} above max_deal_size {lender.max_deal_size:,.0f}"
        )

    return lender


def unrecognized_criteria(lender: LenderProfile) -> Dict[str, List[str]]:
    """Values outside the dashboard's options; they can never match a filter"""
    unknown = {}
    for field, options in FILTER_OPTIONS.items():
        values = [v for v in getattr(lender, field) if v not in options]
        if values:
            unknown[field] = values
    return unknown


def lenders_from_records(records: Iterable[Dict[str, Any]]) -> List[LenderProfile]:
    """Validate records, skipping (and logging) the ones that fail"""
    lenders = []
    for i, record in enumerate(records):
        try:
            lender = validate_lender_record(record)
        except CatalogValidationError as e:
            logger.warning("Skipping lender record %d: %s", i, e)
            continue
        for field, values in unrecognized_criteria(lender).items():
            logger.info("Lender %s has unrecognized %s: %s", lender.name or i, field, ", ".join(values))
        lenders.append(lender)
    return lenders


def read_records(path: str) -> List[Dict[str, Any]]:
    """Read raw lender records from .xlsx/.xls, .csv or .json"""
    if not os.path.exists(path):
        raise FileNotFoundError(f"Lender catalog not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    if ext == '.json':
        with open(path) as f:
            data = json.load(f)
        if isinstance(data, dict):
            data = data.get('lenders', [])
        return list(data)

    if ext in ('.xlsx', '.xls'):
        df = pd.read_excel(path)
    elif ext == '.csv':
        df = pd.read_csv(path)
    else:
        raise ValueError(f"Unsupported catalog format: {ext or path}")

    df.columns = [clean_column_name(c) for c in df.columns]
    df = df.dropna(how='all')
    return [row_to_record(row) for row in df.to_dict(orient='records')]


def load_catalog(path: str = CATALOG_PATH) -> List[LenderProfile]:
    """Load and validate a lender catalog"""
    records = read_records(path)
    lenders = lenders_from_records(records)
    logger.info("Loaded %d of %d lenders from %s", len(lenders), len(records), path)
    return lenders


def get_lender_by_id(lenders: Iterable[LenderProfile], lender_id: int) -> Optional[LenderProfile]:
    return next((l for l in lenders if l.lender_id == lender_id), None)


if __name__ == "__main__":
    import sys
    logging.basicConfig(level=logging.INFO, format='%(levelname)s %(name)s: %(message)s')

    path = sys.argv[1] if len(sys.argv) > 1 else CATALOG_PATH

    print("=" * 60)
    print("LENDER CATALOG")
    print("=" * 60)

    lenders = load_catalog(path)
    print(f"Catalog: {path}")
    print(f"Lenders loaded: {len(lenders)}")
    for lender in lenders:
        ranges = ", ".join(lender.debt_ranges or []) or f"{lender.min_deal_size:,.0f} - {lender.max_deal_size:,.0f}"
        print(f"  {str(lender.lender_id or ''):>4} {lender.name[:40]:40s} {ranges}")
