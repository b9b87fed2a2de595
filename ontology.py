"""
Lender Matching Domain Ontology
Selectable criteria, sentinel values and field mappings shared by the
scoring engine and the catalog loader
"""

# Location value that satisfies any requested location
NATIONWIDE = 'nationwide'

# Asset types a borrower can select
ASSET_TYPES = [
    'Multifamily',
    'Office',
    'Retail',
    'Industrial',
    'Hospitality',
    'Land',
    'Mixed-Use',
    'Self-Storage',
    'Data Center',
    'Medical Office',
    'Senior Housing',
    'Student Housing',
    'Other',
]

# Deal types
DEAL_TYPES = [
    'Acquisition',
    'Refinance',
    'Construction',
    'Bridge',
    'Development',
    'Value-Add',
    'Other',
]

# Capital structure
CAPITAL_TYPES = [
    'Senior Debt',
    'Mezzanine',
    'Preferred Equity',
    'Common Equity',
    'JV Equity',
    'Other',
]

# Loan size bands, parsed by ranges.parse_debt_range
DEBT_RANGES = [
    '$0 - $5M',
    '$5M - $25M',
    '$25M - $100M',
    '$100M+',
]

# Regions served
LOCATIONS = [
    NATIONWIDE,
    'Northeast',
    'Southeast',
    'Midwest',
    'Southwest',
    'West Coast',
    'Other',
]

# Scoring dimensions: (filter field, preference_scope key)
# Debt ranges are weighted by the lender's deal_size preference
DIMENSIONS = [
    ('asset_types', 'asset_types'),
    ('deal_types', 'deal_types'),
    ('capital_types', 'capital_types'),
    ('locations', 'locations'),
    ('debt_ranges', 'deal_size'),
]

FILTER_FIELDS = [field for field, _ in DIMENSIONS]
PREFERENCE_KEYS = [key for _, key in DIMENSIONS]

# Criteria shown on the lender detail card: criteria type -> lender/filter field
CRITERIA_TYPES = {
    'assetTypes': 'asset_types',
    'dealTypes': 'deal_types',
    'capitalTypes': 'capital_types',
    'debtRange': 'debt_ranges',
    'locations': 'locations',
}

# Selection the dashboard opens with
DEFAULT_FILTERS = {
    'asset_types': ['Multifamily'],
    'deal_types': ['Refinance'],
    'capital_types': [],
    'debt_ranges': [],
    'locations': [],
}

# Column name mappings (cleaned spreadsheet header -> LenderProfile field)
COLUMN_MAPPINGS = {
    'id': 'lender_id',
    'lender_id': 'lender_id',
    'lender': 'name',
    'lender_name': 'name',
    'name_of_lender': 'name',
    'asset_type': 'asset_types',
    'property_types': 'asset_types',
    'deal_type': 'deal_types',
    'capital_type': 'capital_types',
    'capital_structure': 'capital_types',
    'location': 'locations',
    'regions': 'locations',
    'geographies': 'locations',
    'debt_range': 'debt_ranges',
    'loan_size_bands': 'debt_ranges',
    'min_loan_size': 'min_deal_size',
    'minimum_deal_size': 'min_deal_size',
    'max_loan_size': 'max_deal_size',
    'maximum_deal_size': 'max_deal_size',
    'email': 'contact_email',
    'phone': 'contact_phone',
}

# Spreadsheet columns holding preference weights
SCOPE_COLUMN_PREFIX = 'scope_'

# Fields stored as lists of strings
LIST_FIELDS = ['asset_types', 'deal_types', 'capital_types', 'locations', 'debt_ranges']

# Known values per lender field, used to flag unrecognized catalog entries
FILTER_OPTIONS = {
    'asset_types': ASSET_TYPES,
    'deal_types': DEAL_TYPES,
    'capital_types': CAPITAL_TYPES,
    'locations': LOCATIONS,
}
