"""
Business constants for the position tracker.

Every number that drives valuation, guarantee classification or display
formatting lives here so callers never hardcode it.
"""
from __future__ import annotations

from decimal import Decimal

# =============================================================================
# GUARANTEE CEILING
# =============================================================================

# Per-issuer deposit guarantee coverage (local currency)
GUARANTEE_LIMIT = Decimal("250000")

# Fraction of the ceiling above which an issuer is flagged WARNING
WARNING_RATIO = Decimal("0.8")

# =============================================================================
# VALUATION
# =============================================================================

# Fixed-length year, no leap-year adjustment
DAYS_PER_YEAR = 365

# Income tax bounds (percent, applied to profit only)
MIN_TAX_RATE = Decimal("0")
MAX_TAX_RATE = Decimal("22.5")

# =============================================================================
# FORM DEFAULTS
# =============================================================================

DEFAULT_RATE_TYPE = "OVERNIGHT"
DEFAULT_RATE_VALUE = Decimal("100")  # 100% of the overnight benchmark
DEFAULT_TAX_RATE = Decimal("15")
DEFAULT_TERM_DAYS = 365
DEFAULT_TITLE = "CDB"

# =============================================================================
# DISPLAY
# =============================================================================

CURRENCY_SYMBOL = "R$"
THOUSANDS_SEPARATOR = "."
DECIMAL_SEPARATOR = ","
CURRENCY_QUANTUM = Decimal("0.01")
DATE_FORMAT_DISPLAY = "%d/%m/%Y"
DATE_FORMAT_STORAGE = "%Y-%m-%d"

# Suggestions offered by the entry form; any free-form name is accepted
MAJOR_INTERMEDIARIES = sorted([
    "XP Investimentos", "Rico", "Clear", "BTG Pactual", "NuInvest",
    "Inter Invest", "Ágora Investimentos", "Genial Investimentos",
    "Toro Investimentos", "Órama", "ModalMais", "Guide Investimentos",
    "Avenue", "Nomad", "Warren", "Banco Inter", "C6 Bank",
])

MAJOR_ISSUERS = sorted([
    "Banco do Brasil", "Bradesco", "Itaú Unibanco", "Santander",
    "Caixa Econômica Federal", "Banco Inter", "BTG Pactual",
    "Banco Safra", "Banco Daycoval", "Banco Pan", "Banco BMG",
    "Banco ABC Brasil", "Banco Pine", "Banco Original",
    "Banco Modal", "Banco Master", "Banco XP", "C6 Bank",
    "NuBank", "Sofisa Direto", "Banco Bari", "Banco Agibank",
])

TITLES = ["CDB", "LCI", "LCA", "LC", "RDB"]
