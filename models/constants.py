from decimal import Decimal

# NUMERIC(10,2): eight integer digits, two decimals
MONEY_PLACES = Decimal("0.01")
MONEY_LIMIT = Decimal("100000000")