"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EMPLOYEE_CODE_PREFIX = "EMP"
EMPLOYEE_CODE_WIDTH = 3
HOURS_DECIMALS = 2
MONEY_QUANT = "0.01"
DEFAULT_LIST_LIMIT = 500
