"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_POLL_INTERVAL_SECONDS = 60
DEFAULT_LIST_LIMIT = 200

# Failure messages are concatenated as-is into Request.fail_message.
DATE_IS_LATER_THAN_TODAY = "Request date is later than today."
EMPLOYEE_HAS_NO_EMPLOYMENT_IN_LOCATION = "Employee {code} has no active employment in location {location}."
CLOCK_STATUS_NOT_VALID = "Employee {code} has a record with invalid clock status {value}."
CLOCK_VALUE_NOT_VALID = "Employee {code} has a record with clock value later than today."
