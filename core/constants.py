"""
Core — Constants

Audit action names and pagination limits shared across apps.

@file core/constants.py
"""

AUDIT_ACTION_CREATE = 'CREATE'
AUDIT_ACTION_UPDATE = 'UPDATE'

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 200

# Upper bound of the PositiveIntegerField quantity columns (PostgreSQL integer).
MAX_LEDGER_QUANTITY = 2_147_483_647
# Upper bound of BigAutoField primary keys.
MAX_RECORD_ID = 9_223_372_036_854_775_807
