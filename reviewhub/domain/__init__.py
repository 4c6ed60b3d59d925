# Domain Layer
# ============
# Pure business rules with no I/O:
# - errors:     closed error taxonomy shared by every layer
# - identity:   authenticated vs anonymous caller identity
# - likes:      like/unlike reconciliation over the embedded like ledger
# - products:   product payload validation
