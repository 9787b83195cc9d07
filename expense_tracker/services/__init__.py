"""Services: persistence for the ledger."""
