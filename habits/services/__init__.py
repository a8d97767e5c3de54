"""
Habit services: day keys, completion ledger, habit store, tag index and the
service that keeps the counters consistent with the ledger.
"""
