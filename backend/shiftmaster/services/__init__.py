"""
ShiftMaster Backend — Services Layer
======================================

What:  Reporting logic sitting between routes (HTTP) and the data store.
How:   Pure computation where possible; the only I/O goes through an
       injected DataStore.

Service Inventory:
    - reporting_windows:     today / this-week windows for a given instant
    - data_store:            DataStore contract, filters, SQLAlchemy implementation
    - aggregate_dispatcher:  concurrent, fail-fast count batches
    - summary_assembler:     named results → DashboardSummary
    - dashboard_service:     wires the above for GET /api/dashboard/stats
"""
