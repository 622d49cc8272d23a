"""Background workers

Each worker can run once (cron) or loop on an interval:

    python -m economy.worker.promotion_expirer --once
    python -m economy.worker.purchase_sweeper --interval 900
    python -m economy.worker.ledger_reconciler
"""
