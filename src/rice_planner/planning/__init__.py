"""
Planning core.

Components:
- task_models.py: data structures (Task, ImpactTier, PlanResult) + wire mapping
- scoring.py: the RICE-style score formula
- task_store.py: in-memory ordered task pool (pool/ranked views)
- capacity.py: greedy capacity-constrained sprint planner
- sync.py: fan-out/fan-in scoring against the remote service, optimistic delete
"""
