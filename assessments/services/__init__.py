"""
ESG engine services: merging, point rules, completion, score aggregation,
dashboards and the record lifecycle built on top of them.
"""
