"""Reusable building blocks shared by the verticals.

- rules_engine: pure field checks that collect every violation at once
- repository: owner-scoped async repository with paging
"""
