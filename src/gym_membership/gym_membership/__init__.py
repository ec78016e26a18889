"""Gym Membership package.

The package is organized by feature modules (students, plans, memberships,
checkins, ...) with pure decision logic in the feature modules and a single
transactional facade (``engine``) in front of them.
"""
