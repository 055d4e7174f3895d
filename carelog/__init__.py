"""Caregiving record schemas, validation and timeline aggregation.

This package contains the record-kind catalog, the field coercion and
validation rules and the unified event timeline, isolated from storage,
transport and presentation so they can be tested in isolation.
"""
