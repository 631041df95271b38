"""Microplate data model: wells, well sets, plates and stacks."""
