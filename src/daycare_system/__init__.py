"""Daycare attendance package.

Organized by feature modules (children, attendance, activities, reports)
with a thin Flask controller layer over service/repository layers.
"""
