"""Meal import service application package."""
