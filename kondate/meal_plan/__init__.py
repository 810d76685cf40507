# -*- coding: utf-8 -*-
"""Meal plan domain: prompt building, provider calls and reply validation.

The HTTP endpoints live in `kondate.meal_plan.api`; the in-process entry points
used by the UI live in `kondate.meal_plan.actions`.
"""
