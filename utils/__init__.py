"""Utility helpers for the profile questionnaire."""
