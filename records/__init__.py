"""Clinic records application.

Accounts for the practitioner and patients, role-gated access to each
patient's medical note, and the real-time notification channel.
"""
