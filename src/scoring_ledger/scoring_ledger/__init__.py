"""Scoring Ledger package.

Feature modules (conditions, scoring, ledger, students) with a thin Flask
controller layer over service/repository layers. Scoring logic lives in the
services and strategies; repositories are injected so the core runs without a
live database.
"""
