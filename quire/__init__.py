"""
QUIRE - Quantity-Unified Resume Imposition Engine

Schedules pre-authored resume content onto a fixed page budget. Given a
candidate's work history and a target job, it reconciles a consistent
employment timeline and then decides how many bullets of each job fit into
the target page count without orphaned headings or near-empty last pages.

Architecture:
- Timeline Context: Experience requirement parsing and timeline reconciliation
- Layout Context: Strategy selection, block extraction, page simulation, allocation
- Rendering Context: Measurement and final pagination backend, post-render validation
"""

__version__ = "0.1.0"
