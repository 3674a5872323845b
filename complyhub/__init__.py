# -*- coding: utf-8 -*-
"""
ComplyHub - Compliance Management Platform SDK
==============================================

Library components for the ComplyHub compliance-management platform.

Sub-packages:
    - cross_standard: Cross-Standard Integration Engine (equivalence
      classes, integration score, consolidated readiness, shared
      requirements matrix, gap cascades, document suggestions)

Modules:
    - exceptions: ComplyHub exception hierarchy
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
