"""Routing — priority-ordered route and layout table with linear matching.

Routes and layouts are registered during setup; each lookup scans the
table in priority order and tie-breaks between matching candidates.
"""
