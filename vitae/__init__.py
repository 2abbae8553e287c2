"""
vitae - one master resume, many tailored variants

A resume management library that keeps a single master resume as the source of
truth and derives variants from it through declarative rules, overrides and
section settings.

Architecture:
- Documents Context: Entity schemas (master resume, variants, templates, jobs, cover letters)
- Resolution Context: Rule evaluation, override application, section composition
- Portability Context: Section import/export, backup bundles, document store
"""

__version__ = "0.1.0"
