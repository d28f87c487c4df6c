"""
Recon2Report: turn nmap results into phase-aware attack suggestions.

The package parses nmap output, loads a JSON rule corpus describing attack
vectors per service, and evaluates an engagement's state against it to
produce ready-to-run commands.  It is served over HTTP by
:mod:`recon2report.main` and from the shell by :mod:`recon2report.cli`.
"""

__version__ = "1.0.0"
