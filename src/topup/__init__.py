"""
Topup: company token top-up reports.

This package loads company and user records from JSON, splits each
company's users into emailed and not emailed cohorts, and writes a
text report of the resulting token balances.
"""

from importlib.metadata import version

__version__ = version("token-topup")

__all__ = ["__version__"]
