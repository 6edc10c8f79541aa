"""
Billing core: invoice lifecycle, payment links, notifications and bulk dispatch.
"""

__version__ = "1.0.0"
