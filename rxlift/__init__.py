"""
Rx Targeting & Lift Projection Engine

Library core for prescriber-targeted campaigns:
- Audience sizing from targeting filters
- Simulated identity matching against a provider registry
- Script-lift configuration and projected-volume aggregation
- What-if audience comparison
"""

__version__ = "0.1.0"
