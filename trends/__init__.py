"""UI-agnostic analytics for epidemiological dashboards.

This package contains:
- moving averages and doubling-time estimation
- municipality / region roll-up of daily snapshots
- query normalization and the filter/sort selection of places
- the country comparison series
- payload functions returning JSON-serializable dicts
"""
