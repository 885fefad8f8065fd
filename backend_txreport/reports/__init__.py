"""
Report generation: date ranges, projections written to CSV/JSON/HTML.
"""
