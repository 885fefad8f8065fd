"""
API server package: HTTP interface for report generation and scheduler control.
"""
