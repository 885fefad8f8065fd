"""
Command-line tools. Run as python -m backend_txreport.tools.<name>.
"""
