"""
Report and error notifications (Slack, email).
"""
