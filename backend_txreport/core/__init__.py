"""
Core cross-cutting pieces shared by the projection, client and API layers.
"""
