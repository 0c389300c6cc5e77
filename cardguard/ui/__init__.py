"""
Web interface for CardGuard.
"""
