"""
HTTP API for the recording pipeline
"""
