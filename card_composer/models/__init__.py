"""
Pydantic models for the layout table and the HTTP schemas.
"""
