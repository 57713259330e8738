"""
Services for field-force report aggregation and export.
"""
