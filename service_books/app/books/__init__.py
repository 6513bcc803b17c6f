"""
Book models for the Books Service.
"""
