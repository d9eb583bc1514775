"""
Sales app: checkout core and immutable sales history.
"""
