"""
analytics — import configuration, data import and read-back of metric rows.
"""
