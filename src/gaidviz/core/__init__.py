"""Data aggregation and color mapping for the GAID survey dashboard.

Pure pandas/numpy code: no UI imports except the io_bound wrapper in data_loader.
"""
